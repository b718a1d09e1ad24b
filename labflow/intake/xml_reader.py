"""
Reader for the tree intake format (``<samples><sample>...</sample></samples>``).
"""

import xml.etree.ElementTree as ET

from labflow.core.errors import ErrorCode, IntakeError
from labflow.core.models import NormalizedSample

from .normalizer import normalize_record

SAMPLE_FIELDS = ("id", "patientId", "specimenType", "status", "value", "unit", "collectedAt", "accession")


class XmlReader:
    """
    Parses an XML sample list into normalized samples.

    Every ``<sample>`` that is a direct child of a ``<samples>`` element is a
    record; its named child elements supply the field texts.
    """

    source = "xml"

    def read(self, text: str) -> list[NormalizedSample]:
        """
        Parse and normalize an XML batch.

        Args:
            text: Raw XML text

        Returns:
            Normalized samples in document order

        Raises:
            IntakeError: E009 when the document is malformed or holds no samples
        """
        try:
            root = ET.fromstring(text.strip())
        except ET.ParseError:
            raise IntakeError(ErrorCode.XML_PARSE, "E009 XML parse error: Malformed XML.")

        if root.tag == "samples":
            nodes = root.findall("sample")
        else:
            nodes = root.findall(".//samples/sample")

        if not nodes:
            raise IntakeError(
                ErrorCode.XML_PARSE, "XML must contain <samples><sample>..</sample></samples>."
            )

        return [normalize_record(self._fields(node), source=self.source) for node in nodes]

    @staticmethod
    def _fields(node: ET.Element) -> dict[str, str]:
        fields = {}
        for name in SAMPLE_FIELDS:
            child = node.find(f".//{name}")
            fields[name] = "".join(child.itertext()) if child is not None else ""
        return fields
