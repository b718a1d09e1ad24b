"""
Rendering of a record set back into the two intake formats.
"""

import math
from xml.sax.saxutils import escape

from labflow.core.models import NormalizedSample
from labflow.utils import canonical_json


def render_records_json(records: list[NormalizedSample]) -> str:
    """Render records as a canonical JSON array (sorted keys, 2-space indent)."""
    return canonical_json([record.to_wire() for record in records])


def _xml_value(value: float) -> str:
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if value.is_integer():
        return str(int(value))
    return repr(value)


def render_records_xml(records: list[NormalizedSample]) -> str:
    """Render records as a ``<samples>`` document accepted by XmlReader."""
    rows = []
    for record in records:
        rows.append(
            "<sample>\n"
            f"    <id>{escape(record.id)}</id>\n"
            f"    <patientId>{escape(record.patient_id)}</patientId>\n"
            f"    <specimenType>{escape(record.specimen_type)}</specimenType>\n"
            f"    <status>{escape(record.status)}</status>\n"
            f"    <value>{_xml_value(record.value)}</value>\n"
            f"    <unit>{escape(record.unit)}</unit>\n"
            f"    <collectedAt>{escape(record.collected_at)}</collectedAt>\n"
            f"    <accession>{escape(record.accession)}</accession>\n"
            "  </sample>"
        )
    return "<samples>\n  " + "\n  ".join(rows) + "\n</samples>\n"
