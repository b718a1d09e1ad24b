"""
Format dispatch for intake readers.
"""

from pathlib import Path

from labflow.core.models import NormalizedSample

from .json_reader import JsonReader
from .xml_reader import XmlReader

SUPPORTED_FORMATS = ("json", "xml")


class BatchReader:
    """
    Reads a sample batch in either supported format.
    """

    def __init__(self):
        self.json_reader = JsonReader()
        self.xml_reader = XmlReader()

    def read(self, text: str, file_format: str = "json") -> list[NormalizedSample]:
        """
        Parse raw text into normalized samples.

        Args:
            text: Raw batch text
            file_format: "json" (list format) or "xml" (tree format)

        Returns:
            Normalized samples in input order

        Raises:
            ValueError: If the format is unsupported
            IntakeError: If the text cannot be parsed
        """
        if file_format.lower() == "json":
            return self.json_reader.read(text)
        elif file_format.lower() == "xml":
            return self.xml_reader.read(text)
        else:
            raise ValueError(f"Unsupported file format: {file_format}")


def detect_format(path: str | Path) -> str:
    """Guess the intake format from a file extension (defaults to json)."""
    return "xml" if Path(path).suffix.lower() == ".xml" else "json"
