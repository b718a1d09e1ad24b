"""
Batch intake: readers for the list (JSON) and tree (XML) formats,
record normalization, and rendering back to either format.
"""

from .file_reader import SUPPORTED_FORMATS, BatchReader, detect_format
from .json_reader import JsonReader
from .normalizer import coerce_value, normalize_record
from .writers import render_records_json, render_records_xml
from .xml_reader import XmlReader

__all__ = [
    "BatchReader",
    "JsonReader",
    "XmlReader",
    "SUPPORTED_FORMATS",
    "detect_format",
    "normalize_record",
    "coerce_value",
    "render_records_json",
    "render_records_xml",
]
