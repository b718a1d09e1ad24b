"""
Shared helpers (checksums, canonical serialization, time formatting).
"""

from .checksum import canonical_json, crc32, crc32_hex, format_iso, now_iso

__all__ = [
    "canonical_json",
    "crc32",
    "crc32_hex",
    "format_iso",
    "now_iso",
]
