"""
Content hashing for audit integrity and deterministic seeding.

One CRC-32 function is used for both roles: stamping audit entries and
record snapshots, and seeding the acknowledgment simulator.

Algorithm: CRC-32/ISO-HDLC (reflected polynomial 0xEDB88320, initial value
0xFFFFFFFF, final complement, unsigned 32-bit result) computed over the
UTF-8 bytes of the input text.
"""

import json
import math
import zlib
from datetime import datetime, timezone
from enum import Enum
from typing import Any


def crc32(text: str) -> int:
    """
    Compute the unsigned 32-bit CRC of a string.

    Args:
        text: Input text (encoded as UTF-8 before hashing)

    Returns:
        Checksum in the range [0, 2**32)

    Examples:
        >>> hex(crc32("123456789"))
        '0xcbf43926'
    """
    return zlib.crc32(text.encode("utf-8")) & 0xFFFFFFFF


def crc32_hex(text: str) -> str:
    """Return the CRC-32 of text as 8 lowercase hex digits."""
    return f"{crc32(text):08x}"


def _canonicalize(obj: Any) -> Any:
    """Convert a value tree into plain JSON types with stable number rendering."""
    if isinstance(obj, bool) or obj is None:
        return obj
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, float):
        if math.isnan(obj) or math.isinf(obj):
            return None
        # 85.0 renders as 85, the same as a JavaScript number
        if obj.is_integer():
            return int(obj)
        return obj
    if isinstance(obj, datetime):
        return obj.isoformat()
    if isinstance(obj, dict):
        return {str(key): _canonicalize(value) for key, value in obj.items()}
    if isinstance(obj, (list, tuple)):
        return [_canonicalize(value) for value in obj]
    return obj


def canonical_json(obj: Any) -> str:
    """
    Serialize a value deterministically.

    Keys are sorted lexicographically at every level, output is indented with
    two spaces, non-ASCII characters are kept as-is, NaN/infinity become null
    and integral floats lose their fractional part.

    Args:
        obj: dict, list or scalar to serialize

    Returns:
        Canonical JSON text
    """
    return json.dumps(_canonicalize(obj), sort_keys=True, indent=2, ensure_ascii=False)


def now_iso() -> str:
    """Current UTC time as ISO-8601 with millisecond precision and a Z suffix."""
    return format_iso(datetime.now(timezone.utc))


def format_iso(moment: datetime) -> str:
    """Format an aware datetime as ``YYYY-MM-DDTHH:MM:SS.fffZ``."""
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
