"""
Normalization of raw intake records into canonical samples.

This is the only place where loosely typed input is coerced. Everything
downstream works on NormalizedSample.
"""

import math
import re
from typing import Any

from labflow.core.models import NormalizedSample

MICRO_SIGN = "\u00b5"
GREEK_SMALL_MU = "\u03bc"

# Signed decimal with optional exponent, or a signed "Infinity"
NUMERIC_TEXT = re.compile(
    r"[+-]?(?:(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|Infinity)", re.ASCII
)


def _text(value: Any) -> str:
    """Render a raw value as trimmed text ("" for missing values)."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def _upper(text: str) -> str:
    """
    Uppercase text while keeping the micro sign.

    str.upper() would turn "µ" into Greek capital mu, which breaks the
    CELLS/µL unit; Greek small mu is folded into the micro sign first.
    """
    text = text.replace(GREEK_SMALL_MU, MICRO_SIGN)
    return "".join(ch if ch == MICRO_SIGN else ch.upper() for ch in text)


def coerce_value(value: Any) -> float:
    """
    Coerce a raw measurement to float.

    Real numbers pass through (integers too large for a float become
    infinity); plain ASCII decimal strings are parsed; anything else
    (missing, empty, booleans, "inf", "1_000", non-numeric text,
    containers) becomes NaN.
    """
    if isinstance(value, bool) or value is None:
        return math.nan
    if isinstance(value, int):
        try:
            return float(value)
        except OverflowError:
            return math.inf if value > 0 else -math.inf
    if isinstance(value, float):
        return value
    if isinstance(value, str):
        text = value.strip()
        if not NUMERIC_TEXT.fullmatch(text):
            return math.nan
        return float(text)
    return math.nan


def normalize_record(raw: dict[str, Any], source: str = "json") -> NormalizedSample:
    """
    Normalize one raw record.

    String fields are trimmed; specimenType, status, unit and accession are
    uppercased; value is coerced to float (NaN when not representable).
    Missing fields default to "" (NaN for value). Nothing is rejected here.

    Args:
        raw: Untyped key/value record
        source: Provenance tag ("json" or "xml")

    Returns:
        The canonical sample
    """
    return NormalizedSample(
        id=_text(raw.get("id")),
        patient_id=_text(raw.get("patientId")),
        specimen_type=_upper(_text(raw.get("specimenType"))),
        status=_upper(_text(raw.get("status"))),
        value=coerce_value(raw.get("value")),
        unit=_upper(_text(raw.get("unit"))),
        collected_at=_text(raw.get("collectedAt")),
        accession=_upper(_text(raw.get("accession"))),
        source=source.lower(),
    )
