"""
Quality-gate rule implementations.

Provides validators for required fields, enumerations, numeric ranges,
plausibility, regex formats, timestamps and duplicate keys.
"""

from .base_validator import BaseValidator, RuleViolation
from .duplicate_validator import DuplicateValidator
from .enum_validator import EnumValidator
from .plausibility_validator import PlausibilityValidator
from .range_validator import RangeValidator
from .regex_validator import RegexValidator
from .required_field_validator import RequiredFieldValidator
from .timestamp_validator import (
    ISO_UTC_PATTERN,
    ChronologyValidator,
    FutureTimestampValidator,
    RetentionValidator,
    TimestampParseValidator,
    parse_iso_utc,
)

__all__ = [
    "BaseValidator",
    "RuleViolation",
    "RequiredFieldValidator",
    "EnumValidator",
    "RangeValidator",
    "PlausibilityValidator",
    "RegexValidator",
    "TimestampParseValidator",
    "FutureTimestampValidator",
    "RetentionValidator",
    "ChronologyValidator",
    "DuplicateValidator",
    "ISO_UTC_PATTERN",
    "parse_iso_utc",
]
