"""
Error taxonomy for the sample quality pipeline.

Codes E001-E007 are per-record findings produced by the quality gate and
never abort a batch. E009/E010 are run-fatal intake failures.
"""

from enum import Enum


class ErrorCode(str, Enum):
    """Stable error codes shared by validation errors, quarantine and audit notes."""

    MISSING_FIELD = "E001"
    INVALID_ENUM = "E002"
    OUT_OF_RANGE = "E003"
    CHRONOLOGY = "E004"
    PLAUSIBILITY = "E005"
    DUPLICATE = "E006"
    FORMAT = "E007"
    XML_PARSE = "E009"
    JSON_PARSE = "E010"

    def __str__(self) -> str:
        return self.value


# Remediation playbooks shown next to each error code
PLAYBOOKS: dict[ErrorCode, dict[str, object]] = {
    ErrorCode.MISSING_FIELD: {
        "title": "Missing Required Field",
        "fix": [
            "Identify the missing field.",
            "Ensure source systems populate it (LIS/LIMS).",
            "If unavailable, quarantine or enrich upstream.",
            "Re-run intake after correction.",
        ],
    },
    ErrorCode.INVALID_ENUM: {
        "title": "Invalid Enumeration",
        "fix": [
            "Compare value to allowed list (specimenType/status/unit).",
            "Correct mapping in source or extend enum after review.",
            "Re-run validation.",
        ],
    },
    ErrorCode.OUT_OF_RANGE: {
        "title": "Out-of-Range Value",
        "fix": [
            "Verify biological thresholds and units.",
            "Check unit conversions.",
            "Correct anomalous values or quarantine.",
        ],
    },
    ErrorCode.CHRONOLOGY: {
        "title": "Chronology Violation",
        "fix": [
            "Sort samples by collectedAt.",
            "Ensure timestamps are not in the future.",
            "Re-intake after ordering fixes.",
        ],
    },
    ErrorCode.PLAUSIBILITY: {
        "title": "Plausibility Failure",
        "fix": [
            "Check clinical rules (e.g., REPORTED must have valid value).",
            "Review specimen/unit pairing.",
            "Fix data or quarantine.",
        ],
    },
    ErrorCode.DUPLICATE: {
        "title": "Duplicate Detected",
        "fix": [
            "Use id+accession as a natural key.",
            "Deduplicate upstream.",
            "Keep first occurrence, quarantine duplicates.",
        ],
    },
    ErrorCode.FORMAT: {
        "title": "Format Check Failed",
        "fix": [
            "Use ISO-8601 timestamp in collectedAt.",
            "Ensure id/accession match regex.",
            "Correct formatting upstream.",
        ],
    },
    ErrorCode.XML_PARSE: {
        "title": "XML Parse Error",
        "fix": [
            "Validate XML structure.",
            "Fix closing tags & nesting.",
            "Re-submit.",
        ],
    },
    ErrorCode.JSON_PARSE: {
        "title": "JSON Parse Error",
        "fix": [
            "Validate JSON syntax.",
            "Remove trailing commas.",
            "Re-submit.",
        ],
    },
}


def playbook_title(code: ErrorCode | str) -> str:
    """Human-readable title for an error code ("See playbook" if unknown)."""
    try:
        return str(PLAYBOOKS[ErrorCode(code)]["title"])
    except ValueError:
        return "See playbook"


class IntakeError(Exception):
    """Raised by batch readers when raw input cannot be turned into records."""

    def __init__(self, code: ErrorCode, message: str):
        self.code = code
        self.message = message
        super().__init__(message)
