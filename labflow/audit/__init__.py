"""
Run audit trail.
"""

from .audit_log import CSV_COLUMNS, RUN_LEVEL_RECORD_ID, AuditLog, entry_checksum

__all__ = [
    "AuditLog",
    "entry_checksum",
    "CSV_COLUMNS",
    "RUN_LEVEL_RECORD_ID",
]
