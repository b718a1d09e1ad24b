"""
AuditEntry model representing one event in a run's audit trail.
"""

from pydantic import BaseModel, Field


class AuditEntry(BaseModel):
    """
    Immutable audit trail entry.

    The checksum is the CRC-32 of ``runId|stage|recordId|notes``; it covers
    this entry's content only and does not chain to earlier entries.

    Attributes:
        time: When the event was recorded (ISO-8601 UTC)
        run_id: Run the event belongs to
        stage: Stage name (``intake``, ``validate:item``, ``reconcile``...)
        status: ``ok`` or ``error``
        record_id: Sample id, or ``-`` for run-level events
        checksum: 8 hex digit content checksum
        notes: Free-text details
    """

    time: str
    run_id: str = Field(..., alias="runId")
    stage: str = Field(..., min_length=1)
    status: str
    record_id: str = Field(..., alias="recordId")
    checksum: str = Field(..., pattern=r"^[0-9a-f]{8}$")
    notes: str = ""

    class Config:
        frozen = True
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "time": "2026-01-15T10:00:00.000Z",
                "runId": "run_m5x2k1_abc123",
                "stage": "validate:item",
                "status": "ok",
                "recordId": "SMP-1001",
                "checksum": "1c291ca3",
                "notes": "preCRC=9f2e11d0"
            }
        }
