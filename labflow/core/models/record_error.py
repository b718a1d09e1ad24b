"""
RecordError model representing a single quality-gate finding.
"""

from pydantic import BaseModel, Field

from labflow.core.errors import ErrorCode


class RecordError(BaseModel):
    """
    One rule failure for one record.

    A record may produce several errors; all of them are kept even after the
    record has been quarantined.

    Attributes:
        record_index: Zero-based position of the record in the input batch
        record_id: Sample id, or ``row_<n>`` when the id is empty
        code: Error code from the taxonomy
        message: Human-readable description
        field: Field (or field pair) the rule looked at
    """

    record_index: int = Field(..., ge=0, alias="recordIndex")
    record_id: str = Field(..., alias="recordId")
    code: ErrorCode
    message: str
    field: str

    class Config:
        frozen = True
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "recordIndex": 11,
                "recordId": "SMP-1002",
                "code": "E006",
                "message": "Duplicate id+accession",
                "field": "id/accession"
            }
        }
