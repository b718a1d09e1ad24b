"""
QuarantineEntry model representing a record held back by the quality gate.
"""

from pydantic import BaseModel

from labflow.core.errors import ErrorCode

from .sample import NormalizedSample


class QuarantineEntry(BaseModel):
    """
    A record that accumulated at least one validation error.

    The reason and code are the same for every entry; the specific failures
    live in the run's error list.

    Attributes:
        record: The normalized record as it entered the gate
        reason: Quarantine reason
        code: Quarantine code
    """

    record: NormalizedSample
    reason: str = "Validation failure"
    code: ErrorCode = ErrorCode.PLAUSIBILITY

    class Config:
        frozen = True
