"""
GateResult model representing the outcome of a quality-gate pass over a batch.
"""

from pydantic import BaseModel, Field

from .quarantine_entry import QuarantineEntry
from .record_error import RecordError
from .sample import NormalizedSample


class GateResult(BaseModel):
    """
    Partition of a batch into valid and quarantined records.

    Both lists keep input order. Every record of the batch is in exactly one
    of them.

    Attributes:
        valid: Records with no errors
        quarantined: One entry per record with at least one error
        errors: Every error found, in the order it was raised
    """

    valid: list[NormalizedSample] = Field(default_factory=list)
    quarantined: list[QuarantineEntry] = Field(default_factory=list)
    errors: list[RecordError] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.valid) + len(self.quarantined)
