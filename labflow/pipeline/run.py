"""
Run state: everything one intake produces, from raw input to acknowledgments.
"""

import random
import time
from collections.abc import Callable

from labflow.audit import AuditLog
from labflow.core.models import AckResult, NormalizedSample, ProcessedSample, QuarantineEntry, RecordError

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def to_base36(number: int) -> str:
    """Lowercase base-36 text of a non-negative integer."""
    if number < 0:
        raise ValueError("number must be non-negative")
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36[remainder])
    return "".join(reversed(digits))


def create_run_id() -> str:
    """Run identifier: ``run_<epoch ms, base 36>_<random, base 36>``."""
    millis = time.time_ns() // 1_000_000
    return f"run_{to_base36(millis)}_{to_base36(random.randrange(10**9))}"


class Run:
    """
    State of one pipeline run.

    A run is created by every intake and discarded by the next one. Stages
    replace their own outputs (and everything downstream) when re-invoked.

    Attributes:
        run_id: Identifier stamped on every audit entry
        input_format: "json" or "xml"
        raw_input: Text the run was ingested from
        records: Normalized samples in input order
        valid: Samples that passed the quality gate
        quarantined: Quarantine entries for samples with errors
        errors: Every validation error of the batch
        processed: Categorized valid samples
        acks: Simulated acknowledgments of the processed samples
        audit: Append-only audit log of the run
        fatal_error: Intake failure message, if intake failed
    """

    def __init__(
        self,
        raw_input: str = "",
        input_format: str = "json",
        run_id: str | None = None,
        clock: Callable[[], str] | None = None,
    ):
        self.run_id = run_id or create_run_id()
        self.input_format = input_format
        self.raw_input = raw_input
        self.records: list[NormalizedSample] = []
        self.valid: list[NormalizedSample] = []
        self.quarantined: list[QuarantineEntry] = []
        self.errors: list[RecordError] = []
        self.processed: list[ProcessedSample] = []
        self.acks: list[AckResult] = []
        self.audit = AuditLog(self.run_id, clock=clock)
        self.fatal_error: str | None = None

    @property
    def failed(self) -> bool:
        return self.fatal_error is not None

    def __repr__(self) -> str:
        return (
            f"Run(run_id={self.run_id!r}, records={len(self.records)}, "
            f"valid={len(self.valid)}, quarantined={len(self.quarantined)})"
        )
