"""
Processing stage: categorize valid samples and stamp them for delivery.
"""

from collections.abc import Callable

from labflow.core.models import NormalizedSample, ProcessedSample
from labflow.core.rules.rule_config import MICRO_SIGN
from labflow.observability.logger import RunLogger, get_logger
from labflow.utils import canonical_json, crc32_hex, now_iso

from .run import Run

logger = get_logger(__name__)

HEMATOLOGY_UNIT_MARKER = f"/{MICRO_SIGN}L"


def categorize(record: NormalizedSample) -> str:
    """
    Laboratory section for a sample.

    Cell counts (units per microliter) go to hematology, swabs to
    microbiology, everything else to chemistry.
    """
    if HEMATOLOGY_UNIT_MARKER in record.unit:
        return "HEMATOLOGY"
    if record.specimen_type == "SWAB":
        return "MICROBIOLOGY"
    return "CHEMISTRY"


class Processor:
    """Turns a run's valid samples into ProcessedSample objects."""

    def __init__(self, clock: Callable[[], str] | None = None):
        """
        Args:
            clock: Returns the processing timestamp (defaults to current UTC time)
        """
        self.clock = clock or now_iso

    def process_record(self, record: NormalizedSample) -> ProcessedSample:
        """Categorize one sample."""
        return ProcessedSample(
            **record.to_wire(),
            processedAt=self.clock(),
            normalizedValue=float(record.value),
            category=categorize(record),
        )

    def process(self, run: Run) -> int:
        """
        Process every valid sample of a run, replacing earlier results.

        Args:
            run: Run whose valid samples are processed

        Returns:
            Number of processed samples
        """
        processed = []
        for record in run.valid:
            sample = self.process_record(record)
            checksum = crc32_hex(canonical_json(sample.to_wire()))
            run.audit.append("process:item", record_id=record.id, notes=f"postCRC={checksum}")
            processed.append(sample)

        run.processed = processed
        # Acknowledgments belong to the previous processing result
        run.acks = []
        run.audit.append("process", notes=f"Processed {len(processed)} records")

        RunLogger(logger, run.run_id).info(f"Processed {len(processed)} records", extra={"count": len(processed)})
        return len(processed)
