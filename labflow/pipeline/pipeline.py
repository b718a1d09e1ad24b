"""
Sample pipeline orchestration.

Coordinates the flow: intake -> validate -> process -> reconcile, with every
step recorded in the run's audit trail.
"""

from collections.abc import Callable
from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from labflow.core.errors import IntakeError
from labflow.core.models import RunMetrics
from labflow.core.rules import GateConfig, QualityGate, build_gate_rules
from labflow.intake import (
    SUPPORTED_FORMATS,
    BatchReader,
    normalize_record,
    render_records_json,
    render_records_xml,
)
from labflow.observability import metrics as prom
from labflow.observability.logger import RunLogger, get_logger, log_stage

from .metrics_view import MetricsView, compute_metrics
from .processor import Processor
from .reconciler import DEFAULT_SLA_MS, Reconciler
from .run import Run

logger = get_logger(__name__)


class IntakeResult(BaseModel):
    """
    Outcome of an intake (parse, normalize and validate).

    Attributes:
        ok: False when the raw input could not be parsed
        message: Human-readable summary or the parse error
        run_id: Run created by the intake
        total: Records ingested
        valid_count: Records that passed the quality gate
        error_count: Validation errors (1 on a parse failure)
        quarantine_count: Records quarantined
    """

    ok: bool
    message: str
    run_id: str
    total: int = Field(0, ge=0)
    valid_count: int = Field(0, ge=0)
    error_count: int = Field(0, ge=0)
    quarantine_count: int = Field(0, ge=0)

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "ok": True,
                "message": "Ingested 12 records. Valid: 10. Errors: 4. Quarantine: 2.",
                "run_id": "run_mf3k2a1b_8xk2p1",
                "total": 12,
                "valid_count": 10,
                "error_count": 4,
                "quarantine_count": 2
            }
        }


class Pipeline:
    """
    Programmatic surface of the sample pipeline.

    The pipeline owns one Run at a time. Each intake starts a new run and
    discards the previous one; process() and reconcile() work on the current
    run and replace their own earlier results.
    """

    def __init__(
        self,
        config: GateConfig | None = None,
        clock: Callable[[], datetime] | None = None,
        timestamp_clock: Callable[[], str] | None = None,
    ):
        """
        Initialize the pipeline.

        Args:
            config: Quality-gate reference data (defaults to GateConfig())
            clock: Validation time source for the quality gate
            timestamp_clock: ISO timestamp source for audit entries and processedAt
        """
        self.config = config or GateConfig()
        self.gate = QualityGate(build_gate_rules(self.config), clock=clock)
        self.reader = BatchReader()
        self.processor = Processor(clock=timestamp_clock)
        self.reconciler = Reconciler()
        self.timestamp_clock = timestamp_clock
        self.run = Run(clock=timestamp_clock)

    def intake(self, raw: str, fmt: str = "json") -> IntakeResult:
        """
        Start a new run from raw batch text.

        Parses and normalizes the input, then runs the quality gate. Parse
        failures do not raise; they are reported in the result and the audit
        trail.

        Args:
            raw: Batch text
            fmt: "json" or "xml"

        Returns:
            IntakeResult

        Raises:
            ValueError: If the format is not supported
        """
        fmt = fmt.lower()
        if fmt not in SUPPORTED_FORMATS:
            raise ValueError(f"Unsupported file format: {fmt}")

        run = Run(raw_input=raw, input_format=fmt, clock=self.timestamp_clock)
        self.run = run
        log = RunLogger(logger, run.run_id, input_format=fmt)

        with log_stage("intake", log):
            try:
                records = self.reader.read(raw, fmt)
            except IntakeError as e:
                run.fatal_error = e.message
                run.audit.append("intake", notes=e.message, status="error")
                prom.record_intake(fmt, ok=False)
                log.warning(f"Intake failed: {e.message}", extra={"code": str(e.code)})
                return IntakeResult(ok=False, message=e.message, run_id=run.run_id, error_count=1)

            run.records = records
            run.audit.append("intake", notes=f"Ingested {len(records)} records via {fmt}")
            prom.record_intake(fmt, ok=True)

            result = self.gate.validate_batch(records, audit=run.audit)
            run.valid = result.valid
            run.quarantined = result.quarantined
            run.errors = result.errors
            run.audit.append(
                "validate",
                notes=f"Valid={len(run.valid)} Errors={len(run.errors)} Quarantine={len(run.quarantined)}",
            )
            prom.record_gate_outcome(len(run.valid), len(run.quarantined), run.errors)

        message = (
            f"Ingested {len(run.records)} records. Valid: {len(run.valid)}. "
            f"Errors: {len(run.errors)}. Quarantine: {len(run.quarantined)}."
        )
        log.info(message)
        return IntakeResult(
            ok=True,
            message=message,
            run_id=run.run_id,
            total=len(run.records),
            valid_count=len(run.valid),
            error_count=len(run.errors),
            quarantine_count=len(run.quarantined),
        )

    def add_record(self, raw_record: dict[str, Any]) -> IntakeResult:
        """
        Append one record to the current set and re-run intake on the result.

        The combined set goes through the full intake as a JSON batch, so the
        new record is validated in context (duplicates, chronology).

        Args:
            raw_record: Field mapping keyed by wire names

        Returns:
            IntakeResult of the new run
        """
        records = list(self.run.records)
        records.append(normalize_record(raw_record, source="json"))
        return self.intake(render_records_json(records), "json")

    def process(self) -> int:
        """Categorize the current run's valid samples. Returns how many."""
        with log_stage("process", RunLogger(logger, self.run.run_id)):
            count = self.processor.process(self.run)
        return count

    def reconcile(self, sla_threshold_ms: int = DEFAULT_SLA_MS) -> int:
        """
        Simulate acknowledgments for the current run's processed samples.

        Args:
            sla_threshold_ms: SLA threshold in milliseconds

        Returns:
            Number of acknowledgments

        Raises:
            ValueError: If the threshold is negative
        """
        with log_stage("reconcile", RunLogger(logger, self.run.run_id), sla_threshold_ms=sla_threshold_ms):
            count = self.reconciler.reconcile(self.run, sla_threshold_ms)
        for ack in self.run.acks:
            prom.record_ack(ack.ack_code, ack.delay_ms, ack.sla_met)
        return count

    def export_audit_csv(self) -> str:
        return self.run.audit.to_csv()

    def export_audit_json(self) -> str:
        return self.run.audit.to_json()

    def metrics(self) -> RunMetrics:
        """Counters of the current run."""
        return compute_metrics(self.run)

    def dashboard(self) -> MetricsView:
        """Dashboard figures of the current run."""
        return MetricsView.from_run(self.run)

    def records_as_json(self) -> str:
        """Current records rendered in the list (JSON) format."""
        return render_records_json(self.run.records)

    def records_as_xml(self) -> str:
        """Current records rendered in the tree (XML) format."""
        return render_records_xml(self.run.records)
