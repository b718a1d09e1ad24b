"""
Derived run metrics for reporting.

Everything here is a pure function of a run snapshot: nothing is cached or
mutated, so figures are always consistent with the run's current state.
"""

import math

from pydantic import BaseModel, Field

from labflow.core.models import RunMetrics

from .run import Run

HISTOGRAM_BUCKET_MS = 200


def compute_metrics(run: Run) -> RunMetrics:
    """
    Count a run's current state.

    A failed intake reports one error and nothing else.
    """
    error_count_by_code: dict[str, int] = {}
    for error in run.errors:
        code = str(error.code)
        error_count_by_code[code] = error_count_by_code.get(code, 0) + 1

    return RunMetrics(
        total=len(run.records),
        valid_count=len(run.valid),
        error_count=1 if run.failed else len(run.errors),
        quarantine_count=len(run.quarantined),
        acked_count=sum(1 for ack in run.acks if ack.ok),
        sla_breach_count=sum(1 for ack in run.acks if not ack.sla_met),
        error_count_by_code=error_count_by_code,
        ack_delays=[ack.delay_ms for ack in run.acks],
    )


def delay_histogram(delays: list[int], bucket_ms: int = HISTOGRAM_BUCKET_MS) -> list[int]:
    """
    Bucket acknowledgment delays.

    There are ceil(max / bucket_ms) buckets (at least one); bucket i counts
    delays in [i * bucket_ms, (i + 1) * bucket_ms) and the last bucket also
    takes everything beyond it.

    Args:
        delays: Delays in milliseconds
        bucket_ms: Bucket width

    Returns:
        Counts per bucket (empty when there are no delays)
    """
    if not delays:
        return []
    buckets = max(1, math.ceil(max(delays) / bucket_ms))
    counts = [0] * buckets
    for delay in delays:
        counts[min(buckets - 1, delay // bucket_ms)] += 1
    return counts


def as_percent(ratio: float) -> int:
    """Ratio as a whole percentage, halves rounded up."""
    return math.floor(ratio * 100 + 0.5)


class MetricsView(BaseModel):
    """
    Dashboard figures of a run.

    Attributes:
        error_rate: Errors per ingested record (0 when nothing was ingested)
        sla_breach_rate: SLA breaches per acknowledgment (0 without acks)
        quarantine_size: Quarantined records
        throughput: Ingested records
        error_count_by_code: Errors keyed by code
        delay_histogram: Ack delay counts per 200 ms bucket
    """

    error_rate: float = Field(0.0, ge=0)
    sla_breach_rate: float = Field(0.0, ge=0, le=1)
    quarantine_size: int = Field(0, ge=0)
    throughput: int = Field(0, ge=0)
    error_count_by_code: dict[str, int] = Field(default_factory=dict)
    delay_histogram: list[int] = Field(default_factory=list)

    class Config:
        frozen = True

    @property
    def error_rate_percent(self) -> int:
        return as_percent(self.error_rate)

    @property
    def sla_breach_rate_percent(self) -> int:
        return as_percent(self.sla_breach_rate)

    @classmethod
    def from_run(cls, run: Run) -> "MetricsView":
        """Derive the view from a run's current state."""
        metrics = compute_metrics(run)
        return cls.from_metrics(metrics, ack_count=len(run.acks))

    @classmethod
    def from_metrics(cls, metrics: RunMetrics, ack_count: int | None = None) -> "MetricsView":
        """
        Derive the view from run counters.

        Args:
            metrics: Run counters
            ack_count: Acknowledgments issued (defaults to len(metrics.ack_delays))
        """
        acks = len(metrics.ack_delays) if ack_count is None else ack_count
        return cls(
            error_rate=metrics.error_count / metrics.total if metrics.total else 0.0,
            sla_breach_rate=metrics.sla_breach_count / acks if acks else 0.0,
            quarantine_size=metrics.quarantine_count,
            throughput=metrics.total,
            error_count_by_code=dict(metrics.error_count_by_code),
            delay_histogram=delay_histogram(metrics.ack_delays),
        )
