"""
Prometheus metrics collection for labflow

This module provides process-level instrumentation of pipeline stages.
Run-level figures (error rate, SLA breach rate) are derived from run state
by labflow.pipeline.metrics_view; the counters here only accumulate.
"""
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

# Global registry for metrics
REGISTRY = CollectorRegistry()


# =======================
# PIPELINE METRICS
# =======================

# Runs started, by intake format and outcome
intakes_total = Counter(
    name="labflow_intakes_total",
    documentation="Total number of intake attempts",
    labelnames=["format", "status"],  # status: ok, error
    registry=REGISTRY,
)

# Records by gate outcome
records_processed_total = Counter(
    name="labflow_records_processed_total",
    documentation="Total number of records evaluated by the quality gate",
    labelnames=["status"],  # status: valid, quarantined
    registry=REGISTRY,
)

# Stage duration histogram
stage_duration_seconds = Histogram(
    name="labflow_stage_duration_seconds",
    documentation="Time spent in each pipeline stage in seconds",
    labelnames=["stage"],  # stage: intake, process, reconcile
    buckets=[0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0],
    registry=REGISTRY,
)

# =======================
# DATA QUALITY METRICS
# =======================

validation_errors_total = Counter(
    name="labflow_validation_errors_total",
    documentation="Total number of validation errors",
    labelnames=["code", "field_name"],
    registry=REGISTRY,
)

quarantine_size = Gauge(
    name="labflow_quarantine_size",
    documentation="Number of records quarantined by the latest run",
    registry=REGISTRY,
)

# =======================
# RECONCILIATION METRICS
# =======================

acks_total = Counter(
    name="labflow_acks_total",
    documentation="Total number of simulated acknowledgments",
    labelnames=["ack_code"],
    registry=REGISTRY,
)

sla_breaches_total = Counter(
    name="labflow_sla_breaches_total",
    documentation="Total number of simulated acknowledgments slower than the SLA",
    registry=REGISTRY,
)

ack_delay_milliseconds = Histogram(
    name="labflow_ack_delay_milliseconds",
    documentation="Simulated acknowledgment delay in milliseconds",
    buckets=[200, 400, 600, 800, 1000, 1200, 1500, 2000, 2500],
    registry=REGISTRY,
)


# =======================
# HELPER FUNCTIONS
# =======================

def generate_metrics() -> bytes:
    """
    Generate Prometheus metrics in text format

    Returns:
        Metrics in Prometheus text format
    """
    return generate_latest(REGISTRY)


def get_content_type() -> str:
    """Content type for Prometheus metrics"""
    return CONTENT_TYPE_LATEST


def record_intake(file_format: str, ok: bool) -> None:
    """Count an intake attempt."""
    intakes_total.labels(format=file_format, status="ok" if ok else "error").inc()


def record_gate_outcome(valid_count: int, quarantined_count: int, errors: list) -> None:
    """
    Record quality gate results.

    Args:
        valid_count: Records that passed
        quarantined_count: Records quarantined
        errors: RecordError list of the batch
    """
    if valid_count:
        records_processed_total.labels(status="valid").inc(valid_count)
    if quarantined_count:
        records_processed_total.labels(status="quarantined").inc(quarantined_count)
    quarantine_size.set(quarantined_count)

    for error in errors:
        validation_errors_total.labels(code=str(error.code), field_name=error.field).inc()


def record_ack(ack_code: int, delay_ms: int, sla_met: bool) -> None:
    """Record one simulated acknowledgment."""
    acks_total.labels(ack_code=str(ack_code)).inc()
    ack_delay_milliseconds.observe(delay_ms)
    if not sla_met:
        sla_breaches_total.inc()


def observe_stage(stage: str, duration_seconds: float) -> None:
    """Record how long a stage took."""
    stage_duration_seconds.labels(stage=stage).observe(duration_seconds)
