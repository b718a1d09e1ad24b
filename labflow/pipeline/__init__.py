"""
Pipeline stages and the Pipeline facade.
"""

from .metrics_view import MetricsView, as_percent, compute_metrics, delay_histogram
from .pipeline import IntakeResult, Pipeline
from .processor import Processor, categorize
from .reconciler import DEFAULT_SLA_MS, Mulberry32, Reconciler, simulate_ack
from .run import Run, create_run_id, to_base36

__all__ = [
    "Pipeline",
    "IntakeResult",
    "Run",
    "create_run_id",
    "to_base36",
    "Processor",
    "categorize",
    "Reconciler",
    "Mulberry32",
    "simulate_ack",
    "DEFAULT_SLA_MS",
    "MetricsView",
    "compute_metrics",
    "delay_histogram",
    "as_percent",
]
