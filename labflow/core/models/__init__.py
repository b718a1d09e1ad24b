"""
Core data models for the sample quality pipeline.

All models use Pydantic for runtime validation and type safety.
"""

from .ack_result import AckResult
from .audit_entry import AuditEntry
from .gate_result import GateResult
from .quarantine_entry import QuarantineEntry
from .record_error import RecordError
from .run_metrics import RunMetrics
from .sample import NormalizedSample, ProcessedSample

__all__ = [
    "NormalizedSample",
    "ProcessedSample",
    "RecordError",
    "GateResult",
    "QuarantineEntry",
    "AckResult",
    "AuditEntry",
    "RunMetrics",
]
