"""
RunMetrics model representing counters derived from a run's current state.
"""

from pydantic import BaseModel, Field


class RunMetrics(BaseModel):
    """
    Snapshot of run counters. Recomputed on demand, never persisted.

    Attributes:
        total: Records ingested
        valid_count: Records that passed the quality gate
        error_count: Validation errors (1 when intake itself failed)
        quarantine_count: Records quarantined
        acked_count: Simulated acknowledgments with ok=True
        sla_breach_count: Acknowledgments slower than the SLA threshold
        error_count_by_code: Error counts keyed by code
        ack_delays: Simulated delays in processing order
    """

    total: int = Field(0, ge=0)
    valid_count: int = Field(0, ge=0)
    error_count: int = Field(0, ge=0)
    quarantine_count: int = Field(0, ge=0)
    acked_count: int = Field(0, ge=0)
    sla_breach_count: int = Field(0, ge=0)
    error_count_by_code: dict[str, int] = Field(default_factory=dict)
    ack_delays: list[int] = Field(default_factory=list)

    class Config:
        frozen = True
