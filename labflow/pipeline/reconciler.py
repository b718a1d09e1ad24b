"""
Reconciliation stage: simulated downstream acknowledgments with an SLA.

Each processed sample gets a reproducible acknowledgment. The generator is
seeded with the CRC-32 of the sample id, so the same id always yields the
same delay and outcome.
"""

import math

from labflow.core.models import AckResult
from labflow.observability.logger import RunLogger, get_logger
from labflow.utils import crc32

from .run import Run

logger = get_logger(__name__)

DEFAULT_SLA_MS = 1500
MIN_DELAY_MS = 100
DELAY_SPAN_MS = 2400
FAILURE_THRESHOLD = 0.12

_MASK = 0xFFFFFFFF


def _imul(a: int, b: int) -> int:
    return (a * b) & _MASK


class Mulberry32:
    """
    Mulberry32 pseudo-random generator on unsigned 32-bit arithmetic.

    Produces floats in [0, 1) with a 2**-32 resolution.
    """

    def __init__(self, seed: int):
        self.state = seed & _MASK

    def next_float(self) -> float:
        self.state = (self.state + 0x6D2B79F5) & _MASK
        a = self.state
        t = _imul(a ^ (a >> 15), a | 1)
        t = ((t + _imul(t ^ (t >> 7), t | 61)) & _MASK) ^ t
        return ((t ^ (t >> 14)) & _MASK) / 4294967296

    __call__ = next_float


def simulate_ack(record_id: str, sla_threshold_ms: int = DEFAULT_SLA_MS) -> AckResult:
    """
    Simulate the acknowledgment for one sample id.

    Args:
        record_id: Sample id used as the generator seed
        sla_threshold_ms: Largest delay that still meets the SLA

    Returns:
        AckResult with a delay in [100, 2500) ms and an ack code of 200 or 500
    """
    rand = Mulberry32(crc32(record_id))
    delay = MIN_DELAY_MS + math.floor(rand() * DELAY_SPAN_MS)
    ok = rand() > FAILURE_THRESHOLD
    return AckResult(
        record_id=record_id,
        ok=ok,
        ack_code=200 if ok else 500,
        delay_ms=delay,
        sla_met=delay <= sla_threshold_ms,
    )


class Reconciler:
    """Acknowledges a run's processed samples against an SLA threshold."""

    def reconcile(self, run: Run, sla_threshold_ms: int = DEFAULT_SLA_MS) -> int:
        """
        Simulate acknowledgments for every processed sample, replacing earlier ones.

        Args:
            run: Run whose processed samples are reconciled
            sla_threshold_ms: SLA threshold in milliseconds

        Returns:
            Number of acknowledgments

        Raises:
            ValueError: If the threshold is negative
        """
        if sla_threshold_ms < 0:
            raise ValueError(f"SLA threshold must be non-negative, got {sla_threshold_ms}")

        acks = []
        for sample in run.processed:
            ack = simulate_ack(sample.id, sla_threshold_ms)
            run.audit.append(
                "reconcile:item",
                record_id=sample.id,
                notes=f"ack={ack.ack_code} delay={ack.delay_ms}ms sla={'met' if ack.sla_met else 'breach'}",
                status="ok" if ack.ok else "error",
            )
            acks.append(ack)

        run.acks = acks
        acked = sum(1 for ack in acks if ack.ok)
        breaches = sum(1 for ack in acks if not ack.sla_met)
        run.audit.append("reconcile", notes=f"ACKed={acked} SLA breaches={breaches}")

        RunLogger(logger, run.run_id).info(
            f"Reconciled {len(acks)} records: ACKed={acked} SLA breaches={breaches}",
            extra={"sla_threshold_ms": sla_threshold_ms},
        )
        return len(acks)
