"""
AckResult model representing a simulated downstream acknowledgment.
"""

from typing import Literal

from pydantic import BaseModel, Field


class AckResult(BaseModel):
    """
    Outcome of the acknowledgment simulation for one processed sample.

    Attributes:
        record_id: Sample id
        ok: Whether the downstream system acknowledged the sample
        ack_code: 200 when acknowledged, 500 otherwise
        delay_ms: Simulated acknowledgment delay in milliseconds
        sla_met: Whether delay_ms is within the SLA threshold
    """

    record_id: str = Field(..., alias="recordId")
    ok: bool
    ack_code: Literal[200, 500] = Field(..., alias="ackCode")
    delay_ms: int = Field(..., ge=0, alias="delayMs")
    sla_met: bool = Field(..., alias="slaMet")

    class Config:
        frozen = True
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "recordId": "SMP-1001",
                "ok": True,
                "ackCode": 200,
                "delayMs": 742,
                "slaMet": True
            }
        }
