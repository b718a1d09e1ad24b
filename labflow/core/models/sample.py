"""
Sample models: the canonical record produced by intake and its processed form.
"""

import math
from typing import Any, Literal

from pydantic import BaseModel, Field


class NormalizedSample(BaseModel):
    """
    One clinical specimen after intake normalization.

    Enum-like fields are plain strings here: values outside the allowed sets
    must survive intake so the quality gate can report them.

    Attributes:
        id: Sample identifier
        patient_id: Patient reference
        specimen_type: BLOOD, URINE, SWAB, SALIVA or PLASMA when valid
        status: RECEIVED, IN_PROGRESS or REPORTED when valid
        value: Measured value (NaN when missing or not numeric)
        unit: MG/DL, MMOL/L, IU/L or CELLS/µL when valid
        collected_at: Collection time as ISO-8601 UTC text
        accession: Optional secondary reference ("" when absent)
        source: Provenance tag of the intake format ("json" or "xml")
    """

    id: str = ""
    patient_id: str = Field("", alias="patientId")
    specimen_type: str = Field("", alias="specimenType")
    status: str = ""
    value: float = math.nan
    unit: str = ""
    collected_at: str = Field("", alias="collectedAt")
    accession: str = ""
    source: str = "json"

    class Config:
        frozen = True
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "id": "SMP-1001",
                "patientId": "PAT-001",
                "specimenType": "BLOOD",
                "status": "RECEIVED",
                "value": 85.2,
                "unit": "MG/DL",
                "collectedAt": "2026-01-15T09:00:00Z",
                "accession": "ACC-2026-0001",
                "source": "json"
            }
        }

    def to_wire(self) -> dict[str, Any]:
        """Return the record keyed by its camelCase wire names."""
        return self.model_dump(by_alias=True)


class ProcessedSample(NormalizedSample):
    """
    A valid sample after categorization.

    Attributes:
        processed_at: When the processor handled the sample (ISO-8601 UTC)
        normalized_value: Value re-coerced to float
        category: Laboratory section the sample is routed to
    """

    processed_at: str = Field(..., alias="processedAt")
    normalized_value: float = Field(..., alias="normalizedValue")
    category: Literal["HEMATOLOGY", "MICROBIOLOGY", "CHEMISTRY"]

    class Config:
        frozen = True
        populate_by_name = True
        json_schema_extra = {
            "example": {
                "id": "SMP-1010",
                "patientId": "PAT-010",
                "specimenType": "BLOOD",
                "status": "IN_PROGRESS",
                "value": 4500,
                "unit": "CELLS/µL",
                "collectedAt": "2026-01-15T09:40:00Z",
                "accession": "ACC-2026-0010",
                "source": "json",
                "processedAt": "2026-01-15T10:00:00.000Z",
                "normalizedValue": 4500.0,
                "category": "HEMATOLOGY"
            }
        }
