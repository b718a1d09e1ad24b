"""
Runtime settings for labflow.

Settings come from the environment; an optional ``.env`` file in the working
directory is loaded first with python-dotenv (existing variables win).
"""

import os
from pathlib import Path

from dotenv import find_dotenv, load_dotenv
from pydantic import BaseModel, Field, field_validator

DEFAULT_SLA_MS = 1500


class PipelineSettings(BaseModel):
    """
    Pipeline settings.

    Attributes:
        sla_ms: Acknowledgment SLA threshold in milliseconds
        rules_path: Optional YAML file with a ``gate`` section
        log_level: Logging level name
        log_format: "json" or "text"
    """

    sla_ms: int = Field(DEFAULT_SLA_MS, ge=0)
    rules_path: Path | None = None
    log_level: str = "INFO"
    log_format: str = "json"

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "sla_ms": 1500,
                "rules_path": "config/quality_gate.yaml",
                "log_level": "INFO",
                "log_format": "json"
            }
        }

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, v: str) -> str:
        return v.upper()

    @field_validator("log_format")
    @classmethod
    def _known_format(cls, v: str) -> str:
        v = v.lower()
        if v not in ("json", "text"):
            raise ValueError(f"log_format must be 'json' or 'text', got '{v}'")
        return v


def load_settings(env_file: str | Path | None = None) -> PipelineSettings:
    """
    Build settings from the environment.

    Args:
        env_file: Explicit .env path (defaults to ./.env when present)

    Returns:
        PipelineSettings

    Raises:
        pydantic.ValidationError: If a variable has an invalid value
    """
    load_dotenv(dotenv_path=env_file or find_dotenv(usecwd=True), override=False)

    rules_path = os.getenv("LABFLOW_RULES_PATH") or None
    return PipelineSettings(
        sla_ms=os.getenv("LABFLOW_SLA_MS", str(DEFAULT_SLA_MS)),
        rules_path=rules_path,
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_format=os.getenv("LOG_FORMAT", "json"),
    )
