"""
Quality-gate configuration management.

GateConfig holds the clinical reference data (enumerations, bounds, patterns)
the gate checks against. It can be loaded from YAML and is turned into the
ordered rule list consumed by QualityGate.
"""

from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field

from labflow.core.validators import ISO_UTC_PATTERN

MICRO_SIGN = "\u00b5"

REQUIRED_FIELDS = ["id", "patientId", "specimenType", "status", "value", "unit", "collectedAt"]


class GateConfig(BaseModel):
    """
    Reference data for the quality gate.

    Attributes:
        required_fields: Wire names that must be populated
        specimen_types: Accepted specimenType values
        statuses: Accepted status values
        units: Accepted unit values
        value_min: Inclusive lower bound for value
        value_max: Inclusive upper bound for value
        reported_status: Status that requires a numeric value
        id_pattern: Pattern for sample ids
        accession_pattern: Pattern for non-empty accessions
        timestamp_pattern: Pattern for collectedAt
        retention_days: Maximum sample age in days
    """

    required_fields: list[str] = Field(default_factory=lambda: list(REQUIRED_FIELDS))
    specimen_types: list[str] = Field(
        default_factory=lambda: ["BLOOD", "URINE", "SWAB", "SALIVA", "PLASMA"]
    )
    statuses: list[str] = Field(default_factory=lambda: ["RECEIVED", "IN_PROGRESS", "REPORTED"])
    units: list[str] = Field(
        default_factory=lambda: ["MG/DL", "MMOL/L", "IU/L", f"CELLS/{MICRO_SIGN}L"]
    )
    value_min: float = 0.0
    value_max: float = 1_000_000.0
    reported_status: str = "REPORTED"
    id_pattern: str = r"^[A-Za-z0-9\-_]{4,40}$"
    accession_pattern: str = r"^[A-Z0-9\-]{8,30}$"
    timestamp_pattern: str = ISO_UTC_PATTERN
    retention_days: int = Field(3 * 365, gt=0)

    class Config:
        extra = "forbid"


class GateConfigLoader:
    """
    Loads quality-gate reference data from a YAML file.

    Expected YAML format:
    ```yaml
    gate:
      specimen_types: [BLOOD, URINE, SWAB, SALIVA, PLASMA]
      value_max: 1000000
      retention_days: 1095
    ```

    Keys left out keep their defaults.
    """

    def __init__(self, config_path: str | Path):
        """
        Initialize the gate config loader.

        Args:
            config_path: Path to the YAML configuration file
        """
        self.config_path = Path(config_path)
        if not self.config_path.exists():
            raise FileNotFoundError(f"Gate configuration file not found: {config_path}")

    def load(self) -> GateConfig:
        """
        Parse the YAML file into a GateConfig.

        Raises:
            ValueError: If the file has no 'gate' mapping
            pydantic.ValidationError: If a key is unknown or has the wrong type
        """
        with open(self.config_path, encoding="utf-8") as f:
            config = yaml.safe_load(f)

        if not config or "gate" not in config:
            raise ValueError("Configuration file must contain 'gate' section")

        section = config["gate"] or {}
        if not isinstance(section, dict):
            raise ValueError("'gate' section must be a mapping")

        return GateConfig(**section)


class GateRuleBuilder:
    """
    Programmatically build an ordered rule list.

    Rule order is the order errors are reported for a record.
    """

    def __init__(self):
        """Initialize empty rule configuration."""
        self.rules: list[dict[str, Any]] = []

    def _add(self, rule_name: str, rule_type: str, field_name: str, parameters: dict[str, Any] | None = None) -> "GateRuleBuilder":
        self.rules.append({
            "rule_name": rule_name,
            "rule_type": rule_type,
            "field_name": field_name,
            "parameters": parameters or {},
            "enabled": True,
        })
        return self

    def add_required_field(self, field_name: str) -> "GateRuleBuilder":
        """Add a required field rule."""
        return self._add(f"{field_name}_required", "required_field", field_name)

    def add_enum(self, field_name: str, allowed: list[str]) -> "GateRuleBuilder":
        """Add an enumeration membership rule."""
        return self._add(f"{field_name}_enum", "enum", field_name, {"allowed": list(allowed)})

    def add_range(self, field_name: str, min_value: float | None = None, max_value: float | None = None) -> "GateRuleBuilder":
        """Add a numeric range rule."""
        params = {}
        if min_value is not None:
            params["min"] = min_value
        if max_value is not None:
            params["max"] = max_value
        return self._add(f"{field_name}_range", "range", field_name, params)

    def add_plausibility(self, field_name: str, status: str) -> "GateRuleBuilder":
        """Add the status/value plausibility rule."""
        return self._add(f"{field_name}_plausibility", "plausibility", field_name, {"status": status})

    def add_regex(self, field_name: str, pattern: str, message: str | None = None) -> "GateRuleBuilder":
        """Add a regex format rule."""
        params: dict[str, Any] = {"pattern": pattern}
        if message:
            params["message"] = message
        return self._add(f"{field_name}_regex", "regex", field_name, params)

    def add_timestamp_rules(self, field_name: str, pattern: str, max_age_days: int) -> "GateRuleBuilder":
        """Add parse, future, retention and chronology rules for a timestamp field."""
        self._add(f"{field_name}_parse", "timestamp_parse", field_name, {"pattern": pattern})
        self._add(f"{field_name}_not_future", "not_future", field_name, {"pattern": pattern})
        self._add(f"{field_name}_retention", "retention", field_name,
                  {"pattern": pattern, "max_age_days": max_age_days})
        return self._add(f"{field_name}_chronology", "chronology", field_name, {"pattern": pattern})

    def add_duplicate(self, key_fields: tuple[str, str] = ("id", "accession")) -> "GateRuleBuilder":
        """Add the duplicate natural key rule."""
        return self._add("id_accession_duplicate", "duplicate", "/".join(key_fields),
                         {"key_fields": list(key_fields)})

    def build(self) -> list[dict[str, Any]]:
        """Build and return the rule configuration."""
        return self.rules


def build_gate_rules(config: GateConfig | None = None) -> list[dict[str, Any]]:
    """
    Build the standard sample quality rule list.

    Args:
        config: Reference data (defaults to GateConfig())

    Returns:
        Ordered rule dictionaries suitable for QualityGate
    """
    config = config or GateConfig()
    builder = GateRuleBuilder()

    for field_name in config.required_fields:
        builder.add_required_field(field_name)

    builder \
        .add_enum("specimenType", config.specimen_types) \
        .add_enum("status", config.statuses) \
        .add_enum("unit", config.units) \
        .add_range("value", min_value=config.value_min, max_value=config.value_max) \
        .add_plausibility("value", config.reported_status) \
        .add_regex("id", config.id_pattern, "Invalid id format") \
        .add_regex("accession", config.accession_pattern, "Invalid accession format") \
        .add_regex("collectedAt", config.timestamp_pattern, "Invalid ISO timestamp (collectedAt)") \
        .add_timestamp_rules("collectedAt", config.timestamp_pattern, config.retention_days) \
        .add_duplicate()

    return builder.build()
