"""
Quality gate orchestrating validation rules over a batch of samples.

The gate applies every rule to every record in input order, collects all
failures, stamps each evaluation in the audit trail and partitions the batch
into valid and quarantined records.
"""

from collections.abc import Callable
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Any

from labflow.core.errors import ErrorCode
from labflow.core.models import GateResult, NormalizedSample, QuarantineEntry, RecordError
from labflow.core.validators import (
    BaseValidator,
    ChronologyValidator,
    DuplicateValidator,
    EnumValidator,
    FutureTimestampValidator,
    PlausibilityValidator,
    RangeValidator,
    RegexValidator,
    RequiredFieldValidator,
    RetentionValidator,
    RuleViolation,
    TimestampParseValidator,
)
from labflow.utils import canonical_json, crc32_hex

if TYPE_CHECKING:
    from labflow.audit import AuditLog

QUARANTINE_REASON = "Validation failure"
QUARANTINE_CODE = ErrorCode.PLAUSIBILITY


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class QualityGate:
    """
    Orchestrates quality rules on sample batches.

    Builds validators from rule configurations and applies them to records in
    order, collecting every failure. Cross-record rules (duplicates,
    chronology) keep their state for the duration of one batch.
    """

    VALIDATOR_REGISTRY: dict[str, type[BaseValidator]] = {
        "required_field": RequiredFieldValidator,
        "enum": EnumValidator,
        "range": RangeValidator,
        "plausibility": PlausibilityValidator,
        "regex": RegexValidator,
        "timestamp_parse": TimestampParseValidator,
        "not_future": FutureTimestampValidator,
        "retention": RetentionValidator,
        "chronology": ChronologyValidator,
        "duplicate": DuplicateValidator,
    }

    def __init__(self, rules: list[dict[str, Any]], clock: Callable[[], datetime] | None = None):
        """
        Initialize the quality gate with validation rules.

        Args:
            rules: List of rule configurations, each containing:
                   - rule_name: str
                   - rule_type: str (a VALIDATOR_REGISTRY key)
                   - field_name: str (wire name)
                   - parameters: Dict[str, Any] (optional)
                   - enabled: bool (default True)
            clock: Returns the validation time (defaults to current UTC time)
        """
        self.rules = rules
        self.clock = clock or _utc_now
        self.validators: list[tuple[str, BaseValidator]] = []
        self._build_validators()

    def _build_validators(self) -> None:
        """Build validator instances from rule configurations."""
        for rule in self.rules:
            if not rule.get("enabled", True):
                continue

            rule_name = rule["rule_name"]
            rule_type = rule["rule_type"]

            validator_class = self.VALIDATOR_REGISTRY.get(rule_type)
            if not validator_class:
                raise ValueError(f"Unknown rule type: {rule_type}")

            try:
                validator = validator_class(rule["field_name"], rule.get("parameters", {}))
            except Exception as e:
                raise ValueError(f"Failed to create validator for rule '{rule_name}': {e}")
            self.validators.append((rule_name, validator))

    def validate_batch(
        self,
        records: list[NormalizedSample],
        audit: "AuditLog | None" = None,
    ) -> GateResult:
        """
        Validate a batch and partition it into valid and quarantined records.

        Args:
            records: Normalized samples in input order
            audit: Audit log receiving one ``validate:item`` entry per record

        Returns:
            GateResult with valid records, quarantine entries and all errors
        """
        now = self.clock()
        for _, validator in self.validators:
            validator.begin_batch(now)

        result = GateResult()
        for index, record in enumerate(records):
            record_errors = self.validate_record(index, record)
            result.errors.extend(record_errors)

            if audit is not None:
                audit.append(
                    "validate:item",
                    record_id=record.id,
                    notes=f"preCRC={crc32_hex(canonical_json(record.to_wire()))}",
                )

            if record_errors:
                result.quarantined.append(
                    QuarantineEntry(record=record, reason=QUARANTINE_REASON, code=QUARANTINE_CODE)
                )
            else:
                result.valid.append(record)

        return result

    def validate_record(self, index: int, record: NormalizedSample) -> list[RecordError]:
        """
        Run every rule against one record.

        Cross-record validators see records in the order this method is
        called; use validate_batch() unless you manage begin_batch() yourself.

        Args:
            index: Zero-based position of the record in its batch
            record: The sample to check

        Returns:
            Errors in rule order (empty when the record is valid)
        """
        payload = record.to_wire()
        record_id = record.id or f"row_{index + 1}"
        errors = []

        for _, validator in self.validators:
            try:
                validator.validate(payload.get(validator.field_name), payload)
            except RuleViolation as violation:
                errors.append(RecordError(
                    record_index=index,
                    record_id=record_id,
                    code=violation.code,
                    message=violation.message,
                    field=violation.field_name,
                ))

        return errors

    def get_rule_summary(self) -> dict[str, Any]:
        """
        Get summary of loaded rules.

        Returns:
            Dictionary with rule counts by type and by error code
        """
        by_type: dict[str, int] = {}
        by_code: dict[str, int] = {}
        for _, validator in self.validators:
            by_type[validator.rule_type] = by_type.get(validator.rule_type, 0) + 1
            by_code[validator.code.value] = by_code.get(validator.code.value, 0) + 1
        return {
            "total_rules": len(self.validators),
            "rules_by_type": by_type,
            "rules_by_code": by_code,
        }
