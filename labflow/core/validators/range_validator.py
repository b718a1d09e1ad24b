"""
RangeValidator - validates numeric values are within a specified range.
"""

from typing import Any

from labflow.core.errors import ErrorCode

from .base_validator import BaseValidator, display_number, is_number


class RangeValidator(BaseValidator):
    """
    Validates that a numeric field is within a specified range.

    NaN and non-numeric values are skipped; they are reported by the
    required field and plausibility rules.

    Parameters:
    - min: Minimum value (inclusive)
    - max: Maximum value (inclusive)
    """

    code = ErrorCode.OUT_OF_RANGE

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        self.min_value = self.parameters.get("min")
        self.max_value = self.parameters.get("max")

        if self.min_value is None and self.max_value is None:
            raise ValueError("RangeValidator requires at least one of: min, max")

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        if not is_number(value):
            return

        if self.min_value is not None and value < self.min_value:
            if self.min_value == 0:
                raise self.fail(f"Value cannot be negative: {display_number(value)}")
            raise self.fail(
                f"Value {display_number(value)} is less than minimum {display_number(self.min_value)}"
            )

        if self.max_value is not None and value > self.max_value:
            raise self.fail(f"Value out of range: {display_number(value)}")

    @property
    def rule_type(self) -> str:
        return "range"
