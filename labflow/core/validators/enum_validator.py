"""
EnumValidator - validates a field against a closed set of values.
"""

from typing import Any

from labflow.core.errors import ErrorCode

from .base_validator import BaseValidator


class EnumValidator(BaseValidator):
    """
    Validates that a non-empty field value is one of the allowed values.

    Empty values are skipped (handled by the required field rule).

    Parameters:
    - allowed: Iterable of accepted values
    """

    code = ErrorCode.INVALID_ENUM

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        allowed = self.parameters.get("allowed")
        if not allowed:
            raise ValueError("EnumValidator requires a non-empty 'allowed' parameter")
        self.allowed = frozenset(allowed)

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        if not value:
            return

        if value not in self.allowed:
            raise self.fail(f"Invalid {self.field_name} '{value}'")

    @property
    def rule_type(self) -> str:
        return "enum"
