"""
PlausibilityValidator - cross-field clinical plausibility checks.
"""

from typing import Any

from labflow.core.errors import ErrorCode

from .base_validator import BaseValidator, is_number


class PlausibilityValidator(BaseValidator):
    """
    Validates that a reported sample carries a measured value.

    A record whose status equals ``status`` must have a numeric, non-NaN
    value in the validated field. Records in any other status pass.

    Parameters:
    - status: Status that requires a value (default "REPORTED")
    """

    code = ErrorCode.PLAUSIBILITY

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)
        self.status = self.parameters.get("status", "REPORTED")

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        if record.get("status") != self.status:
            return

        if not is_number(value):
            raise self.fail(f"{self.status} requires a numeric value")

    @property
    def rule_type(self) -> str:
        return "plausibility"
