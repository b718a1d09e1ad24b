"""
RequiredFieldValidator - ensures a field is present and not empty.
"""

import math
from typing import Any

from labflow.core.errors import ErrorCode

from .base_validator import BaseValidator


class RequiredFieldValidator(BaseValidator):
    """
    Validates that a required field is populated.

    Fails if:
    - Field value is None
    - Field value is an empty string
    - Field value is NaN (the normalizer's marker for a missing number)
    """

    code = ErrorCode.MISSING_FIELD

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        missing = (
            value is None
            or value == ""
            or (isinstance(value, float) and math.isnan(value))
        )
        if missing:
            raise self.fail(f"Required field '{self.field_name}' is missing")

    @property
    def rule_type(self) -> str:
        return "required_field"
