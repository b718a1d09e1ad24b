"""
RegexValidator - validates field values against a regular expression pattern.
"""

import re
from re import Pattern
from typing import Any

from labflow.core.errors import ErrorCode

from .base_validator import BaseValidator


class RegexValidator(BaseValidator):
    """
    Validates that a non-empty field value matches a regular expression.

    Parameters:
    - pattern: Regular expression pattern (string or compiled Pattern)
    - message: Error message used when the value does not match
    """

    code = ErrorCode.FORMAT

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        pattern = self.parameters.get("pattern")
        if not pattern:
            raise ValueError("RegexValidator requires 'pattern' parameter")

        try:
            if isinstance(pattern, str):
                # ASCII classes: \d and \w never match other scripts
                self.pattern: Pattern = re.compile(pattern, re.ASCII)
            elif isinstance(pattern, Pattern):
                self.pattern = pattern
            else:
                raise ValueError(f"Pattern must be string or compiled Pattern, got {type(pattern)}")
        except re.error as e:
            raise ValueError(f"Invalid regex pattern: {e}")

        self.message = self.parameters.get("message", f"Invalid {field_name} format")

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        # Empty values are the required field rule's concern
        if not value:
            return

        if not self.pattern.fullmatch(str(value)):
            raise self.fail(self.message)

    @property
    def rule_type(self) -> str:
        return "regex"
