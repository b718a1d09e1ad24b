"""
Base validator interface for all quality-gate rules.

All validators must inherit from BaseValidator and implement the validate() method.
"""

import math
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

from labflow.core.errors import ErrorCode


class RuleViolation(Exception):
    """Raised when a quality-gate rule fails for one record."""

    def __init__(self, code: ErrorCode, field_name: str, message: str):
        self.code = code
        self.field_name = field_name
        self.message = message
        super().__init__(f"[{code}] {field_name}: {message}")


class BaseValidator(ABC):
    """
    Abstract base class for all validators.

    Each validator implements one rule family and reports failures with a
    single error code. Validators that need state across a batch (running
    maximum timestamp, seen keys) reset it in begin_batch().
    """

    code: ErrorCode

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        """
        Initialize validator.

        Args:
            field_name: Wire name of the field to validate (e.g. "collectedAt")
            parameters: Rule-specific parameters (e.g., min/max for range)
        """
        self.field_name = field_name
        self.parameters = parameters or {}

    def begin_batch(self, now: datetime) -> None:
        """
        Prepare for a new batch.

        Args:
            now: Validation time shared by every record of the batch
        """

    @abstractmethod
    def validate(self, value: Any, record: dict[str, Any]) -> None:
        """
        Validate a value against this rule.

        Args:
            value: The field value to validate
            record: The entire record keyed by wire names

        Raises:
            RuleViolation: If validation fails
        """
        pass

    @property
    @abstractmethod
    def rule_type(self) -> str:
        """Return the rule type identifier."""
        pass

    def fail(self, message: str, field_name: str | None = None) -> RuleViolation:
        """Build a violation carrying this validator's code."""
        return RuleViolation(self.code, field_name or self.field_name, message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(field={self.field_name}, params={self.parameters})"


def is_number(value: Any) -> bool:
    """True for real numbers that are not NaN (bool excluded)."""
    if isinstance(value, bool) or not isinstance(value, int | float):
        return False
    return not math.isnan(value)


def display_number(value: float) -> str:
    """Render a number the way it was most likely written (-3.0 -> "-3")."""
    if isinstance(value, float) and math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
