"""
DuplicateValidator - detects repeated natural keys within a batch.
"""

from datetime import datetime
from typing import Any

from labflow.core.errors import ErrorCode

from .base_validator import BaseValidator


class DuplicateValidator(BaseValidator):
    """
    Validates that the ``id::accession`` key has not been seen earlier in the batch.

    The first occurrence is accepted; every later occurrence fails. The key
    is registered regardless of whether the record passes other rules.

    Parameters:
    - key_fields: Two wire field names forming the key (default id, accession)
    """

    code = ErrorCode.DUPLICATE

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)
        self.key_fields = tuple(self.parameters.get("key_fields", ("id", "accession")))
        self._seen: set[str] = set()

    def begin_batch(self, now: datetime) -> None:
        self._seen = set()

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        key = "::".join(str(record.get(name) or "") for name in self.key_fields)

        if key in self._seen:
            raise self.fail("Duplicate id+accession")
        self._seen.add(key)

    @property
    def rule_type(self) -> str:
        return "duplicate"
