"""
Reader for the list intake format (JSON array of sample objects).
"""

import json

from labflow.core.errors import ErrorCode, IntakeError
from labflow.core.models import NormalizedSample

from .normalizer import normalize_record


def _reject_constant(name: str) -> float:
    raise ValueError(f"Unexpected token {name}")


class JsonReader:
    """
    Parses a JSON array of sample objects into normalized samples.

    Elements that are not objects normalize to empty records and are left
    for the quality gate to reject.
    """

    source = "json"

    def read(self, text: str) -> list[NormalizedSample]:
        """
        Parse and normalize a JSON batch.

        Args:
            text: Raw JSON text

        Returns:
            Normalized samples in input order

        Raises:
            IntakeError: E010 on syntax errors or when the top level is not an array
        """
        try:
            data = json.loads(text, parse_constant=_reject_constant)
        except ValueError as e:
            raise IntakeError(ErrorCode.JSON_PARSE, f"E010 JSON parse error: {e}")
        except RecursionError:
            raise IntakeError(ErrorCode.JSON_PARSE, "E010 JSON parse error: nesting too deep")

        if not isinstance(data, list):
            raise IntakeError(ErrorCode.JSON_PARSE, "JSON must be an array of clinical sample records.")

        return [
            normalize_record(item if isinstance(item, dict) else {}, source=self.source)
            for item in data
        ]
