"""
Timestamp validators - parseability, future, retention window and chronology.

All four share the same format gate: they only look at values that matched
the ISO-8601 pattern, so a malformed timestamp yields a single format error.
"""

import re
from datetime import datetime, timedelta, timezone
from typing import Any

from labflow.core.errors import ErrorCode

from .base_validator import BaseValidator

ISO_UTC_PATTERN = r"^[0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}(:[0-9]{2}(\.[0-9]+)?)?Z$"

_ISO_PARTS = re.compile(
    r"^([0-9]{4})-([0-9]{2})-([0-9]{2})T([0-9]{2}):([0-9]{2})(?::([0-9]{2})(?:\.([0-9]+))?)?Z$"
)


def parse_iso_utc(text: str) -> datetime | None:
    """
    Parse ``YYYY-MM-DDTHH:MM[:SS[.fff]]Z`` into an aware UTC datetime.

    Fractions beyond microseconds are truncated.

    Returns:
        The parsed datetime, or None when the text does not match the format
        or names an impossible calendar time.
    """
    match = _ISO_PARTS.match(text or "")
    if not match:
        return None

    year, month, day, hour, minute, second, fraction = match.groups()
    micros = int((fraction or "0")[:6].ljust(6, "0"))
    try:
        return datetime(
            int(year), int(month), int(day),
            int(hour), int(minute), int(second or 0), micros,
            tzinfo=timezone.utc,
        )
    except ValueError:
        return None


class _TimestampValidator(BaseValidator):
    """Shared format gate for timestamp rules."""

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)
        self.pattern = re.compile(self.parameters.get("pattern", ISO_UTC_PATTERN), re.ASCII)
        self.now = datetime.now(timezone.utc)

    def begin_batch(self, now: datetime) -> None:
        self.now = now

    def _formatted(self, value: Any) -> bool:
        return isinstance(value, str) and bool(self.pattern.fullmatch(value))


class TimestampParseValidator(_TimestampValidator):
    """Fails when a well-formatted timestamp names an impossible time (e.g. month 13)."""

    code = ErrorCode.FORMAT

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        if self._formatted(value) and parse_iso_utc(value) is None:
            raise self.fail(f"Unparseable {self.field_name}")

    @property
    def rule_type(self) -> str:
        return "timestamp_parse"


class FutureTimestampValidator(_TimestampValidator):
    """Fails when the timestamp is later than the batch validation time."""

    code = ErrorCode.CHRONOLOGY

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        if not self._formatted(value):
            return
        moment = parse_iso_utc(value)
        if moment is not None and moment > self.now:
            raise self.fail(f"{self.field_name} cannot be in the future")

    @property
    def rule_type(self) -> str:
        return "not_future"


class RetentionValidator(_TimestampValidator):
    """
    Fails when the timestamp is older than the retention window.

    Parameters:
    - max_age_days: Window length in days (default 3 * 365)
    """

    code = ErrorCode.OUT_OF_RANGE

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)
        self.max_age = timedelta(days=self.parameters.get("max_age_days", 3 * 365))

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        if not self._formatted(value):
            return
        moment = parse_iso_utc(value)
        if moment is not None and moment < self.now - self.max_age:
            years = self.max_age.days // 365
            raise self.fail(f"{self.field_name} older than {years} years")

    @property
    def rule_type(self) -> str:
        return "retention"


class ChronologyValidator(_TimestampValidator):
    """
    Fails when the timestamp is earlier than any parseable timestamp seen
    before it in input order.

    Equal timestamps pass (non-decreasing). The running maximum advances on
    every parseable timestamp, including ones from records that fail other rules.
    """

    code = ErrorCode.CHRONOLOGY

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)
        self._latest: datetime | None = None

    def begin_batch(self, now: datetime) -> None:
        super().begin_batch(now)
        self._latest = None

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        if not self._formatted(value):
            return
        moment = parse_iso_utc(value)
        if moment is None:
            return

        out_of_order = self._latest is not None and moment < self._latest
        if self._latest is None or moment > self._latest:
            self._latest = moment

        if out_of_order:
            raise self.fail("Dataset chronology must be non-decreasing")

    @property
    def rule_type(self) -> str:
        return "chronology"
