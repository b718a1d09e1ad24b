"""
Unit tests for quality-gate rules.

Includes property-based testing with hypothesis for validators.
"""

import math
from datetime import datetime, timedelta, timezone

import pytest
from hypothesis import given
from hypothesis import strategies as st

from labflow.core.errors import ErrorCode
from labflow.core.validators import (
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
    parse_iso_utc,
)

NOW = datetime(2026, 2, 1, tzinfo=timezone.utc)


@pytest.mark.unit
class TestRequiredFieldValidator:
    """Tests for RequiredFieldValidator"""

    def test_present_value_passes(self):
        """Test validation passes for a populated field"""
        RequiredFieldValidator("id").validate("SMP-1", {"id": "SMP-1"})  # Should not raise

    @pytest.mark.parametrize("value", [None, "", math.nan])
    def test_missing_values_raise(self, value):
        """Test None, empty string and NaN count as missing"""
        with pytest.raises(RuleViolation) as exc_info:
            RequiredFieldValidator("value").validate(value, {})
        assert exc_info.value.code == ErrorCode.MISSING_FIELD
        assert exc_info.value.field_name == "value"
        assert exc_info.value.message == "Required field 'value' is missing"

    def test_zero_is_present(self):
        """Test a zero measurement is not missing"""
        RequiredFieldValidator("value").validate(0.0, {})  # Should not raise


@pytest.mark.unit
class TestEnumValidator:
    """Tests for EnumValidator"""

    def test_allowed_value_passes(self):
        """Test members of the set pass"""
        EnumValidator("status", {"allowed": ["RECEIVED"]}).validate("RECEIVED", {})

    def test_unknown_value_raises(self):
        """Test values outside the set fail with E002"""
        with pytest.raises(RuleViolation) as exc_info:
            EnumValidator("unit", {"allowed": ["MG/DL"]}).validate("XYZ", {})
        assert exc_info.value.code == ErrorCode.INVALID_ENUM
        assert exc_info.value.message == "Invalid unit 'XYZ'"

    def test_empty_value_skipped(self):
        """Test empty values are left to the required field rule"""
        EnumValidator("unit", {"allowed": ["MG/DL"]}).validate("", {})

    def test_requires_allowed(self):
        """Test construction without allowed values fails"""
        with pytest.raises(ValueError):
            EnumValidator("unit", {})


@pytest.mark.unit
class TestRangeValidator:
    """Tests for RangeValidator"""

    validator = RangeValidator("value", {"min": 0, "max": 1_000_000})

    @pytest.mark.parametrize("value", [0.0, 1.5, 1_000_000.0])
    def test_bounds_inclusive(self, value):
        """Test values on and inside the bounds pass"""
        self.validator.validate(value, {})

    def test_negative_value(self):
        """Test negative values fail with the negative message"""
        with pytest.raises(RuleViolation) as exc_info:
            self.validator.validate(-3.0, {})
        assert exc_info.value.code == ErrorCode.OUT_OF_RANGE
        assert exc_info.value.message == "Value cannot be negative: -3"

    @pytest.mark.parametrize("value", [1_000_000.01, 1_000_001.0, math.inf])
    def test_above_maximum(self, value):
        """Test values above the maximum fail"""
        with pytest.raises(RuleViolation) as exc_info:
            self.validator.validate(value, {})
        assert exc_info.value.message.startswith("Value out of range")

    def test_nan_skipped(self):
        """Test NaN is not range-checked"""
        self.validator.validate(math.nan, {})

    def test_nonzero_minimum_message(self):
        """Test a custom minimum reports the bound"""
        with pytest.raises(RuleViolation) as exc_info:
            RangeValidator("value", {"min": 10}).validate(5.0, {})
        assert exc_info.value.message == "Value 5 is less than minimum 10"

    def test_requires_a_bound(self):
        """Test construction without bounds fails"""
        with pytest.raises(ValueError):
            RangeValidator("value", {})

    @given(st.floats(min_value=0, max_value=1_000_000, allow_nan=False))
    def test_property_in_range_passes(self, value):
        """Property test: every value within bounds passes"""
        self.validator.validate(value, {})

    @given(st.floats(max_value=-1e-9, allow_nan=False, allow_infinity=False))
    def test_property_negative_fails(self, value):
        """Property test: every negative value fails"""
        with pytest.raises(RuleViolation):
            self.validator.validate(value, {})


@pytest.mark.unit
class TestPlausibilityValidator:
    """Tests for PlausibilityValidator"""

    validator = PlausibilityValidator("value", {"status": "REPORTED"})

    def test_reported_without_value_fails(self):
        """Test REPORTED with NaN fails with E005"""
        with pytest.raises(RuleViolation) as exc_info:
            self.validator.validate(math.nan, {"status": "REPORTED"})
        assert exc_info.value.code == ErrorCode.PLAUSIBILITY
        assert exc_info.value.message == "REPORTED requires a numeric value"

    def test_reported_with_value_passes(self):
        """Test REPORTED with a number passes"""
        self.validator.validate(0.0, {"status": "REPORTED"})

    def test_other_status_ignored(self):
        """Test other statuses never trigger the rule"""
        self.validator.validate(math.nan, {"status": "RECEIVED"})


@pytest.mark.unit
class TestRegexValidator:
    """Tests for RegexValidator"""

    def test_id_pattern(self):
        """Test the id pattern accepts ids and rejects spaces"""
        validator = RegexValidator("id", {"pattern": r"^[A-Za-z0-9\-_]{4,40}$", "message": "Invalid id format"})
        validator.validate("SMP-1001", {})
        with pytest.raises(RuleViolation) as exc_info:
            validator.validate("bad id!", {})
        assert exc_info.value.code == ErrorCode.FORMAT
        assert exc_info.value.message == "Invalid id format"

    def test_empty_value_skipped(self):
        """Test empty values are not format-checked"""
        RegexValidator("accession", {"pattern": r"^[A-Z0-9\-]{8,30}$"}).validate("", {})

    def test_invalid_pattern(self):
        """Test a broken pattern fails at construction"""
        with pytest.raises(ValueError, match="Invalid regex pattern"):
            RegexValidator("id", {"pattern": "[unclosed"})

    @given(st.from_regex(r"[A-Z0-9\-]{8,30}", fullmatch=True))
    def test_property_matching_accessions_pass(self, value):
        """Property test: generated accessions always pass"""
        RegexValidator("accession", {"pattern": r"^[A-Z0-9\-]{8,30}$"}).validate(value, {})


@pytest.mark.unit
class TestParseIsoUtc:
    """Tests for parse_iso_utc"""

    def test_full_precision(self):
        """Test fractional seconds are kept to the microsecond"""
        assert parse_iso_utc("2026-01-15T09:00:00.1234567Z") == datetime(
            2026, 1, 15, 9, 0, 0, 123456, tzinfo=timezone.utc
        )

    def test_minutes_only(self):
        """Test seconds are optional"""
        assert parse_iso_utc("2026-01-15T09:00Z") == datetime(2026, 1, 15, 9, 0, tzinfo=timezone.utc)

    @pytest.mark.parametrize("text", ["2026-13-01T00:00:00Z", "2026-02-30T00:00:00Z", "2026-01-15 09:00", ""])
    def test_invalid_returns_none(self, text):
        """Test impossible or malformed timestamps return None"""
        assert parse_iso_utc(text) is None


@pytest.mark.unit
class TestTimestampValidators:
    """Tests for the timestamp rule family"""

    def _started(self, validator):
        validator.begin_batch(NOW)
        return validator

    def test_impossible_date_unparseable(self):
        """Test a well-formatted impossible date is E007"""
        validator = self._started(TimestampParseValidator("collectedAt"))
        with pytest.raises(RuleViolation) as exc_info:
            validator.validate("2026-02-30T00:00:00Z", {})
        assert exc_info.value.code == ErrorCode.FORMAT
        assert exc_info.value.message == "Unparseable collectedAt"

    def test_malformed_skipped_by_temporal_rules(self):
        """Test malformed text is left to the format rule"""
        for cls in (TimestampParseValidator, FutureTimestampValidator, RetentionValidator, ChronologyValidator):
            self._started(cls("collectedAt")).validate("yesterday", {})

    def test_now_is_not_future(self):
        """Test a timestamp equal to the validation time passes"""
        self._started(FutureTimestampValidator("collectedAt")).validate("2026-02-01T00:00:00Z", {})

    def test_one_millisecond_ahead_is_future(self):
        """Test a timestamp 1 ms after the validation time fails"""
        validator = self._started(FutureTimestampValidator("collectedAt"))
        with pytest.raises(RuleViolation) as exc_info:
            validator.validate("2026-02-01T00:00:00.001Z", {})
        assert exc_info.value.code == ErrorCode.CHRONOLOGY
        assert exc_info.value.message == "collectedAt cannot be in the future"

    def test_retention_window(self):
        """Test timestamps older than three years fail with E003"""
        validator = self._started(RetentionValidator("collectedAt", {"max_age_days": 3 * 365}))
        edge = NOW - timedelta(days=3 * 365)
        validator.validate(edge.strftime("%Y-%m-%dT%H:%M:%SZ"), {})
        with pytest.raises(RuleViolation) as exc_info:
            validator.validate("2020-01-01T00:00:00Z", {})
        assert exc_info.value.code == ErrorCode.OUT_OF_RANGE
        assert exc_info.value.message == "collectedAt older than 3 years"

    def test_chronology_allows_equal_timestamps(self):
        """Test equal consecutive timestamps pass"""
        validator = self._started(ChronologyValidator("collectedAt"))
        validator.validate("2026-01-15T09:00:00Z", {})
        validator.validate("2026-01-15T09:00:00Z", {})

    def test_chronology_compares_to_running_maximum(self):
        """Test a timestamp earlier than any earlier one fails"""
        validator = self._started(ChronologyValidator("collectedAt"))
        validator.validate("2026-01-15T09:00:00Z", {})
        validator.validate("2026-01-15T10:00:00Z", {})
        with pytest.raises(RuleViolation) as exc_info:
            validator.validate("2026-01-15T09:30:00Z", {})
        assert exc_info.value.code == ErrorCode.CHRONOLOGY
        # The maximum is still 10:00
        with pytest.raises(RuleViolation):
            validator.validate("2026-01-15T09:45:00Z", {})

    def test_chronology_resets_per_batch(self):
        """Test begin_batch clears the running maximum"""
        validator = self._started(ChronologyValidator("collectedAt"))
        validator.validate("2026-01-15T10:00:00Z", {})
        validator.begin_batch(NOW)
        validator.validate("2026-01-15T09:00:00Z", {})

    @given(st.lists(st.datetimes(min_value=datetime(2024, 1, 1), max_value=datetime(2026, 1, 1)), min_size=1))
    def test_property_sorted_timestamps_pass(self, moments):
        """Property test: non-decreasing input never fails chronology"""
        validator = self._started(ChronologyValidator("collectedAt"))
        for moment in sorted(moments):
            validator.validate(moment.strftime("%Y-%m-%dT%H:%M:%S.%fZ"), {})


@pytest.mark.unit
class TestDuplicateValidator:
    """Tests for DuplicateValidator"""

    def test_second_occurrence_fails(self):
        """Test the first key passes and repeats fail with E006"""
        validator = DuplicateValidator("id/accession")
        validator.begin_batch(NOW)
        record = {"id": "SMP-1", "accession": "ACC-00000001"}
        validator.validate(None, record)
        with pytest.raises(RuleViolation) as exc_info:
            validator.validate(None, record)
        assert exc_info.value.code == ErrorCode.DUPLICATE
        assert exc_info.value.field_name == "id/accession"
        assert exc_info.value.message == "Duplicate id+accession"

    def test_same_id_different_accession_passes(self):
        """Test the key covers both fields"""
        validator = DuplicateValidator("id/accession")
        validator.begin_batch(NOW)
        validator.validate(None, {"id": "SMP-1", "accession": "ACC-00000001"})
        validator.validate(None, {"id": "SMP-1", "accession": "ACC-00000002"})

    def test_missing_accession_keys_on_id(self):
        """Test records without accession collide on id alone"""
        validator = DuplicateValidator("id/accession")
        validator.begin_batch(NOW)
        validator.validate(None, {"id": "SMP-1", "accession": ""})
        with pytest.raises(RuleViolation):
            validator.validate(None, {"id": "SMP-1"})
