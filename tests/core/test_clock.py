"""
Tests for the engine clock and timestamp utilities.

============================================================
PURPOSE
============================================================
Verify that:
1. MockClock and ClockFactory make "now" deterministic
2. Provider timestamps in every accepted shape parse to UTC
3. ISO 8601 output has millisecond precision and a Z suffix
4. Day spans round half-up and never go negative

============================================================
"""

from datetime import datetime, timedelta, timezone

import pytest

from core.clock import (
    ClockFactory,
    MockClock,
    SystemClock,
    days_between,
    ensure_utc,
    from_iso8601,
    parse_timestamp,
    resolve_clock,
    to_iso8601,
)


# ============================================================
# FIXTURES
# ============================================================

@pytest.fixture
def fixed_time():
    """A fixed UTC instant."""
    return datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def mock_clock(fixed_time):
    """Mock clock pinned to the fixed instant."""
    return MockClock(fixed_time)


# ============================================================
# CLOCK TESTS
# ============================================================

class TestMockClock:
    """Tests for the mock clock."""

    def test_now_is_fixed(self, mock_clock, fixed_time):
        assert mock_clock.now() == fixed_time
        assert mock_clock.now() == fixed_time

    def test_advance(self, mock_clock, fixed_time):
        mock_clock.advance(days=2, hours=3)
        assert mock_clock.now() == fixed_time + timedelta(days=2, hours=3)

    def test_set_time_makes_naive_utc(self, mock_clock):
        mock_clock.set_time(datetime(2025, 1, 1))
        assert mock_clock.now() == datetime(2025, 1, 1, tzinfo=timezone.utc)

    def test_days_ago(self, mock_clock, fixed_time):
        assert mock_clock.days_ago(30) == fixed_time - timedelta(days=30)

    def test_today(self, mock_clock):
        assert mock_clock.today().isoformat() == "2024-03-01"


class TestClockFactory:
    """Tests for the process-wide default clock."""

    def test_use_mock_restores_previous_clock(self, fixed_time):
        ClockFactory.reset()
        original = ClockFactory.get_clock()

        with ClockFactory.use_mock(fixed_time) as clock:
            assert ClockFactory.get_clock() is clock
            assert resolve_clock().now() == fixed_time

        assert ClockFactory.get_clock() is original

    def test_resolve_prefers_explicit_clock(self, mock_clock):
        assert resolve_clock(mock_clock) is mock_clock

    def test_default_is_system_clock(self):
        ClockFactory.reset()
        assert isinstance(ClockFactory.get_clock(), SystemClock)
        assert ClockFactory.get_clock().now().tzinfo is not None


# ============================================================
# TIMESTAMP PARSING TESTS
# ============================================================

class TestParseTimestamp:
    """Tests for provider timestamp coercion."""

    def test_epoch_seconds(self):
        expected = datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)
        assert parse_timestamp(1700000000) == expected

    def test_epoch_milliseconds(self):
        expected = datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)
        assert parse_timestamp(1700000000000) == expected

    def test_numeric_string(self):
        assert parse_timestamp("1700000000000") == parse_timestamp(1700000000)

    def test_iso_string_with_z(self, fixed_time):
        assert parse_timestamp("2024-03-01T12:00:00Z") == fixed_time

    def test_iso_string_with_offset(self, fixed_time):
        assert parse_timestamp("2024-03-01T14:00:00+02:00") == fixed_time

    def test_naive_datetime_is_utc(self, fixed_time):
        assert parse_timestamp(datetime(2024, 3, 1, 12)) == fixed_time

    def test_empty_values(self):
        assert parse_timestamp(None) is None
        assert parse_timestamp("") is None

    @pytest.mark.parametrize("value", [1e300, float("inf"), float("-inf"), float("nan"), "1e300"])
    def test_out_of_range_epochs_raise_value_error(self, value):
        with pytest.raises(ValueError):
            parse_timestamp(value)

    @pytest.mark.parametrize("value", ["not a time", True, [1, 2]])
    def test_invalid_values_raise(self, value):
        with pytest.raises(ValueError):
            parse_timestamp(value)


class TestIsoFormatting:
    """Tests for ISO 8601 formatting."""

    def test_millisecond_precision(self):
        dt = datetime(2024, 3, 1, 12, 0, 0, 123456, tzinfo=timezone.utc)
        assert to_iso8601(dt) == "2024-03-01T12:00:00.123Z"

    def test_converts_to_utc(self):
        dt = datetime(2024, 3, 1, 14, 0, tzinfo=timezone(timedelta(hours=2)))
        assert to_iso8601(dt) == "2024-03-01T12:00:00.000Z"

    def test_from_iso8601(self, fixed_time):
        assert from_iso8601("2024-03-01T12:00:00.000Z") == fixed_time

    def test_ensure_utc(self, fixed_time):
        assert ensure_utc(datetime(2024, 3, 1, 12)) == fixed_time


# ============================================================
# DAY SPAN TESTS
# ============================================================

class TestDaysBetween:
    """Tests for whole-day spans."""

    def test_rounds_half_up(self, fixed_time):
        assert days_between(fixed_time, fixed_time + timedelta(days=2, hours=12)) == 3

    def test_rounds_down_below_half(self, fixed_time):
        assert days_between(fixed_time, fixed_time + timedelta(days=2, hours=11)) == 2

    def test_never_negative(self, fixed_time):
        assert days_between(fixed_time, fixed_time - timedelta(days=5)) == 0

    def test_missing_endpoint(self, fixed_time):
        assert days_between(None, fixed_time) == 0
        assert days_between(fixed_time, None) == 0
