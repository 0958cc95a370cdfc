"""Tests for recurrence units, weekdays and clock-time parsing."""

from datetime import date, timedelta

import pytest

from clockspine.core.errors import TimeFormatError
from clockspine.scheduling.units import TimeUnit, Weekday, days_since, parse_clock_time


class TestTimeUnit:
    """Unit multipliers."""

    @pytest.mark.parametrize(
        "unit,seconds",
        [
            (TimeUnit.SECONDS, 1),
            (TimeUnit.MINUTES, 60),
            (TimeUnit.HOURS, 3600),
            (TimeUnit.DAYS, 86400),
            (TimeUnit.WEEKS, 604800),
        ],
    )
    def test_unit_seconds(self, unit, seconds):
        assert unit.seconds == seconds
        assert unit.period(3) == timedelta(seconds=3 * seconds)

    def test_unit_values_are_plain_strings(self):
        assert TimeUnit.MINUTES.value == "minutes"
        assert TimeUnit("weeks") is TimeUnit.WEEKS


class TestWeekday:
    """Sunday-first weekday numbering."""

    def test_sunday_is_zero(self):
        assert Weekday.SUNDAY == 0
        assert Weekday.SATURDAY == 6

    def test_of_date(self):
        assert Weekday.of(date(2026, 10, 14)) is Weekday.WEDNESDAY
        assert Weekday.of(date(2026, 10, 18)) is Weekday.SUNDAY
        assert Weekday.of(date(2026, 10, 17)) is Weekday.SATURDAY

    def test_days_since_same_day(self):
        assert days_since(Weekday.WEDNESDAY, Weekday.WEDNESDAY) == 0

    def test_days_since_earlier_in_week(self):
        assert days_since(Weekday.WEDNESDAY, Weekday.MONDAY) == 2

    def test_days_since_wraps_across_week_boundary(self):
        # Monday back to the previous Friday
        assert days_since(Weekday.MONDAY, Weekday.FRIDAY) == 3
        assert days_since(Weekday.SUNDAY, Weekday.SATURDAY) == 1


class TestParseClockTime:
    """HH:MM parsing."""

    @pytest.mark.parametrize(
        "value,expected",
        [("10:30", (10, 30)), ("00:00", (0, 0)), ("23:59", (23, 59)), ("7:05", (7, 5))],
    )
    def test_valid(self, value, expected):
        assert parse_clock_time(value) == expected

    @pytest.mark.parametrize(
        "value",
        ["25:00", "24:00", "10:60", "-1:30", "10-30", "abc", "10:30:00", "", ":", "10:", None],
    )
    def test_invalid(self, value):
        with pytest.raises(TimeFormatError):
            parse_clock_time(value)

    def test_error_keeps_value_and_cause(self):
        with pytest.raises(TimeFormatError) as exc_info:
            parse_clock_time("ab:cd")

        assert exc_info.value.value == "ab:cd"
        assert isinstance(exc_info.value.__cause__, ValueError)

    @pytest.mark.parametrize("value", [" 9:30", "9:30 ", "1_0:30", "+9:30", "9:+30", "٩:30", "009:00"])
    def test_only_ascii_digit_fields(self, value):
        with pytest.raises(TimeFormatError) as exc_info:
            parse_clock_time(value)

        assert isinstance(exc_info.value.__cause__, ValueError)
