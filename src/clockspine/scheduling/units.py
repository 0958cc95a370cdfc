"""Recurrence units, weekdays and clock-time parsing."""

from __future__ import annotations

import re
from datetime import date, timedelta
from enum import Enum, IntEnum

from clockspine.core.errors import TimeFormatError


class TimeUnit(str, Enum):
    """Granularity of a job's interval."""

    SECONDS = "seconds"
    MINUTES = "minutes"
    HOURS = "hours"
    DAYS = "days"
    WEEKS = "weeks"

    @property
    def seconds(self) -> int:
        """Length of one unit in seconds."""
        return _UNIT_SECONDS[self]

    def period(self, interval: int) -> timedelta:
        """Duration between runs for ``interval`` of this unit."""
        return timedelta(seconds=interval * self.seconds)


_UNIT_SECONDS = {
    TimeUnit.SECONDS: 1,
    TimeUnit.MINUTES: 60,
    TimeUnit.HOURS: 60 * 60,
    TimeUnit.DAYS: 60 * 60 * 24,
    TimeUnit.WEEKS: 60 * 60 * 24 * 7,
}


class Weekday(IntEnum):
    """Day of the week, Sunday first (0=Sunday .. 6=Saturday)."""

    SUNDAY = 0
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6

    @classmethod
    def of(cls, day: date) -> Weekday:
        """Weekday of a date (``date.weekday()`` counts from Monday)."""
        return cls((day.weekday() + 1) % 7)


def days_since(today: Weekday, start_day: Weekday) -> int:
    """Days back from ``today`` to the most recent ``start_day`` (0..6)."""
    return (today - start_day) % 7


_CLOCK_FIELD = re.compile(r"\d{1,2}", re.ASCII)


def _clock_field(part: str) -> int:
    if not _CLOCK_FIELD.fullmatch(part):
        raise ValueError(f"{part!r} is not one or two ASCII digits")
    return int(part)


def parse_clock_time(value: str) -> tuple[int, int]:
    """Parse ``"HH:MM"`` into ``(hour, minute)``.

    Each field is one or two ASCII digits; signs, whitespace and
    underscores are rejected.

    Raises:
        TimeFormatError: Not two digit fields, or hour/minute out of range.
    """
    if not isinstance(value, str):
        raise TimeFormatError(value)

    parts = value.split(":")
    if len(parts) != 2:
        raise TimeFormatError(value)

    try:
        hour, minute = _clock_field(parts[0]), _clock_field(parts[1])
    except ValueError as exc:
        raise TimeFormatError(value, cause=exc) from exc

    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise TimeFormatError(value)
    return hour, minute


__all__ = ["TimeUnit", "Weekday", "days_since", "parse_clock_time"]
