"""
Time-zone and clock helpers (stdlib-only).

All scheduler arithmetic happens on timezone-aware datetimes in the zone
configured for the scheduler. A ``Clock`` is any zero-argument callable
returning such a datetime; tests substitute a controllable one.
"""

from __future__ import annotations

import zoneinfo
from collections.abc import Callable
from datetime import UTC, datetime, tzinfo

from .errors import InvalidConfigError

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(UTC)


def local_timezone() -> tzinfo:
    """Return the system's local time zone as a tzinfo."""
    return datetime.now().astimezone().tzinfo  # type: ignore[return-value]


def resolve_timezone(tz: str | tzinfo | None) -> tzinfo:
    """Turn a zone name, tzinfo or ``None`` (system local) into a tzinfo.

    Raises:
        InvalidConfigError: If ``tz`` names an unknown zone.
    """
    if tz is None:
        return local_timezone()
    if isinstance(tz, tzinfo):
        return tz
    try:
        return zoneinfo.ZoneInfo(tz)
    except (zoneinfo.ZoneInfoNotFoundError, ValueError) as exc:
        raise InvalidConfigError("timezone", tz, f"Unknown time zone: {tz!r}") from exc


def system_clock(tz: tzinfo) -> Clock:
    """Clock that reads wall time in ``tz``."""

    def _now() -> datetime:
        return datetime.now(tz)

    return _now


def to_iso8601(dt: datetime | None) -> str | None:
    """Convert datetime to ISO 8601 string."""
    if dt is None:
        return None
    return dt.isoformat()


__all__ = [
    "Clock",
    "utc_now",
    "local_timezone",
    "resolve_timezone",
    "system_clock",
    "to_iso8601",
]
