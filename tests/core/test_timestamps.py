"""Tests for time-zone and clock helpers."""

from datetime import UTC, datetime, timedelta, timezone

import pytest

from clockspine.core.errors import InvalidConfigError
from clockspine.core.timestamps import (
    local_timezone,
    resolve_timezone,
    system_clock,
    to_iso8601,
    utc_now,
)


class TestUtcNow:
    def test_is_aware_utc(self):
        now = utc_now()
        assert now.tzinfo is UTC


class TestResolveTimezone:
    def test_none_is_local(self):
        assert resolve_timezone(None).utcoffset(datetime.now()) == (
            local_timezone().utcoffset(datetime.now())
        )

    def test_tzinfo_passthrough(self):
        tz = timezone(timedelta(hours=3))
        assert resolve_timezone(tz) is tz

    def test_unknown_name(self):
        with pytest.raises(InvalidConfigError) as exc_info:
            resolve_timezone("Nowhere/Special")

        assert exc_info.value.key == "timezone"
        assert exc_info.value.__cause__ is not None


class TestSystemClock:
    def test_reads_in_zone(self):
        tz = timezone(timedelta(hours=-7))
        now = system_clock(tz)()

        assert now.tzinfo is tz
        assert abs(now - utc_now()) < timedelta(seconds=5)


class TestToIso8601:
    def test_none(self):
        assert to_iso8601(None) is None

    def test_aware_datetime(self):
        dt = datetime(2026, 10, 14, 9, 0, tzinfo=UTC)
        assert to_iso8601(dt) == "2026-10-14T09:00:00+00:00"
