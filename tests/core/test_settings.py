"""Tests for core.settings module.

Covers:
- SchedulerSettings defaults
- CLOCKSPINE_* environment override
- Field validation
- get_settings() caching
"""

import pytest
from pydantic import ValidationError

from clockspine.core.settings import SchedulerSettings, clear_settings_cache, get_settings


class TestSchedulerSettingsDefaults:
    def test_default_tick_interval(self):
        assert SchedulerSettings().tick_interval_seconds == 1.0

    def test_default_timezone_is_local(self):
        assert SchedulerSettings().timezone is None

    def test_default_pool(self):
        s = SchedulerSettings()
        assert s.max_workers == 8
        assert s.history_size == 100

    def test_default_logging(self):
        s = SchedulerSettings()
        assert s.log_level == "INFO"
        assert s.log_format == "console"
        assert s.json_logs is False


class TestSchedulerSettingsEnvOverride:
    def test_tick_interval_from_env(self, monkeypatch):
        monkeypatch.setenv("CLOCKSPINE_TICK_INTERVAL_SECONDS", "0.25")
        assert SchedulerSettings().tick_interval_seconds == 0.25

    def test_timezone_from_env(self, monkeypatch):
        monkeypatch.setenv("CLOCKSPINE_TIMEZONE", "Europe/Berlin")
        assert SchedulerSettings().timezone == "Europe/Berlin"

    def test_unprefixed_variable_ignored(self, monkeypatch):
        monkeypatch.setenv("MAX_WORKERS", "99")
        assert SchedulerSettings().max_workers == 8

    def test_log_format_normalized(self, monkeypatch):
        monkeypatch.setenv("CLOCKSPINE_LOG_FORMAT", "JSON")
        s = SchedulerSettings()
        assert s.log_format == "json"
        assert s.json_logs is True

    def test_dotenv_file(self, tmp_path):
        (tmp_path / ".env").write_text("CLOCKSPINE_MAX_WORKERS=3\n")
        assert SchedulerSettings().max_workers == 3


class TestSchedulerSettingsValidation:
    @pytest.mark.parametrize("value", [0, -1.0])
    def test_tick_interval_must_be_positive(self, value):
        with pytest.raises(ValidationError):
            SchedulerSettings(tick_interval_seconds=value)

    def test_max_workers_must_be_positive(self):
        with pytest.raises(ValidationError):
            SchedulerSettings(max_workers=0)

    def test_unknown_log_format(self):
        with pytest.raises(ValidationError):
            SchedulerSettings(log_format="xml")


class TestGetSettings:
    def test_cached(self):
        assert get_settings() is get_settings()

    def test_force_reload(self):
        first = get_settings()
        assert get_settings(_force_reload=True) is not first

    def test_clear_cache_rereads_env(self, monkeypatch):
        get_settings()
        monkeypatch.setenv("CLOCKSPINE_HISTORY_SIZE", "5")
        clear_settings_cache()

        assert get_settings().history_size == 5
