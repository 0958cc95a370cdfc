"""
Scheduler settings.

``SchedulerSettings`` is read from ``CLOCKSPINE_*`` environment variables
(and a ``.env`` file when present). ``get_settings()`` caches one
validated instance per process.

Examples:
    >>> import os
    >>> os.environ["CLOCKSPINE_TICK_INTERVAL_SECONDS"] = "0.5"
    >>> clear_settings_cache()
    >>> get_settings().tick_interval_seconds
    0.5

Tags:
    settings, configuration, pydantic, environment, clockspine
"""

from __future__ import annotations

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SchedulerSettings(BaseSettings):
    """Clockspine configuration.

    Fields
    ──────
    tick_interval_seconds : Background loop period
    timezone              : IANA zone for clock-time anchors (None = system local)
    max_workers           : Thread pool size for job payloads
    history_size          : Number of dispatch results kept for inspection
    log_level             : Structlog log level
    log_format            : ``json`` or ``console``
    """

    model_config = SettingsConfigDict(
        env_prefix="CLOCKSPINE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ── Dispatch loop ────────────────────────────────────────────
    tick_interval_seconds: float = Field(default=1.0, gt=0)
    timezone: str | None = Field(default=None, description="IANA time zone name")

    # ── Payload execution ────────────────────────────────────────
    max_workers: int = Field(default=8, gt=0)
    history_size: int = Field(default=100, ge=0)

    # ── Observability ────────────────────────────────────────────
    log_level: str = Field(default="INFO")
    log_format: str = Field(default="console")

    @field_validator("log_format")
    @classmethod
    def _check_log_format(cls, value: str) -> str:
        value = value.lower()
        if value not in ("json", "console"):
            raise ValueError("log_format must be 'json' or 'console'")
        return value

    @property
    def json_logs(self) -> bool:
        return self.log_format == "json"


# ── Settings factory with caching ────────────────────────────────────────

_settings_cache: dict[str, SchedulerSettings] = {}


def get_settings(*, _force_reload: bool = False) -> SchedulerSettings:
    """Load, validate, and cache a :class:`SchedulerSettings` instance."""
    if not _force_reload and "default" in _settings_cache:
        return _settings_cache["default"]

    settings = SchedulerSettings()
    _settings_cache["default"] = settings
    return settings


def clear_settings_cache() -> None:
    """Drop the cached settings so the next call re-reads the environment."""
    _settings_cache.clear()


__all__ = ["SchedulerSettings", "get_settings", "clear_settings_cache"]
