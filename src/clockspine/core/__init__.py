"""Clockspine core -- errors, logging, settings and time helpers.

Architecture::

    errors.py       Structured error hierarchy (ClockspineError)
    logging.py      structlog configuration + get_logger
    settings.py     SchedulerSettings (pydantic-settings, CLOCKSPINE_*)
    timestamps.py   Time-zone resolution and clocks
"""

from .errors import (
    ClockspineError,
    ErrorCategory,
    ErrorContext,
    IntervalError,
    InvalidConfigError,
    JobAlreadyArmedError,
    JobArityError,
    JobExecutionError,
    NotCallableError,
    ScheduleConfigError,
    TimeFormatError,
)
from .logging import configure_logging, configure_logging_from_settings, get_logger
from .settings import SchedulerSettings, clear_settings_cache, get_settings

__all__ = [
    "ClockspineError",
    "ErrorCategory",
    "ErrorContext",
    "IntervalError",
    "InvalidConfigError",
    "JobAlreadyArmedError",
    "JobArityError",
    "JobExecutionError",
    "NotCallableError",
    "ScheduleConfigError",
    "TimeFormatError",
    "configure_logging",
    "configure_logging_from_settings",
    "get_logger",
    "SchedulerSettings",
    "clear_settings_cache",
    "get_settings",
]
