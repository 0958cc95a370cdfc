"""
Structured error types for clockspine.

Every failure the scheduler can raise is a typed ``ClockspineError`` that
carries a category, structured context and an optional chained cause. The
hierarchy splits errors by how the caller is expected to react:

- **Configuration misuse** (``ScheduleConfigError``): a programmer error in
  the builder chain. Raised immediately from the configuring call; the job
  is never left half-armed and callers are not expected to recover.
- **Execution failure** (``JobExecutionError``): a single fire of a single
  job failed. The dispatch loop logs it, counts it and moves on to the
  next due job.

Architecture:
    ::

        ┌──────────────────────────────────────────────────────────────┐
        │                      ClockspineError                          │
        │            (category, context, cause, to_dict)                │
        ├──────────────────────────────────────────────────────────────┤
        │                                                               │
        │  ScheduleConfigError (CONFIG)     JobExecutionError (EXECUTION)│
        │       │                                  │                    │
        │  IntervalError                     JobArityError              │
        │  TimeFormatError                                              │
        │  NotCallableError                 ConfigError (CONFIG)        │
        │  JobAlreadyArmedError                    │                    │
        │                                    InvalidConfigError         │
        └──────────────────────────────────────────────────────────────┘

Examples:
    >>> error = TimeFormatError("25:00")
    >>> error.category
    <ErrorCategory.CONFIG: 'CONFIG'>
    >>> error.with_context(job="backup").to_dict()["context"]
    {'job': 'backup'}

Guardrails:
    ❌ DON'T: Catch ScheduleConfigError to "retry" a builder chain
    ✅ DO: Fix the schedule definition

    ❌ DON'T: Let JobExecutionError escape the dispatch loop
    ✅ DO: Record it against the job and continue with sibling jobs

Tags:
    error-handling, exception-hierarchy, scheduling, clockspine
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Error categories used for classification and log routing."""

    CONFIG = "CONFIG"
    EXECUTION = "EXECUTION"
    INTERNAL = "INTERNAL"
    UNKNOWN = "UNKNOWN"


@dataclass
class ErrorContext:
    """
    What is known about the job an error concerns.

    ``metadata`` holds free-form extras. ``to_dict()`` flattens both and
    drops unset fields so the result can go straight into a log call.

    Attributes:
        job: Payload identity
        unit: Time unit of the recurrence rule
        interval: Interval multiplier of the recurrence rule
        metadata: Anything else worth logging
    """

    job: str | None = None
    unit: str | None = None
    interval: int | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        known = {f.name: getattr(self, f.name) for f in fields(self) if f.name != "metadata"}
        return {**{k: v for k, v in known.items() if v is not None}, **self.metadata}


_CONTEXT_FIELDS = frozenset(f.name for f in fields(ErrorContext)) - {"metadata"}


class ClockspineError(Exception):
    """
    Root of every error clockspine raises.

    Each subclass pins a ``default_category``. An instance carries its
    message, an ``ErrorContext``, and optionally the exception it wraps
    (chained as ``__cause__`` so tracebacks show both).
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category if category is not None else self.default_category
        self.context = context if context is not None else ErrorContext()
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> ClockspineError:
        """
        Attach context and return ``self`` so it can be raised inline::

            raise JobArityError("bad args").with_context(job="report", expected=2)
        """
        for key, value in kwargs.items():
            if key in _CONTEXT_FIELDS:
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Flat, JSON-friendly form for structured logs."""
        data: dict[str, Any] = {
            "error_type": type(self).__name__,
            "message": self.message,
            "category": self.category.value,
        }
        if context := self.context.to_dict():
            data["context"] = context
        if self.cause is not None:
            data["cause"] = str(self.cause)
        return data

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# CONFIGURATION MISUSE (fatal)
# =============================================================================


class ScheduleConfigError(ClockspineError):
    """
    A recurrence rule was configured incorrectly.

    Raised from the builder chain (``every(...).day.at(...).do(...)``).
    """

    default_category = ErrorCategory.CONFIG


class IntervalError(ScheduleConfigError):
    """Interval/unit combination is not allowed."""

    def __init__(self, message: str, *, interval: int | None = None, **kwargs: Any):
        super().__init__(message, **kwargs)
        self.interval = interval
        if interval is not None:
            self.context.interval = interval


class TimeFormatError(ScheduleConfigError):
    """Clock time is not a valid ``HH:MM`` string."""

    def __init__(self, value: Any, message: str | None = None, **kwargs: Any):
        self.value = value
        super().__init__(
            message or f"Invalid clock time {value!r}, expected 'HH:MM' (00:00-23:59)",
            **kwargs,
        )


class NotCallableError(ScheduleConfigError):
    """Only callables can be scheduled into the job queue."""

    def __init__(self, value: Any, **kwargs: Any):
        self.value = value
        super().__init__(
            f"Only callables can be scheduled, got {type(value).__name__}",
            **kwargs,
        )


class JobAlreadyArmedError(ScheduleConfigError):
    """The job already has a payload; its rule can no longer change."""

    pass


# =============================================================================
# EXECUTION FAILURES (recoverable, per fire)
# =============================================================================


class JobExecutionError(ClockspineError):
    """A single fire of a job failed."""

    default_category = ErrorCategory.EXECUTION


class JobArityError(JobExecutionError):
    """Bound arguments do not match the job callable's parameters."""

    pass


# =============================================================================
# SETTINGS
# =============================================================================


class ConfigError(ClockspineError):
    """Settings could not be loaded or applied."""

    default_category = ErrorCategory.CONFIG


class InvalidConfigError(ConfigError):
    """A setting (or equivalent constructor argument) has an unusable value."""

    def __init__(self, key: str, value: Any, message: str | None = None):
        self.key = key
        self.value = value
        super().__init__(message or f"{key}={value!r} is not a valid setting")
        self.context.metadata["key"] = key


def categorize_error(error: Exception) -> ErrorCategory:
    """Category for any exception; bad arguments count as CONFIG."""
    if isinstance(error, ClockspineError):
        return error.category
    return ErrorCategory.CONFIG if isinstance(error, (TypeError, ValueError)) else ErrorCategory.UNKNOWN


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "ClockspineError",
    # Configuration misuse
    "ScheduleConfigError",
    "IntervalError",
    "TimeFormatError",
    "NotCallableError",
    "JobAlreadyArmedError",
    # Execution
    "JobExecutionError",
    "JobArityError",
    # Settings
    "ConfigError",
    "InvalidConfigError",
    # Utilities
    "categorize_error",
]
