"""Clockspine -- in-process periodic job scheduling.

Register work with a human-readable recurrence rule and let a background
tick fire it::

    import clockspine

    clockspine.every(10).minutes.do(refresh_cache)
    clockspine.every(1).monday.at("09:00").do(send_digest, "team")
    handle = clockspine.start()

The module-level functions delegate to a process-wide default scheduler
(see :mod:`clockspine.default`). Construct a :class:`Scheduler` directly to
keep schedules isolated.
"""

from clockspine.core.errors import (
    ClockspineError,
    IntervalError,
    JobAlreadyArmedError,
    JobArityError,
    JobExecutionError,
    NotCallableError,
    ScheduleConfigError,
    TimeFormatError,
)
from clockspine.core.logging import configure_logging
from clockspine.default import (
    change_timezone,
    clear,
    every,
    get_default_scheduler,
    next_run,
    remove,
    run_all,
    run_all_with_delay,
    run_pending,
    start,
    stop,
)
from clockspine.scheduling import Job, Scheduler, TimeUnit, Weekday

__version__ = "0.1.0"

__all__ = [
    "Scheduler",
    "Job",
    "TimeUnit",
    "Weekday",
    # Errors
    "ClockspineError",
    "ScheduleConfigError",
    "IntervalError",
    "TimeFormatError",
    "NotCallableError",
    "JobAlreadyArmedError",
    "JobExecutionError",
    "JobArityError",
    # Default scheduler
    "get_default_scheduler",
    "every",
    "run_pending",
    "run_all",
    "run_all_with_delay",
    "next_run",
    "remove",
    "clear",
    "start",
    "stop",
    "change_timezone",
    "configure_logging",
]
