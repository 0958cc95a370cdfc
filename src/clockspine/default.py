"""Process-wide default scheduler.

Shortcuts for callers that don't want to create and pass around a
``Scheduler``. The default instance is created on first use from
``get_settings()`` and lives for the rest of the process; nothing tears it
down. Code that needs isolation (tests, libraries) should construct its
own ``Scheduler`` instead.

Example:
    >>> import clockspine
    >>> clockspine.every(5).minutes.do(refresh)
    >>> clockspine.start()
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from datetime import datetime, tzinfo
from typing import Any

from clockspine.scheduling.job import Job
from clockspine.scheduling.protocol import SchedulerBackend
from clockspine.scheduling.scheduler import Scheduler

_default_scheduler: Scheduler | None = None
_default_lock = threading.Lock()


def get_default_scheduler() -> Scheduler:
    """Get or create the global scheduler instance."""
    global _default_scheduler
    with _default_lock:
        if _default_scheduler is None:
            _default_scheduler = Scheduler()
        return _default_scheduler


def reset_default_scheduler() -> None:
    """Shut down and forget the global scheduler (used by tests)."""
    global _default_scheduler
    with _default_lock:
        scheduler, _default_scheduler = _default_scheduler, None
    if scheduler is not None:
        scheduler.shutdown(wait=False)


def every(interval: int = 1) -> Job:
    """Schedule a new periodic job on the default scheduler."""
    return get_default_scheduler().every(interval)


def run_pending() -> list[Job]:
    """Run all jobs that are scheduled to run.

    It is intended behavior that missed runs are not caught up: a job that
    should run every minute, polled once an hour, runs once per poll.
    """
    return get_default_scheduler().run_pending()


def run_all() -> list[Job]:
    """Run all jobs regardless of whether they are scheduled to run."""
    return get_default_scheduler().run_all()


def run_all_with_delay(delay: float) -> list[Job]:
    """Run all jobs with ``delay`` seconds between each one."""
    return get_default_scheduler().run_all_with_delay(delay)


def next_run() -> tuple[Job | None, datetime]:
    return get_default_scheduler().next_run()


def remove(identity: str | Callable[..., Any] | Job) -> bool:
    return get_default_scheduler().remove(identity)


def clear() -> None:
    get_default_scheduler().clear()


def start() -> SchedulerBackend:
    """Start the default scheduler's tick loop; returns the stop handle."""
    return get_default_scheduler().start()


def stop() -> None:
    get_default_scheduler().stop()


def change_timezone(tz: str | tzinfo | None) -> None:
    """Change the default scheduler's anchor time zone."""
    get_default_scheduler().timezone = tz


__all__ = [
    "get_default_scheduler",
    "reset_default_scheduler",
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
]
