"""Scheduler - owns the jobs, orders them, fires the due ones.

Manifesto:
    The scheduler is a poller. Each tick it sorts its jobs by ``next_run``,
    takes the prefix that is due and fires those jobs in order. Firing only
    submits the payload to the dispatcher and reschedules, so a tick stays
    short no matter what the jobs do.

    Polling does not catch up: a job that missed several periods between
    two polls fires once, and its next run is computed from the moment it
    actually fired.

┌──────────────────────────────────────────────────────────────────────────────┐
│  SCHEDULER                                                                    │
│                                                                               │
│   every(n) ─► Job (unarmed) ─► .unit / .weekday / .at() ─► .do(func, ...)    │
│                                                                               │
│   ┌─────────────────────┐  tick  ┌─────────────────────────────────────────┐ │
│   │ ThreadSchedulerBackend│ ────► │ run_pending()                           │ │
│   └─────────────────────┘        │   1. sort jobs by next_run (stable)      │ │
│                                  │   2. take due prefix                     │ │
│                                  │   3. job.run() for each, in order        │ │
│                                  │        └─► JobDispatcher.submit()        │ │
│                                  └─────────────────────────────────────────┘ │
│                                                                               │
│   All access to the job list goes through one re-entrant lock, so the        │
│   background tick and caller threads can share a scheduler.                  │
└──────────────────────────────────────────────────────────────────────────────┘

Tags:
    clockspine, scheduling, dispatch-loop, beat-as-poller
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, tzinfo
from typing import Any

from clockspine.core.errors import JobExecutionError
from clockspine.core.logging import get_logger
from clockspine.core.settings import SchedulerSettings, get_settings
from clockspine.core.timestamps import (
    Clock,
    resolve_timezone,
    system_clock,
    to_iso8601,
    utc_now,
)

from .dispatcher import JobDispatcher
from .job import Job
from .protocol import SchedulerBackend
from .thread_backend import ThreadSchedulerBackend

logger = get_logger(__name__)

JobIdentity = str | Callable[..., Any] | Job


@dataclass
class SchedulerStats:
    """Statistics for a scheduler."""

    tick_count: int = 0
    jobs_fired: int = 0
    jobs_failed: int = 0
    last_tick: datetime | None = None
    last_error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "tick_count": self.tick_count,
            "jobs_fired": self.jobs_fired,
            "jobs_failed": self.jobs_failed,
            "last_tick": to_iso8601(self.last_tick),
            "last_error": self.last_error,
        }


@dataclass
class SchedulerHealth:
    """Health status for a scheduler."""

    healthy: bool
    backend: dict[str, Any]
    jobs: int = 0
    armed_jobs: int = 0
    pending_payloads: int = 0
    stats: SchedulerStats = field(default_factory=SchedulerStats)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "healthy": self.healthy,
            "backend": self.backend,
            "jobs": self.jobs,
            "armed_jobs": self.armed_jobs,
            "pending_payloads": self.pending_payloads,
            "stats": self.stats.to_dict(),
        }


def _next_run_key(job: Job) -> tuple[bool, float]:
    # Unarmed jobs sort last so they never interrupt the due prefix.
    if job.next_run is None:
        return (True, 0.0)
    return (False, job.next_run.timestamp())


class Scheduler:
    """In-process periodic job scheduler.

    Example:
        >>> scheduler = Scheduler(tz="Europe/Berlin")
        >>> scheduler.every(10).seconds.do(poll_queue)
        >>> scheduler.every(1).monday.at("08:00").do(send_digest, "team")
        >>> handle = scheduler.start()
        >>> # ... later ...
        >>> handle.stop()
    """

    def __init__(
        self,
        settings: SchedulerSettings | None = None,
        *,
        tz: str | tzinfo | None = None,
        clock: Clock | None = None,
        dispatcher: JobDispatcher | None = None,
        backend: SchedulerBackend | None = None,
    ) -> None:
        """Initialize scheduler.

        Args:
            settings: Scheduler settings (default: ``get_settings()``)
            tz: Time zone for clock-time anchors (default: ``settings.timezone``)
            clock: Replacement for the wall clock, returns aware datetimes
            dispatcher: Payload executor (default: thread pool from settings)
            backend: Tick loop (default: ThreadSchedulerBackend)
        """
        self.settings = settings or get_settings()
        self._tz = resolve_timezone(tz if tz is not None else self.settings.timezone)
        self._custom_clock = clock
        self._clock = clock or system_clock(self._tz)

        self.dispatcher = dispatcher or JobDispatcher(
            max_workers=self.settings.max_workers,
            history_size=self.settings.history_size,
        )
        self.backend = backend or ThreadSchedulerBackend()

        self._jobs: list[Job] = []
        self._lock = threading.RLock()
        self._stats = SchedulerStats()

    # === Time ===

    def now(self) -> datetime:
        """Current instant in the scheduler's time zone."""
        return self._clock()

    @property
    def timezone(self) -> tzinfo:
        return self._tz

    @timezone.setter
    def timezone(self, tz: str | tzinfo | None) -> None:
        """Change the anchor time zone.

        All jobs, existing ones included, use the new zone from their next
        computation on; ``next_run`` values already computed are kept.
        """
        self._tz = resolve_timezone(tz)
        if self._custom_clock is None:
            self._clock = system_clock(self._tz)
        logger.info("timezone_changed", tz=str(self._tz))

    # === Configuration ===

    def every(self, interval: int = 1) -> Job:
        """Schedule a new periodic job.

        The job is unarmed until its ``do()`` is called.
        """
        job = Job(interval, clock=self.now, dispatcher=self.dispatcher)
        with self._lock:
            self._jobs.append(job)
        return job

    @property
    def jobs(self) -> list[Job]:
        """Snapshot of all jobs in current order."""
        with self._lock:
            return list(self._jobs)

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)

    # === Dispatch ===

    def _sort(self) -> None:
        self._jobs.sort(key=_next_run_key)

    def get_runnable_jobs(self) -> list[Job]:
        """Due jobs, earliest ``next_run`` first.

        Jobs are sorted, then scanned until the first one that is not due.
        """
        with self._lock:
            self._sort()
            now = self.now()
            runnable = []
            for job in self._jobs:
                if not job.should_run(now):
                    break
                runnable.append(job)
            return runnable

    def run_pending(self) -> list[Job]:
        """Fire every job that is due, in ``next_run`` order.

        Missed periods are not caught up: if polled rarely, a job fires
        once per poll no matter how many periods have elapsed.

        Returns:
            Jobs that were fired successfully.
        """
        with self._lock:
            runnable = self.get_runnable_jobs()
            if runnable:
                logger.debug("jobs_due", count=len(runnable))
            return [job for job in runnable if self._fire(job)]

    def run_all(self) -> list[Job]:
        """Fire every armed job regardless of whether it is due."""
        with self._lock:
            return [job for job in self._jobs if job.is_armed and self._fire(job)]

    def run_all_with_delay(self, delay: float) -> list[Job]:
        """Fire every armed job, sleeping ``delay`` seconds between firings.

        Spreads the load generated by the jobs over time. The lock is not
        held while sleeping.
        """
        fired = []
        for index, job in enumerate(self.jobs):
            if index and delay > 0:
                time.sleep(delay)
            with self._lock:
                if job in self._jobs and job.is_armed and self._fire(job):
                    fired.append(job)
        return fired

    def _fire(self, job: Job) -> bool:
        try:
            job.run()
        except JobExecutionError as e:
            self._stats.jobs_failed += 1
            self._stats.last_error = e.message
            logger.warning("job_fire_failed", **e.to_dict())
            return False
        self._stats.jobs_fired += 1
        return True

    def next_run(self) -> tuple[Job | None, datetime]:
        """The job that runs next and when.

        Returns ``(None, now)`` when there is no armed job.
        """
        with self._lock:
            self._sort()
            if not self._jobs or not self._jobs[0].is_armed:
                return None, self.now()
            job = self._jobs[0]
            return job, job.next_run

    # === Removal ===

    def remove(self, identity: JobIdentity) -> bool:
        """Remove the first job matching ``identity``.

        Args:
            identity: Payload name, the scheduled callable, or the Job itself

        Returns:
            True if a job was removed, False if nothing matched.
        """
        with self._lock:
            for index, job in enumerate(self._jobs):
                if isinstance(identity, Job):
                    matched = job is identity
                else:
                    matched = job.payload is not None and job.payload.matches(identity)
                if matched:
                    del self._jobs[index]
                    logger.info("job_removed", job=job.name)
                    return True

        logger.debug("job_not_found", identity=str(identity))
        return False

    def clear(self) -> None:
        """Delete all scheduled jobs."""
        with self._lock:
            count = len(self._jobs)
            self._jobs = []
        logger.info("jobs_cleared", count=count)

    # === Lifecycle ===

    def start(self) -> SchedulerBackend:
        """Run ``run_pending()`` on every tick in the background.

        Returns:
            The backend; its ``stop()`` ends the loop.
        """
        if self.backend.is_running:
            logger.warning("scheduler_already_running")
            return self.backend

        interval = self.settings.tick_interval_seconds
        logger.info("scheduler_starting", backend=self.backend.name, interval_seconds=interval)
        self.backend.start(self._tick, interval)
        return self.backend

    def _tick(self) -> None:
        self._stats.tick_count += 1
        self._stats.last_tick = utc_now()
        self.run_pending()

    def stop(self) -> None:
        """Stop the background loop. Dispatched payloads keep running."""
        self.backend.stop()

    @property
    def is_running(self) -> bool:
        return self.backend.is_running

    def shutdown(self, wait: bool = True) -> None:
        """Stop the loop and the dispatcher pool."""
        self.stop()
        self.dispatcher.shutdown(wait=wait)

    def __enter__(self) -> Scheduler:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.shutdown(wait=True)

    # === Health & Stats ===

    def health(self) -> SchedulerHealth:
        """Get scheduler health status."""
        with self._lock:
            total = len(self._jobs)
            armed = sum(1 for job in self._jobs if job.is_armed)
        return SchedulerHealth(
            healthy=self.backend.is_running,
            backend=self.backend.health(),
            jobs=total,
            armed_jobs=armed,
            pending_payloads=self.dispatcher.pending,
            stats=self._stats,
        )

    def get_stats(self) -> SchedulerStats:
        """Get scheduler statistics."""
        return self._stats

    def reset_stats(self) -> None:
        """Reset scheduler statistics."""
        self._stats = SchedulerStats()


__all__ = ["Scheduler", "SchedulerHealth", "SchedulerStats"]
