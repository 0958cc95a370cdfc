"""Periodic job: recurrence rule, anchors and next-run bookkeeping.

A job is configured with a builder chain and armed by ``do()``::

    scheduler.every(10).minutes.do(refresh_cache)
    scheduler.every(1).day.at("10:30").do(send_report, "daily")
    scheduler.every(1).monday.at("08:00").named("weekly-digest").do(digest)

Lifecycle:
    ::

        every(n) ──► unit / weekday / at() / named() ──► do(func, *args)
        (unarmed)                                        (armed: next_run set)
                                                              │
                          ┌───────────────────────────────────┘
                          ▼
        should_run(now) ──► run(): last_run = now
                                   dispatcher.submit(payload)   (not awaited)
                                   schedule_next_run()

``next_run`` is the only input to due-ness and ordering. ``period`` is
computed once from interval and unit and then reused for every reschedule.
Once armed, the rule is frozen: any further configuration call raises
``JobAlreadyArmedError``.
"""

from __future__ import annotations

from collections.abc import Callable
from concurrent.futures import Future
from datetime import datetime, timedelta
from typing import TYPE_CHECKING, Any

from clockspine.core.errors import (
    IntervalError,
    JobAlreadyArmedError,
    JobExecutionError,
    NotCallableError,
)
from clockspine.core.logging import get_logger
from clockspine.core.timestamps import Clock

from .payload import JobPayload
from .units import TimeUnit, Weekday, days_since, parse_clock_time

if TYPE_CHECKING:
    from .dispatcher import JobDispatcher

logger = get_logger(__name__)


class Job:
    """One recurrence rule plus its payload and run-time bookkeeping.

    Jobs are normally created by ``Scheduler.every()``, which supplies the
    scheduler's clock and dispatcher.

    Attributes:
        interval: Multiplier of ``unit`` between runs
        unit: Time granularity, set once
        at_time: Optional ``(hour, minute)`` anchor
        start_day: Anchor weekday for weekly jobs (default Sunday)
        last_run: Instant of the previous fire, ``None`` before the first computation
        next_run: Instant of the next fire, ``None`` until armed
        period: Cached duration between runs
        payload: Callable, bound arguments and identity
    """

    def __init__(self, interval: int, *, clock: Clock, dispatcher: JobDispatcher) -> None:
        if isinstance(interval, bool) or not isinstance(interval, int) or interval < 0:
            raise IntervalError(f"Interval must be a non-negative integer, got {interval!r}")

        self.interval = interval
        self.unit: TimeUnit | None = None
        self.at_time: tuple[int, int] | None = None
        self.start_day: Weekday = Weekday.SUNDAY

        self.last_run: datetime | None = None
        self.next_run: datetime | None = None
        self.period: timedelta | None = None

        self.payload: JobPayload | None = None
        self._name: str | None = None

        self._clock = clock
        self._dispatcher = dispatcher

    # === State ===

    @property
    def is_armed(self) -> bool:
        """True once a payload is attached and ``next_run`` computed."""
        return self.payload is not None

    @property
    def name(self) -> str | None:
        """Payload identity (explicit name or derived from the callable)."""
        if self.payload is not None:
            return self.payload.name
        return self._name

    @property
    def next_scheduled_time(self) -> datetime | None:
        """When this job is to run next."""
        return self.next_run

    # === Units ===

    @property
    def second(self) -> Job:
        self._require_single("second")
        return self.seconds

    @property
    def seconds(self) -> Job:
        self._set_unit(TimeUnit.SECONDS)
        return self

    @property
    def minute(self) -> Job:
        self._require_single("minute")
        return self.minutes

    @property
    def minutes(self) -> Job:
        self._set_unit(TimeUnit.MINUTES)
        return self

    @property
    def hour(self) -> Job:
        self._require_single("hour")
        return self.hours

    @property
    def hours(self) -> Job:
        self._set_unit(TimeUnit.HOURS)
        return self

    @property
    def day(self) -> Job:
        self._require_single("day")
        return self.days

    @property
    def days(self) -> Job:
        self._set_unit(TimeUnit.DAYS)
        return self

    @property
    def weeks(self) -> Job:
        self._set_unit(TimeUnit.WEEKS)
        return self

    # === Weekdays ===

    @property
    def monday(self) -> Job:
        return self._on(Weekday.MONDAY)

    @property
    def tuesday(self) -> Job:
        return self._on(Weekday.TUESDAY)

    @property
    def wednesday(self) -> Job:
        return self._on(Weekday.WEDNESDAY)

    @property
    def thursday(self) -> Job:
        return self._on(Weekday.THURSDAY)

    @property
    def friday(self) -> Job:
        return self._on(Weekday.FRIDAY)

    @property
    def saturday(self) -> Job:
        return self._on(Weekday.SATURDAY)

    @property
    def sunday(self) -> Job:
        return self._on(Weekday.SUNDAY)

    def _on(self, weekday: Weekday) -> Job:
        self._require_single(weekday.name.lower())
        self._set_unit(TimeUnit.WEEKS)
        self.start_day = weekday
        return self

    # === Anchors ===

    def at(self, clock_time: str) -> Job:
        """Anchor a daily or weekly job to a wall-clock time.

        ``last_run`` is back-dated to the most recent occurrence of the
        anchor so the first ``next_run`` lands on the next valid one and
        the job does not fire immediately on arming.

        Args:
            clock_time: ``"HH:MM"``, 00:00 to 23:59

        Raises:
            TimeFormatError: Malformed or out-of-range time (job unchanged)
        """
        self._require_unarmed("at")
        hour, minute = parse_clock_time(clock_time)

        now = self._clock()
        anchor = now.replace(hour=hour, minute=minute, second=0, microsecond=0)

        if self.unit is TimeUnit.DAYS:
            if now > anchor:
                self.last_run = anchor
            else:
                self.last_run = anchor - timedelta(days=1)
        elif self.unit is TimeUnit.WEEKS:
            today = Weekday.of(now)
            if self.start_day != today or now > anchor:
                self.last_run = anchor - timedelta(days=days_since(today, self.start_day))
            else:
                # Anchor weekday is today and the time has not come yet.
                self.last_run = anchor - timedelta(days=7)
        else:
            logger.debug("at_time_not_anchored", unit=self.unit, at=clock_time)

        self.at_time = (hour, minute)
        return self

    def named(self, name: str) -> Job:
        """Give the payload an explicit identity for ``Scheduler.remove()``."""
        self._require_unarmed("named")
        self._name = name
        return self

    # === Arming ===

    def do(self, func: Callable[..., Any], *args: Any, **kwargs: Any) -> Job:
        """Attach the payload and compute the first ``next_run``.

        Raises:
            NotCallableError: ``func`` is not callable
            IntervalError: No unit was chosen
            JobAlreadyArmedError: The job already has a payload
        """
        self._require_unarmed("do")
        if not callable(func):
            raise NotCallableError(func)
        if self.unit is None:
            raise IntervalError(
                f"every({self.interval}) needs a unit before do()", interval=self.interval
            )

        self.payload = JobPayload.create(func, *args, name=self._name, **kwargs)
        self.schedule_next_run()
        logger.debug(
            "job_armed",
            job=self.payload.name,
            interval=self.interval,
            unit=self.unit.value,
            next_run=self.next_run.isoformat(),
        )
        return self

    # === Scheduling ===

    def should_run(self, now: datetime | None = None) -> bool:
        """True if the job is armed and ``now`` is strictly after ``next_run``."""
        if self.next_run is None:
            return False
        if now is None:
            now = self._clock()
        return now > self.next_run

    def run(self) -> Future:
        """Fire the payload without waiting for it and reschedule.

        Returns:
            The dispatch future (resolves to a ``DispatchResult``)

        Raises:
            JobArityError: Bound arguments don't fit the callable; the job's
                run times are left untouched.
            JobExecutionError: The job is not armed, or the dispatcher refused
                the payload (e.g. after shutdown); run times are left untouched.
        """
        if self.payload is None:
            raise JobExecutionError("Cannot run a job without a payload")

        self.payload.check_arguments()

        fired_at = self._clock()
        try:
            future = self._dispatcher.submit(self.payload)
        except Exception as e:
            raise JobExecutionError(
                f"Dispatcher rejected {self.payload.name}: {e}", cause=e
            ).with_context(job=self.payload.name) from e

        self.last_run = fired_at
        self.schedule_next_run()
        logger.info(
            "job_fired",
            job=self.payload.name,
            last_run=self.last_run.isoformat(),
            next_run=self.next_run.isoformat(),
        )
        return future

    def schedule_next_run(self) -> None:
        """Compute the instant when this job should run next."""
        if self.last_run is None:
            now = self._clock()
            if self.unit is TimeUnit.WEEKS:
                back = days_since(Weekday.of(now), self.start_day)
                self.last_run = (now - timedelta(days=back)).replace(
                    hour=0, minute=0, second=0, microsecond=0
                )
            else:
                self.last_run = now

        if self.period is None:
            self.period = self.unit.period(self.interval)

        self.next_run = self.last_run + self.period

    # === Guards ===

    def _require_unarmed(self, operation: str) -> None:
        if self.payload is not None:
            raise JobAlreadyArmedError(
                f"Cannot call {operation}() on an armed job; create a new one instead"
            ).with_context(job=self.payload.name)

    def _require_single(self, unit_name: str) -> None:
        if self.interval != 1:
            raise IntervalError(
                f"'{unit_name}' is only valid for every(1), use the plural form "
                f"for every({self.interval})",
                interval=self.interval,
            )

    def _set_unit(self, unit: TimeUnit) -> None:
        self._require_unarmed(unit.value)
        if self.unit is not None and self.unit is not unit:
            raise IntervalError(
                f"Unit already set to {self.unit.value}, cannot change it to {unit.value}",
                interval=self.interval,
            ).with_context(unit=self.unit.value)
        self.unit = unit

    def __repr__(self) -> str:
        unit = self.unit.value if self.unit else "?"
        at = f" at {self.at_time[0]:02d}:{self.at_time[1]:02d}" if self.at_time else ""
        name = self.name or "<unarmed>"
        return f"Job(every {self.interval} {unit}{at} do {name}, next_run={self.next_run})"


__all__ = ["Job"]
