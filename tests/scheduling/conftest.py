"""Pytest fixtures for scheduling tests."""

from concurrent.futures import Future
from datetime import UTC, datetime, timedelta

import pytest

from clockspine.core.settings import SchedulerSettings
from clockspine.scheduling import DispatchResult, Job, JobPayload, Scheduler

# Wednesday
WEDNESDAY_0900 = datetime(2026, 10, 14, 9, 0, tzinfo=UTC)


class FakeClock:
    """Controllable clock returning aware datetimes."""

    def __init__(self, start: datetime = WEDNESDAY_0900) -> None:
        self.current = start

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> datetime:
        self.current += timedelta(**kwargs)
        return self.current

    def set(self, value: datetime) -> None:
        self.current = value


class RecordingDispatcher:
    """Dispatcher that records payloads instead of running them."""

    def __init__(self) -> None:
        self.submitted: list[JobPayload] = []
        self.pending = 0

    def submit(self, payload: JobPayload) -> Future:
        self.submitted.append(payload)
        future: Future = Future()
        future.set_result(
            DispatchResult(job_name=payload.name, started_at=datetime.now(UTC), duration_ms=0.0)
        )
        return future

    @property
    def names(self) -> list[str]:
        return [payload.name for payload in self.submitted]

    def shutdown(self, wait: bool = True) -> None:
        pass


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def dispatcher() -> RecordingDispatcher:
    return RecordingDispatcher()


@pytest.fixture
def make_job(clock, dispatcher):
    """Factory for jobs bound to the fake clock and recording dispatcher."""

    def _make(interval: int = 1) -> Job:
        return Job(interval, clock=clock, dispatcher=dispatcher)

    return _make


@pytest.fixture
def scheduler(clock, dispatcher) -> Scheduler:
    """Scheduler on the fake clock; nothing actually runs payloads."""
    return Scheduler(
        SchedulerSettings(tick_interval_seconds=0.05),
        tz=UTC,
        clock=clock,
        dispatcher=dispatcher,
    )
