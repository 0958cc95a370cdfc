"""Tick-loop backend contract.

A backend decides WHEN the scheduler polls; the scheduler decides WHAT a
poll does (sort, take the due prefix, fire, reschedule)::

    backend.start(scheduler._tick, interval_seconds)
        └── every interval: scheduler._tick() ──► run_pending()
    backend.stop()
        └── loop exits after the tick in flight

``ThreadSchedulerBackend`` is the only implementation shipped; anything
matching ``SchedulerBackend`` structurally can be passed to
``Scheduler(backend=...)``.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Protocol, runtime_checkable

from clockspine.core.timestamps import to_iso8601

TickCallback = Callable[[], Any]


@runtime_checkable
class SchedulerBackend(Protocol):
    """Something that calls a tick callback periodically until stopped."""

    name: str

    def start(self, tick_callback: TickCallback, interval_seconds: float = 1.0) -> None:
        """Begin calling ``tick_callback`` every ``interval_seconds``."""
        ...

    def stop(self) -> None:
        """End the loop; the tick in flight may finish first."""
        ...

    def health(self) -> dict[str, Any]:
        """At least ``healthy``, ``backend``, ``tick_count`` and ``last_tick`` (ISO or None)."""
        ...

    @property
    def is_running(self) -> bool: ...


@dataclass
class BackendHealth:
    """Point-in-time view of a backend's loop."""

    healthy: bool
    backend: str
    tick_count: int = 0
    last_tick: datetime | None = None
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        data = {
            "healthy": self.healthy,
            "backend": self.backend,
            "tick_count": self.tick_count,
            "last_tick": to_iso8601(self.last_tick),
        }
        data.update(self.extra)
        return data



__all__ = ["SchedulerBackend", "BackendHealth", "TickCallback"]
