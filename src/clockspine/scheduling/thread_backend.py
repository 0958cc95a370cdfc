"""Daemon-thread tick loop, the default scheduler backend.

┌──────────────────────────────────────────────────────────────────────────────┐
│  TICK LOOP                                                                    │
│                                                                               │
│   Scheduler.start() ──► backend.start(scheduler._tick, interval)             │
│                                │                                              │
│                                ▼                                              │
│            clockspine-scheduler (daemon thread)                               │
│              wait(interval) on the stop event                                 │
│              ├── stop event set ──► leave loop                                │
│              └── timed out ──► record tick, call tick callback                │
│                                (a raising callback is logged, loop goes on)   │
│                                                                               │
│   handle.stop() ──► set stop event, join the thread (bounded)                │
│                                                                               │
│  Ticks only select and submit due jobs. Payloads run on the dispatcher's     │
│  pool, so a stuck job never delays the next tick.                            │
└──────────────────────────────────────────────────────────────────────────────┘
"""

from __future__ import annotations

import threading
from datetime import datetime
from typing import Any

from clockspine.core.logging import get_logger
from clockspine.core.timestamps import utc_now

from .protocol import BackendHealth, TickCallback

logger = get_logger(__name__)


class ThreadSchedulerBackend:
    """Background tick loop on a daemon thread.

    The instance doubles as the stop handle returned by ``Scheduler.start()``.
    It can be restarted after ``stop()``.

    Example:
        >>> loop = ThreadSchedulerBackend()
        >>> loop.start(scheduler.run_pending, interval_seconds=0.5)
        >>> loop.stop()
    """

    name = "thread"

    def __init__(self, join_timeout: float = 5.0) -> None:
        self.join_timeout = join_timeout
        self._halt = threading.Event()
        self._worker: threading.Thread | None = None
        self._callback: TickCallback | None = None
        self._interval = 1.0
        self._ticks = 0
        self._last_tick: datetime | None = None
        self._state_lock = threading.Lock()

    def start(self, tick_callback: TickCallback, interval_seconds: float = 1.0) -> None:
        """Spawn the loop thread; ignored (with a warning) while running."""
        if self.is_running:
            logger.warning("backend_already_started", backend=self.name)
            return

        self._callback = tick_callback
        self._interval = interval_seconds
        self._halt.clear()
        self._worker = threading.Thread(
            target=self._run, name="clockspine-scheduler", daemon=True
        )
        self._worker.start()

    def _run(self) -> None:
        logger.info("backend_started", backend=self.name, interval_seconds=self._interval)
        while not self._halt.wait(self._interval):
            self._record_tick()
            try:
                self._callback()
            except Exception as e:
                logger.exception("tick_failed", backend=self.name, error=str(e))
        logger.info("backend_stopped", backend=self.name)

    def _record_tick(self) -> None:
        with self._state_lock:
            self._ticks += 1
            self._last_tick = utc_now()

    def stop(self) -> None:
        """Signal the loop to exit and wait for the in-flight tick.

        Safe to call from inside a tick (the loop thread is not joined then)
        and on a backend that was never started.
        """
        worker = self._worker
        if worker is None:
            return

        self._halt.set()
        if worker is not threading.current_thread():
            worker.join(timeout=self.join_timeout)
            if worker.is_alive():
                logger.warning(
                    "backend_thread_still_alive",
                    backend=self.name,
                    join_timeout=self.join_timeout,
                )
        self._worker = None

    def health(self) -> dict[str, Any]:
        return self.get_health().to_dict()

    def get_health(self) -> BackendHealth:
        with self._state_lock:
            ticks, last_tick = self._ticks, self._last_tick
        return BackendHealth(
            healthy=self.is_running,
            backend=self.name,
            tick_count=ticks,
            last_tick=last_tick,
            extra={"interval_seconds": self._interval},
        )

    @property
    def is_running(self) -> bool:
        worker = self._worker
        return worker is not None and worker.is_alive() and not self._halt.is_set()

    @property
    def tick_count(self) -> int:
        return self._ticks

    @property
    def last_tick(self) -> datetime | None:
        return self._last_tick


__all__ = ["ThreadSchedulerBackend"]
