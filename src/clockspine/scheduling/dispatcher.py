"""Fire-and-forget job dispatcher: ThreadPool-based payload execution.

Manifesto:
    The dispatch loop must never wait on the work it triggers. A slow or
    stuck job occupies one worker thread; the tick loop keeps polling and
    other jobs keep firing. ``JobDispatcher.submit()`` hands the payload to
    a ``ThreadPoolExecutor`` and returns the ``Future`` immediately. The
    scheduler ignores that future; failures are captured into a
    ``DispatchResult`` and logged instead of propagating.

ARCHITECTURE
────────────
::

    JobDispatcher(max_workers=8, history_size=100)
      ├── .submit(payload)  ─ queue on ThreadPool, return Future
      ├── .history          ─ recent DispatchResult records (bounded)
      ├── .pending          ─ submitted but not finished
      └── .shutdown()       ─ drain pool

Tags:
    clockspine, dispatch, thread-pool, fire-and-forget
"""

from __future__ import annotations

import threading
import time
from collections import deque
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from clockspine.core.errors import categorize_error
from clockspine.core.logging import LogContext, get_logger
from clockspine.core.timestamps import utc_now

from .payload import JobPayload

logger = get_logger(__name__)


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of one payload invocation."""

    job_name: str
    started_at: datetime
    duration_ms: float
    error: str | None = None

    @property
    def success(self) -> bool:
        return self.error is None

    def to_dict(self) -> dict[str, Any]:
        return {
            "job_name": self.job_name,
            "started_at": self.started_at.isoformat(),
            "duration_ms": self.duration_ms,
            "error": self.error,
        }


class JobDispatcher:
    """Run job payloads on a thread pool without waiting for them.

    Example:
        >>> dispatcher = JobDispatcher(max_workers=2)
        >>> future = dispatcher.submit(JobPayload.create(print, "hello"))
        >>> dispatcher.shutdown()
    """

    def __init__(self, max_workers: int = 8, history_size: int = 100) -> None:
        """Initialize with worker pool.

        Args:
            max_workers: ThreadPool size (default: 8)
            history_size: Number of DispatchResult records retained
        """
        self.pool = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="clockspine-job")
        self._history: deque[DispatchResult] = deque(maxlen=history_size)
        self._pending = 0
        self._lock = threading.Lock()

    def submit(self, payload: JobPayload) -> Future:
        """Queue ``payload`` and return immediately.

        The returned future resolves to the payload's ``DispatchResult``;
        it never raises the payload's exception.
        """
        with self._lock:
            self._pending += 1
        return self.pool.submit(self._run, payload)

    def _run(self, payload: JobPayload) -> DispatchResult:
        started_at = utc_now()
        t0 = time.monotonic()
        error: str | None = None
        with LogContext(job=payload.name):
            try:
                payload.invoke()
            except Exception as e:
                error = f"{type(e).__name__}: {e}"
                logger.exception(
                    "job_payload_failed", error=error, category=categorize_error(e).value
                )

        result = DispatchResult(
            job_name=payload.name,
            started_at=started_at,
            duration_ms=(time.monotonic() - t0) * 1000,
            error=error,
        )
        with self._lock:
            self._pending -= 1
            self._history.append(result)

        if error is None:
            logger.debug("job_payload_completed", job=payload.name, duration_ms=result.duration_ms)
        return result

    @property
    def history(self) -> list[DispatchResult]:
        """Most recent results, oldest first."""
        with self._lock:
            return list(self._history)

    @property
    def pending(self) -> int:
        """Payloads submitted but not yet finished."""
        with self._lock:
            return self._pending

    def shutdown(self, wait: bool = True) -> None:
        """Shutdown thread pool.

        Args:
            wait: If True, wait for running payloads to complete
        """
        self.pool.shutdown(wait=wait)

    def __enter__(self) -> JobDispatcher:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.shutdown(wait=True)


__all__ = ["DispatchResult", "JobDispatcher"]
