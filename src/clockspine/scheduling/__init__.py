"""Scheduling package for clockspine.

Manifesto:
    Periodic in-process work needs more than ``time.sleep()`` in a loop:
    human-readable recurrence rules, weekday and clock-time anchoring that
    never double-fires, a deterministic firing order, and a dispatch loop
    that a slow job can't stall. This package provides all of it in memory,
    for a single process.

┌──────────────────────────────────────────────────────────────────────────────┐
│  Quick Start:                                                                 │
│                                                                               │
│     from clockspine.scheduling import Scheduler                               │
│                                                                               │
│     scheduler = Scheduler()                                                   │
│     scheduler.every(30).seconds.do(heartbeat)                                 │
│     scheduler.every(1).day.at("02:00").do(backup, "/var/data")                │
│     scheduler.every(1).friday.at("17:30").named("weekly").do(report)          │
│                                                                               │
│     handle = scheduler.start()    # ticks once per second                     │
│     ...                                                                       │
│     handle.stop()                                                             │
│                                                                               │
│  Modules:                                                                     │
│     units.py           TimeUnit, Weekday, parse_clock_time                    │
│     payload.py         JobPayload (callable + args + identity)                │
│     job.py             Job (rule, anchors, next-run computation)              │
│     dispatcher.py      JobDispatcher (fire-and-forget thread pool)            │
│     protocol.py        SchedulerBackend protocol                              │
│     thread_backend.py  ThreadSchedulerBackend (tick loop)                     │
│     scheduler.py       Scheduler (ordering, due prefix, dispatch)             │
└──────────────────────────────────────────────────────────────────────────────┘

Guardrails:
    ❌ Expecting run_pending() to replay missed periods
    ✅ One fire per due job per poll
    ❌ Reconfiguring an armed job
    ✅ remove() it and schedule a new one
"""

from __future__ import annotations

from .dispatcher import DispatchResult, JobDispatcher
from .job import Job
from .payload import JobPayload, derive_name
from .protocol import BackendHealth, SchedulerBackend
from .scheduler import Scheduler, SchedulerHealth, SchedulerStats
from .thread_backend import ThreadSchedulerBackend
from .units import TimeUnit, Weekday, parse_clock_time

__all__ = [
    # Rules
    "TimeUnit",
    "Weekday",
    "parse_clock_time",
    # Jobs
    "Job",
    "JobPayload",
    "derive_name",
    # Dispatch
    "JobDispatcher",
    "DispatchResult",
    # Backends
    "SchedulerBackend",
    "BackendHealth",
    "ThreadSchedulerBackend",
    # Scheduler
    "Scheduler",
    "SchedulerStats",
    "SchedulerHealth",
]
