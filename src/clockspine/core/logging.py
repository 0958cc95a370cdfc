"""
Structured logging for clockspine.

Modules log through ``get_logger(__name__)`` with an event name and
keyword fields, never with formatted strings::

    logger.info("job_fired", job="nightly_backup", next_run="2026-10-19T02:00:00+02:00")

Nothing is configured on import. Applications call ``configure_logging()``
(or ``configure_logging_from_settings()``) once at startup; until then
structlog's defaults apply.

Processor chain:
    ::

        [TimeStamper(iso)]           optional
        merge_contextvars            job=... bound by LogContext
        add_log_level
        add_logger_name
        StackInfoRenderer, set_exc_info
        _add_service_metadata        service.name
        ── json ──────────────────── ── console ──────────
        _ecs_compatible              ConsoleRenderer(colors)
        format_exc_info
        JSONRenderer

Example:
    >>> configure_logging(level="DEBUG", json_format=False)
    >>> get_logger(__name__).debug("tick", jobs=3)

Tags:
    logging, structlog, observability, clockspine
"""

from __future__ import annotations

import logging
import sys
from typing import TYPE_CHECKING, Any

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

if TYPE_CHECKING:
    from .settings import SchedulerSettings

_service_name = "clockspine"


def _add_service_metadata(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    event_dict.setdefault("service.name", _service_name)
    return event_dict


def _ecs_compatible(
    logger: WrappedLogger, method_name: str, event_dict: EventDict
) -> EventDict:
    """Elastic Common Schema names for timestamp and level."""
    for source, target in (("timestamp", "@timestamp"), ("level", "log.level")):
        if source in event_dict:
            event_dict[target] = event_dict.pop(source)
    return event_dict


def _level_number(level: str) -> int:
    number = logging.getLevelName(level.upper())
    if not isinstance(number, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return number


def _build_processors(json_format: bool, add_timestamp: bool) -> list[Processor]:
    processors: list[Processor] = []
    if add_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))
    processors += [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        _add_service_metadata,
    ]
    if json_format:
        processors += [
            _ecs_compatible,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    return processors


def configure_logging(
    level: str = "INFO",
    json_format: bool | None = None,
    service: str = "clockspine",
    add_timestamp: bool = True,
) -> None:
    """Configure structlog and the stdlib root logger it writes through.

    Args:
        level: DEBUG, INFO, WARNING or ERROR
        json_format: JSON lines if True, console if False; None picks JSON
            when stdout is not a terminal
        service: Value of the ``service.name`` field
        add_timestamp: Prefix every entry with an ISO timestamp
    """
    global _service_name
    _service_name = service

    if json_format is None:
        json_format = not sys.stdout.isatty()
    threshold = _level_number(level)

    structlog.configure(
        processors=_build_processors(json_format, add_timestamp),
        wrapper_class=structlog.make_filtering_bound_logger(threshold),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=threshold)


def configure_logging_from_settings(settings: SchedulerSettings | None = None) -> None:
    """Configure logging from ``CLOCKSPINE_LOG_LEVEL`` / ``CLOCKSPINE_LOG_FORMAT``."""
    from .settings import get_settings

    settings = settings or get_settings()
    configure_logging(level=settings.log_level, json_format=settings.json_logs)


def get_logger(name: str | None = None) -> Any:
    return structlog.get_logger(name)


def bind_context(**kwargs: Any) -> None:
    """Attach fields to every entry logged from the current context."""
    structlog.contextvars.bind_contextvars(**kwargs)


def unbind_context(*keys: str) -> None:
    structlog.contextvars.unbind_contextvars(*keys)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


class LogContext:
    """Bind fields for the duration of a ``with`` block.

    The dispatcher wraps each payload call in one, so anything the payload
    logs carries the job's name::

        with LogContext(job="nightly_backup"):
            logger.info("dispatch_started")
    """

    def __init__(self, **fields: Any):
        self.fields = fields

    def __enter__(self) -> LogContext:
        bind_context(**self.fields)
        return self

    def __exit__(self, *exc_info: Any) -> None:
        unbind_context(*self.fields)


__all__ = [
    "configure_logging",
    "configure_logging_from_settings",
    "get_logger",
    "bind_context",
    "unbind_context",
    "clear_context",
    "LogContext",
]
