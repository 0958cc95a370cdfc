"""Job payload: the callable a job fires plus its bound arguments.

The payload carries a ``name`` used when ``Scheduler.remove()`` is given a
string. When the caller does not supply one, it is derived from the
callable (``module.qualname``), so scheduling the same function twice
yields two jobs with the same name. Removal by callable compares the
callable itself, never the derived name.
"""

from __future__ import annotations

import asyncio
import functools
import inspect
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from clockspine.core.errors import JobArityError


def _unwrap(func: Callable[..., Any]) -> Callable[..., Any]:
    while isinstance(func, functools.partial):
        func = func.func
    return func


def derive_name(func: Callable[..., Any]) -> str:
    """Identity of a callable: ``module.qualname``.

    ``functools.partial`` objects resolve to the wrapped function; callable
    instances resolve to their class.
    """
    func = _unwrap(func)
    qualname = getattr(func, "__qualname__", None)
    if qualname is None:
        qualname = type(func).__qualname__
        module = type(func).__module__
    else:
        module = getattr(func, "__module__", None) or ""
    return f"{module}.{qualname}" if module else qualname


@dataclass(frozen=True)
class JobPayload:
    """Callable + bound arguments + identity."""

    func: Callable[..., Any]
    args: tuple[Any, ...] = ()
    kwargs: dict[str, Any] = field(default_factory=dict)
    name: str = ""

    @classmethod
    def create(
        cls,
        func: Callable[..., Any],
        *args: Any,
        name: str | None = None,
        **kwargs: Any,
    ) -> JobPayload:
        return cls(func=func, args=tuple(args), kwargs=dict(kwargs), name=name or derive_name(func))

    def matches(self, identity: str | Callable[..., Any]) -> bool:
        """True if ``identity`` identifies this payload.

        A string is compared with ``name``. A callable must be the scheduled
        callable itself (``==``, so a bound method matches only for the same
        object); ``functools.partial`` wrappers are looked through on both sides.
        """
        if isinstance(identity, str):
            return self.name == identity
        return _unwrap(self.func) == _unwrap(identity)

    def check_arguments(self) -> None:
        """Verify the bound arguments fit the callable's signature.

        Raises:
            JobArityError: If the callable cannot accept the bound arguments.
        """
        try:
            signature = inspect.signature(self.func)
        except (TypeError, ValueError):
            # Some builtins expose no signature; let the call itself decide.
            return

        try:
            signature.bind(*self.args, **self.kwargs)
        except TypeError as exc:
            raise JobArityError(
                f"Arguments do not match {self.name}{signature}: {exc}",
                cause=exc,
            ).with_context(
                job=self.name,
                args=len(self.args),
                kwargs=sorted(self.kwargs),
            ) from exc

    def invoke(self) -> Any:
        """Call the payload, running coroutine results to completion."""
        result = self.func(*self.args, **self.kwargs)
        if inspect.iscoroutine(result):
            return asyncio.run(result)
        return result


__all__ = ["JobPayload", "derive_name"]
