"""Timing spans for service calls.

Off unless ``--verbose`` switches it on; when off, a traced call costs one
ContextVar lookup. A ``@traced`` service method opens the root span and
``trace_span`` blocks inside it become children. The finished tree is
attached to ``ServiceResult.meta["telemetry"]``.
"""

from __future__ import annotations

import functools
import time
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any, ParamSpec, TypeVar

import structlog

from strokeorder.services.result import ServiceResult

_active: ContextVar[bool] = ContextVar("strokeorder_telemetry", default=False)
_span: ContextVar[Span | None] = ContextVar("strokeorder_span", default=None)


@dataclass
class Span:
    """One timed section; nested sections are ``children``."""

    name: str
    started: float = field(default_factory=time.perf_counter)
    finished: float | None = None
    annotations: dict[str, Any] = field(default_factory=dict)
    children: list[Span] = field(default_factory=list)

    @property
    def duration_ms(self) -> float:
        if self.finished is None:
            return 0.0
        return (self.finished - self.started) * 1000

    def finish(self) -> None:
        self.finished = time.perf_counter()

    def annotate(self, **values: Any) -> None:
        self.annotations.update(values)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"name": self.name, "duration_ms": round(self.duration_ms, 2)}
        if self.annotations:
            payload["annotations"] = dict(self.annotations)
        if self.children:
            payload["children"] = [child.to_dict() for child in self.children]
        return payload


@contextmanager
def _entered(span: Span) -> Iterator[Span]:
    token = _span.set(span)
    try:
        yield span
    finally:
        span.finish()
        _span.reset(token)


@contextmanager
def trace_span(name: str) -> Iterator[Span | None]:
    """Time a block as a child of the running service span.

    Yields None outside a traced call or while telemetry is off.
    """
    parent = get_current_span()
    if parent is None:
        yield None
        return
    child = Span(name)
    parent.children.append(child)
    with _entered(child):
        yield child


_P = ParamSpec("_P")
_R = TypeVar("_R")


def traced(func: Callable[_P, _R]) -> Callable[_P, _R]:  # noqa: UP047
    """Time a service method and attach its span tree to the result."""

    @functools.wraps(func)
    def wrapper(*args: _P.args, **kwargs: _P.kwargs) -> _R:
        if not _active.get():
            return func(*args, **kwargs)

        with _entered(Span(func.__qualname__)) as span:
            result = func(*args, **kwargs)
        if not isinstance(result, ServiceResult):
            return result
        structlog.get_logger("strokeorder.telemetry").debug(
            "service.call",
            op=result.op,
            ok=result.ok,
            duration_ms=round(span.duration_ms, 2),
        )
        return result.with_meta(telemetry=span.to_dict())  # type: ignore[return-value]

    return wrapper


def set_telemetry(enabled: bool) -> None:
    """Switch span collection on or off for the current context."""
    _active.set(enabled)


def get_current_span() -> Span | None:
    """The innermost open span, or None when telemetry is off."""
    return _span.get() if _active.get() else None
