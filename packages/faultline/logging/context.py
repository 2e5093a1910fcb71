"""Context propagation for structured logging.

Fields bound here are attached to every record passing through
``ContextFilter``. The context lives in a ``contextvars.ContextVar`` so values
bound in one thread or task never leak into another.

Values keep their Python type (error metadata and validation lists stay
structured); formatters decide how to render them.
"""

from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from typing import Any, Iterable, Iterator, Mapping

_LOG_CONTEXT: ContextVar[dict[str, Any]] = ContextVar(
    "faultline_log_context", default={}
)

ContextValues = Mapping[str, object] | Iterable[tuple[str, object]]


def get_context() -> dict[str, Any]:
    """Return a shallow copy of the current logging context."""
    return dict(_LOG_CONTEXT.get())


def bind_context(**values: object) -> None:
    """Bind values into the current logging context; ``None`` is ignored."""
    _bind(values.items())


def clear_context(*keys: str) -> None:
    """Clear selected keys or the entire logging context."""
    if not keys:
        _LOG_CONTEXT.set({})
        return
    current = _LOG_CONTEXT.get().copy()
    for key in keys:
        current.pop(key, None)
    _LOG_CONTEXT.set(current)


@contextmanager
def log_context(values: ContextValues) -> Iterator[None]:
    """Temporarily bind a mapping or ordered pairs for the duration of a block."""
    token = _LOG_CONTEXT.set(_LOG_CONTEXT.get().copy())
    try:
        _bind(values.items() if isinstance(values, Mapping) else values)
        yield
    finally:
        _LOG_CONTEXT.reset(token)


def _bind(pairs: Iterable[tuple[str, object]]) -> None:
    current = _LOG_CONTEXT.get().copy()
    changed = False
    for key, value in pairs:
        if value is None:
            continue
        current[str(key)] = value
        changed = True
    if changed:
        _LOG_CONTEXT.set(current)
