"""Call-site location capture for new errors.

Capture costs one frame lookup per constructed error, so it can be switched
off. The active setting lives in a ``ContextVar``: threads, tasks, and tests
each see their own override, and fall back to the process-wide setting read
once from ``FAULTLINE_ERRORS__CAPTURE_LOCATION`` (or the YAML config file).
"""

from __future__ import annotations

import os
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Iterator

from packages.faultline.config import load_startup_settings


@dataclass(frozen=True)
class ErrorLocation:
    """File, line, and function where an error was created."""

    file: str
    line: int
    function: str

    def __str__(self) -> str:
        return f"{os.path.basename(self.file)}:{self.line}"


@dataclass(frozen=True)
class LocationCapture:
    """Capture strategy injected into error constructors."""

    enabled: bool = True

    def capture(self, skip: int = 0) -> ErrorLocation | None:
        """Return the location of the caller, ``skip`` frames further up.

        ``skip=0`` is the function that called ``capture``.
        """
        if not self.enabled:
            return None
        try:
            frame = sys._getframe(skip + 1)
        except ValueError:
            return None
        code = frame.f_code
        return ErrorLocation(
            file=code.co_filename,
            line=frame.f_lineno,
            function=code.co_qualname,
        )


_LOCATION_CAPTURE: ContextVar[LocationCapture | None] = ContextVar(
    "faultline_location_capture", default=None
)


def current_location_capture() -> LocationCapture:
    """Return the capture strategy in effect for the current context."""
    override = _LOCATION_CAPTURE.get()
    if override is not None:
        return override
    return LocationCapture(enabled=load_startup_settings().errors.capture_location)


def set_location_capture(enabled: bool) -> None:
    """Enable or disable location capture for the current context."""
    _LOCATION_CAPTURE.set(LocationCapture(enabled=enabled))


def is_location_capture_enabled() -> bool:
    """Return whether new errors capture their call-site location."""
    return current_location_capture().enabled


@contextmanager
def location_capture(enabled: bool) -> Iterator[LocationCapture]:
    """Temporarily enable or disable location capture for a block."""
    strategy = LocationCapture(enabled=enabled)
    token = _LOCATION_CAPTURE.set(strategy)
    try:
        yield strategy
    finally:
        _LOCATION_CAPTURE.reset(token)


def here() -> ErrorLocation | None:
    """Return the location of the line calling ``here()``."""
    return current_location_capture().capture(skip=1)
