"""On-demand stack trace capture for diagnostic rendering."""

from __future__ import annotations

import sys
import traceback
from dataclasses import dataclass

MAX_FRAMES = 32


@dataclass(frozen=True)
class StackFrame:
    """One frame of a captured stack trace."""

    function: str
    file: str
    line: int


class StackTrace(list[StackFrame]):
    """Ordered frames, innermost call first."""

    def __str__(self) -> str:
        return "\n".join(
            f"{frame.function}\n\t{frame.file}:{frame.line}" for frame in self
        )


def capture_stack_trace(skip: int = 0) -> StackTrace:
    """Capture the current stack, starting ``skip`` frames above the caller."""
    try:
        start = sys._getframe(skip + 1)
    except ValueError:
        return StackTrace()
    summary = traceback.extract_stack(start, limit=MAX_FRAMES)
    return StackTrace(
        StackFrame(function=entry.name, file=entry.filename, line=entry.lineno or 0)
        for entry in reversed(summary)
    )
