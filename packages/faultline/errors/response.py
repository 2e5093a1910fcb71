"""Flat wire record and response envelope for structured errors.

The wrapped ``source`` is presented only as its rendered message, never as a
nested object, so arbitrary exception chains cannot produce unbounded output.
"""

from __future__ import annotations

from datetime import UTC
from typing import Any

from pydantic import BaseModel, ConfigDict

from .types import Error


class FieldErrorRecord(BaseModel):
    """Wire shape of one field-level validation failure."""

    model_config = ConfigDict(frozen=True)

    field: str
    message: str
    value: Any = None


class StackFrameRecord(BaseModel):
    """Wire shape of one stack frame."""

    model_config = ConfigDict(frozen=True)

    function: str
    file: str
    line: int


class LocationRecord(BaseModel):
    """Wire shape of an error creation location."""

    model_config = ConfigDict(frozen=True)

    file: str
    line: int
    function: str


class ErrorRecord(BaseModel):
    """Flat record of every presentable ``Error`` field."""

    model_config = ConfigDict(frozen=True)

    category: str
    severity: str
    code: int | None = None
    text_code: str | None = None
    message: str
    source: str | None = None
    validation_errors: list[FieldErrorRecord] | None = None
    metadata: dict[str, Any] | None = None
    correlation_id: str | None = None
    timestamp: str
    stack_trace: list[StackFrameRecord] | None = None
    location: LocationRecord | None = None


class ErrorResponse(BaseModel):
    """Standard ``{"error": ...}`` envelope for API error responses."""

    model_config = ConfigDict(frozen=True)

    error: ErrorRecord

    def to_json(self) -> str:
        """Serialize the envelope, omitting absent fields."""
        return self.model_dump_json(exclude_none=True)


def to_record(error: Error, *, include_stack: bool = True) -> ErrorRecord:
    """Build the flat wire record for ``error``."""
    stack: list[StackFrameRecord] | None = None
    if include_stack and error.stack_trace:
        stack = [
            StackFrameRecord(function=frame.function, file=frame.file, line=frame.line)
            for frame in error.stack_trace
        ]

    location: LocationRecord | None = None
    if error.location is not None:
        location = LocationRecord(
            file=error.location.file,
            line=error.location.line,
            function=error.location.function,
        )

    return ErrorRecord(
        category=str(error.category),
        severity=str(error.severity),
        code=error.code,
        text_code=error.text_code or None,
        message=error.message,
        source=str(error.source) if error.source is not None else None,
        validation_errors=[
            FieldErrorRecord(field=entry.field, message=entry.message, value=entry.value)
            for entry in error.validation_errors
        ]
        or None,
        metadata=dict(error.metadata) or None,
        correlation_id=error.correlation_id,
        timestamp=format_timestamp(error),
        stack_trace=stack,
        location=location,
    )


def format_timestamp(error: Error) -> str:
    """Return the error timestamp as an RFC 3339 UTC string."""
    stamp = error.timestamp
    if stamp.tzinfo is not None:
        stamp = stamp.astimezone(UTC)
    return stamp.strftime("%Y-%m-%dT%H:%M:%SZ")
