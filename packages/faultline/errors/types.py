"""Canonical structured error type.

``Error`` is a real exception carrying a category, a severity, optional
numeric/text codes, field-level validation errors, free-form metadata, and the
wrapped cause. Instances are built once through ``new_error``/``wrap`` (or a
factory), adjusted through the fluent ``with_*`` setters, and treated as
immutable once handed off.

Wrap chains are expected to stay shallow and acyclic: ``wrap`` folds an
existing ``Error`` into a clone instead of nesting it, and the recursive
validation walks below do not guard against self-referential sources.
"""

from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Mapping, Protocol, runtime_checkable

from pydantic import ValidationError as PydanticValidationError

from packages.faultline.config import load_startup_settings

from .categories import Category
from .location import ErrorLocation, LocationCapture, current_location_capture
from .severity import Severity
from .stacktrace import StackTrace, capture_stack_trace
from .validation import ValidationErrors, field_errors_from_pydantic

if TYPE_CHECKING:
    from .response import ErrorRecord, ErrorResponse


@runtime_checkable
class SupportsError(Protocol):
    """Capability of any exception that can present itself as an ``Error``."""

    def to_error(self) -> Error:
        """Return the underlying structured error."""


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass(eq=False)
class Error(Exception):
    """Structured, classified error value."""

    message: str
    category: Category = Category.INTERNAL
    severity: Severity = Severity.ERROR
    code: int | None = None
    text_code: str | None = None
    source: BaseException | None = None
    validation_errors: ValidationErrors = field(default_factory=ValidationErrors)
    metadata: dict[str, Any] = field(default_factory=dict)
    correlation_id: str | None = None
    timestamp: datetime = field(default_factory=_utcnow)
    location: ErrorLocation | None = None
    stack_trace: StackTrace | None = None

    def __post_init__(self) -> None:
        self.category = Category(self.category) if self.category else Category.INTERNAL
        self.severity = Severity(self.severity)
        if not isinstance(self.validation_errors, ValidationErrors):
            self.validation_errors = ValidationErrors(self.validation_errors or ())
        if not isinstance(self.metadata, dict):
            self.metadata = dict(self.metadata or {})
        if self.timestamp is None:
            self.timestamp = _utcnow()
        self.__cause__ = self.source

    def __str__(self) -> str:
        return self.render()

    def __reduce__(self) -> tuple[Any, ...]:
        values = {entry.name: getattr(self, entry.name) for entry in fields(self)}
        return (_restore_error, (type(self), values))

    def to_error(self) -> Error:
        """Return ``self``; every ``Error`` supports the error capability."""
        return self

    # Rendering

    def render(self, *, verbose: bool | None = None) -> str:
        """Return the single-line diagnostic string.

        ``verbose`` appends the creation location; when omitted the process
        default from ``errors.verbose`` applies.
        """
        if verbose is None:
            verbose = load_startup_settings().errors.verbose

        if self.text_code:
            parts = [f"[{self.category}:{self.text_code}] {self.message}"]
        else:
            parts = [f"[{self.category}] {self.message}"]

        if self.validation_errors:
            parts.append(f"validation: {self.validation_errors}")
        if self.source is not None:
            parts.append(f"source: {self.source}")
        if self.metadata:
            parts.append(f"metadata: {len(self.metadata)} items")
        if verbose and self.location is not None:
            parts.append(f"location: {self.location}")
        return "; ".join(parts)

    def render_with_stack(self) -> str:
        """Return ``render()`` followed by the stack trace, when captured."""
        base = self.render()
        if self.stack_trace:
            return f"{base}\n\nStack Trace:\n{self.stack_trace}"
        return base

    # Fluent setters

    def with_metadata(self, *metas: Mapping[str, Any]) -> Error:
        """Merge metadata maps in order; later keys win."""
        for meta in metas:
            self.metadata.update(meta)
        return self

    def with_source(self, source: BaseException | None) -> Error:
        """Set the wrapped cause, keeping ``__cause__`` in step."""
        self.source = source
        self.__cause__ = source
        return self

    def with_correlation_id(self, correlation_id: str | None) -> Error:
        """Set the request/trace correlation id."""
        self.correlation_id = correlation_id
        return self

    def with_code(self, code: int | None) -> Error:
        """Set the numeric code, typically a transport status."""
        self.code = code
        return self

    def with_text_code(self, text_code: str | None) -> Error:
        """Set the symbolic code."""
        self.text_code = text_code
        return self

    def with_severity(self, severity: Severity) -> Error:
        """Set the severity level."""
        self.severity = Severity(severity)
        return self

    def with_location(self, location: ErrorLocation | None) -> Error:
        """Set the creation location explicitly."""
        self.location = location
        return self

    def with_stack_trace(self) -> Error:
        """Capture the stack of the caller."""
        self.stack_trace = capture_stack_trace(skip=1)
        return self

    # Queries

    def has_location(self) -> bool:
        return self.location is not None

    def has_severity(self, severity: Severity) -> bool:
        return self.severity == severity

    def is_above_severity(self, severity: Severity) -> bool:
        """Return whether this error is at or above ``severity``."""
        return self.severity >= severity

    def clone(self) -> Error:
        """Return a copy sharing no mutable state except ``source``."""
        return replace(
            self,
            validation_errors=ValidationErrors(self.validation_errors),
            metadata=dict(self.metadata),
            stack_trace=(
                StackTrace(self.stack_trace) if self.stack_trace is not None else None
            ),
        )

    def validation_map(self) -> dict[str, str]:
        """Return field -> message across the wrap chain, last entry winning.

        Fields found on wrapped errors are prefixed with ``source.`` per level.
        """
        return self._validation_map_with_path("")

    def all_validation_errors(self) -> ValidationErrors:
        """Return every field error across the wrap chain, in order."""
        result = ValidationErrors(self.validation_errors)
        if not self.validation_errors and isinstance(
            self.source, PydanticValidationError
        ):
            result.extend(field_errors_from_pydantic(self.source))

        nested = _direct_error(self.source)
        if nested is not None:
            result.extend(nested.all_validation_errors())
        return result

    def _validation_map_with_path(self, prefix: str) -> dict[str, str]:
        result: dict[str, str] = {}
        for entry in self.validation_errors:
            result[_join_path(prefix, entry.field)] = entry.message

        if not self.validation_errors and isinstance(
            self.source, PydanticValidationError
        ):
            for entry in field_errors_from_pydantic(self.source):
                result[_join_path(prefix, entry.field)] = entry.message

        nested = _direct_error(self.source)
        if nested is not None:
            result.update(
                nested._validation_map_with_path(_join_path(prefix, "source"))
            )
        return result

    # Wire presentation

    def to_record(self, *, include_stack: bool = True) -> ErrorRecord:
        """Return the flat wire record for this error."""
        from .response import to_record

        return to_record(self, include_stack=include_stack)

    def to_dict(self, *, include_stack: bool = True) -> dict[str, Any]:
        """Return the wire record as a JSON-ready dict."""
        return self.to_record(include_stack=include_stack).model_dump(
            mode="json", exclude_none=True
        )

    def to_error_response(self, include_stack: bool = False) -> ErrorResponse:
        """Return the ``{"error": record}`` response envelope."""
        from .response import ErrorResponse

        return ErrorResponse(error=self.to_record(include_stack=include_stack))


def new_error(
    message: str,
    category: str | None = None,
    *,
    capture: LocationCapture | None = None,
) -> Error:
    """Create an error, recording the caller's location when enabled."""
    strategy = capture or current_location_capture()
    return Error(
        message=message,
        category=Category(category) if category else Category.INTERNAL,
        location=strategy.capture(skip=1),
    )


def new_with_location(
    message: str, category: str, location: ErrorLocation | None
) -> Error:
    """Create an error with an explicit location."""
    return Error(message=message, category=Category(category), location=location)


def wrap(
    source: BaseException | None,
    category: str,
    message: str,
    *,
    capture: LocationCapture | None = None,
) -> Error | None:
    """Wrap ``source`` with a category and message.

    An ``Error`` already on the chain is cloned with its message prefixed,
    keeping its own category, location and validation errors. Foreign
    exceptions become the ``source`` of a new error.
    """
    if source is None:
        return None

    existing = as_error(source)
    if existing is not None:
        wrapped = existing.clone()
        wrapped.message = f"{message}: {existing.message}"
        return wrapped

    strategy = capture or current_location_capture()
    return Error(
        message=message,
        category=Category(category),
        source=source,
        location=strategy.capture(skip=1),
    )


def as_error(err: BaseException | None) -> Error | None:
    """Return the first structured error on the ``__cause__`` chain of ``err``."""
    seen: set[int] = set()
    current = err
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        found = _direct_error(current)
        if found is not None:
            return found
        current = current.__cause__
    return None


def is_wrapped(err: BaseException | None) -> bool:
    """Return whether ``err`` is, or wraps, a structured error."""
    return as_error(err) is not None


def root_cause(err: BaseException | None) -> BaseException | None:
    """Follow ``__cause__`` links to the innermost exception."""
    seen: set[int] = set()
    current = err
    while current is not None and current.__cause__ is not None:
        if id(current) in seen:
            break
        seen.add(id(current))
        current = current.__cause__
    return current


def root_category(err: BaseException | None) -> Category:
    """Return the category of the root cause, or ``internal``."""
    root = root_cause(err)
    if isinstance(root, Error):
        return root.category
    return Category.INTERNAL


def get_validation_errors(
    err: BaseException | None,
) -> tuple[ValidationErrors, bool]:
    """Collect field errors from every structured error on the chain."""
    collected = ValidationErrors()
    found = False
    seen: set[int] = set()
    current = err
    while current is not None and id(current) not in seen:
        seen.add(id(current))
        error = _direct_error(current)
        if error is None:
            current = current.__cause__
            continue
        if error.validation_errors:
            collected.extend(error.validation_errors)
            found = True
        current = error.source
    return collected, found


def _direct_error(err: BaseException | None) -> Error | None:
    if isinstance(err, Error):
        return err
    if isinstance(err, SupportsError):
        return err.to_error()
    return None


def _join_path(prefix: str, name: str) -> str:
    if prefix == "":
        return name
    return f"{prefix}.{name}"


def _restore_error(cls: type[Error], values: dict[str, Any]) -> Error:
    return cls(**values)
