"""Factory helpers for creating consistent errors."""

from __future__ import annotations

from typing import Callable, Iterable, Mapping

from pydantic import ValidationError as PydanticValidationError

from .categories import Category
from .location import LocationCapture, current_location_capture
from .severity import Severity
from .types import Error
from .validation import FieldError, ValidationErrors, field_errors_from_pydantic


def new_validation(message: str, *field_errors: FieldError) -> Error:
    """Create a validation-category error carrying field errors."""
    return Error(
        message=message,
        category=Category.VALIDATION,
        validation_errors=ValidationErrors(field_errors),
    )


def new_validation_from_map(message: str, field_map: Mapping[str, str]) -> Error:
    """Create a validation error from a field -> message mapping."""
    return new_validation(
        message,
        *(FieldError(field=name, message=text) for name, text in field_map.items()),
    )


def new_validation_from_groups(
    message: str, groups: Mapping[str, Iterable[str]]
) -> Error:
    """Create a validation error with several messages per field."""
    return new_validation(
        message,
        *(
            FieldError(field=name, message=text)
            for name, messages in groups.items()
            for text in messages
        ),
    )


def new_debug(
    message: str, category: str, *, capture: LocationCapture | None = None
) -> Error:
    """Create a debug-severity error."""
    return _with_severity(message, category, Severity.DEBUG, capture)


def new_info(
    message: str, category: str, *, capture: LocationCapture | None = None
) -> Error:
    """Create an info-severity error."""
    return _with_severity(message, category, Severity.INFO, capture)


def new_warning(
    message: str, category: str, *, capture: LocationCapture | None = None
) -> Error:
    """Create a warning-severity error."""
    return _with_severity(message, category, Severity.WARNING, capture)


def new_critical(
    message: str, category: str, *, capture: LocationCapture | None = None
) -> Error:
    """Create a critical-severity error."""
    return _with_severity(message, category, Severity.CRITICAL, capture)


def new_fatal(
    message: str, category: str, *, capture: LocationCapture | None = None
) -> Error:
    """Create a fatal-severity error."""
    return _with_severity(message, category, Severity.FATAL, capture)


def from_pydantic_validation(err: BaseException | None, message: str) -> Error | None:
    """Convert a pydantic ``ValidationError`` into a validation ``Error``.

    Other exceptions become the source of a general validation error.
    """
    if err is None:
        return None
    if isinstance(err, PydanticValidationError):
        return Error(
            message=message,
            category=Category.VALIDATION,
            validation_errors=field_errors_from_pydantic(err),
        )
    return Error(message=message, category=Category.VALIDATION, source=err)


def validate_with_pydantic(validate: Callable[[], object], message: str) -> Error | None:
    """Run ``validate`` and convert a pydantic failure into an ``Error``."""
    try:
        validate()
    except PydanticValidationError as exc:
        return from_pydantic_validation(exc, message)
    return None


def _with_severity(
    message: str,
    category: str,
    severity: Severity,
    capture: LocationCapture | None,
) -> Error:
    """Build an error whose location is the caller of the public factory."""
    strategy = capture or current_location_capture()
    return Error(
        message=message,
        category=Category(category),
        severity=severity,
        location=strategy.capture(skip=2),
    )
