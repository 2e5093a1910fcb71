"""Severity-aware logging of structured errors.

``error_attributes`` flattens an ``Error`` into ordered key/value pairs;
``log_by_severity`` binds them through ``log_context`` and emits one record at
the level mapped from the error's severity.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Iterable

from packages.faultline.errors.severity import Severity

from . import fields
from .context import log_context

if TYPE_CHECKING:
    from packages.faultline.errors.types import Error

_LEVELS: dict[Severity, int] = {
    Severity.DEBUG: logging.DEBUG,
    Severity.INFO: logging.INFO,
    Severity.WARNING: logging.WARNING,
    Severity.ERROR: logging.ERROR,
    Severity.CRITICAL: logging.ERROR,
    Severity.FATAL: logging.ERROR,
}


def severity_log_level(severity: Severity) -> int:
    """Map an error severity onto a standard logging level."""
    return _LEVELS.get(Severity(severity), logging.ERROR)


def error_attributes(err: Error | None) -> list[tuple[str, Any]]:
    """Return the structured log attributes of ``err`` in a stable order.

    Absent values are omitted; severity is always present.
    """
    if err is None:
        return []

    attrs: list[tuple[str, Any]] = []
    if err.code is not None:
        attrs.append((fields.ERROR_CODE, err.code))
    if err.text_code:
        attrs.append((fields.TEXT_CODE, err.text_code))
    attrs.append((fields.CATEGORY, str(err.category)))
    attrs.append((fields.SEVERITY, str(err.severity)))
    if err.correlation_id:
        attrs.append((fields.CORRELATION_ID, err.correlation_id))
    if err.validation_errors:
        attrs.append(
            (
                fields.VALIDATION_ERRORS,
                [
                    {"field": entry.field, "message": entry.message}
                    for entry in err.validation_errors
                ],
            )
        )
    if err.metadata:
        attrs.append((fields.METADATA, dict(err.metadata)))
    return attrs


def log_by_severity(
    logger: logging.Logger | None,
    err: Error | None,
    *,
    extra: Iterable[tuple[str, Any]] = (),
) -> None:
    """Log ``err`` at its mapped level; no-op when either argument is missing.

    Critical and fatal errors are logged with their captured stack trace.
    """
    if logger is None or err is None:
        return

    if err.severity >= Severity.CRITICAL:
        message = err.render_with_stack()
    else:
        message = err.render()

    with log_context([*error_attributes(err), *extra]):
        logger.log(severity_log_level(err.severity), message)
