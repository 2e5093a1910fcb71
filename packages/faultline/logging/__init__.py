"""Public logging API for faultline.

This package wraps Python's ``logging`` module with stdout defaults,
``contextvars``-backed structured context, and severity-aware error logging.
"""

from .config import (
    ContextFilter,
    JsonFormatter,
    PlainFormatter,
    configure_logging,
    configure_logging_from_settings,
    get_logger,
)
from .context import bind_context, clear_context, get_context, log_context
from .errors import error_attributes, log_by_severity, severity_log_level

__all__ = [
    "bind_context",
    "clear_context",
    "configure_logging",
    "configure_logging_from_settings",
    "ContextFilter",
    "error_attributes",
    "get_context",
    "get_logger",
    "JsonFormatter",
    "log_by_severity",
    "log_context",
    "PlainFormatter",
    "severity_log_level",
]
