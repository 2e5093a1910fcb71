"""Tests for severity-aware structured error logging."""

from __future__ import annotations

import json
import logging

import pytest

from packages.faultline.errors import (
    Category,
    FieldError,
    Severity,
    codes,
    new_critical,
    new_error,
    new_validation,
)
from packages.faultline.logging import (
    ContextFilter,
    JsonFormatter,
    error_attributes,
    get_context,
    log_by_severity,
    log_context,
    severity_log_level,
)


def test_severity_levels_map_onto_logging_levels() -> None:
    """Critical and fatal should share the error level."""
    assert severity_log_level(Severity.DEBUG) == logging.DEBUG
    assert severity_log_level(Severity.INFO) == logging.INFO
    assert severity_log_level(Severity.WARNING) == logging.WARNING
    assert severity_log_level(Severity.ERROR) == logging.ERROR
    assert severity_log_level(Severity.CRITICAL) == logging.ERROR
    assert severity_log_level(Severity.FATAL) == logging.ERROR


def test_error_attributes_are_ordered_and_omit_absent_values() -> None:
    """Attributes should follow a stable order with severity always present."""
    err = (
        new_validation("bad", FieldError("email", "required"))
        .with_code(codes.CODE_BAD_REQUEST)
        .with_text_code(codes.VALIDATION_ERROR)
        .with_correlation_id("req-1")
        .with_metadata({"form": "signup"})
    )

    assert error_attributes(err) == [
        ("error_code", 400),
        ("text_code", "VALIDATION_ERROR"),
        ("category", "validation"),
        ("severity", "ERROR"),
        ("correlation_id", "req-1"),
        ("validation_errors", [{"field": "email", "message": "required"}]),
        ("metadata", {"form": "signup"}),
    ]
    assert error_attributes(new_error("plain")) == [
        ("category", "internal"),
        ("severity", "ERROR"),
    ]
    assert error_attributes(None) == []


def test_log_by_severity_is_a_noop_without_inputs(
    caplog: pytest.LogCaptureFixture,
) -> None:
    """Missing logger or error should emit nothing."""
    logger = logging.getLogger("tests.faultline.noop")

    with caplog.at_level(logging.DEBUG, logger=logger.name):
        log_by_severity(None, new_error("boom"))
        log_by_severity(logger, None)

    assert caplog.records == []


def test_log_by_severity_binds_attributes(caplog: pytest.LogCaptureFixture) -> None:
    """Records should carry the error attributes at the mapped level."""
    logger = logging.getLogger("tests.faultline.attributes")
    context_filter = ContextFilter()
    logger.addFilter(context_filter)
    err = new_error("token has expired", Category.AUTH).with_text_code(
        codes.TOKEN_EXPIRED
    )

    try:
        with caplog.at_level(logging.DEBUG, logger=logger.name):
            log_by_severity(logger, err.with_severity(Severity.WARNING))
    finally:
        logger.removeFilter(context_filter)

    record = caplog.records[0]
    assert record.levelno == logging.WARNING
    assert record.getMessage() == err.render()
    assert getattr(record, "category") == "authentication"
    assert getattr(record, "text_code") == "TOKEN_EXPIRED"
    assert get_context() == {}


def test_critical_errors_log_their_stack(caplog: pytest.LogCaptureFixture) -> None:
    """Critical messages should include the captured stack trace."""
    logger = logging.getLogger("tests.faultline.critical")
    err = new_critical("disk corrupted", Category.INTERNAL).with_stack_trace()

    with caplog.at_level(logging.DEBUG, logger=logger.name):
        log_by_severity(logger, err)

    record = caplog.records[0]
    assert record.levelno == logging.ERROR
    assert "\n\nStack Trace:\n" in record.getMessage()


def test_json_formatter_includes_bound_context() -> None:
    """JSON output should carry context fields with their structure intact."""
    record = logging.LogRecord(
        name="tests.faultline.json",
        level=logging.ERROR,
        pathname=__file__,
        lineno=1,
        msg="boom",
        args=(),
        exc_info=None,
    )

    with log_context([("category", "internal"), ("metadata", {"attempt": 2})]):
        ContextFilter().filter(record)

    payload = json.loads(JsonFormatter().format(record))

    assert payload["message"] == "boom"
    assert payload["level"] == "ERROR"
    assert payload["category"] == "internal"
    assert payload["metadata"] == {"attempt": 2}


def test_log_context_restores_previous_values() -> None:
    """Scoped context should not leak past its block."""
    with log_context({"service": "billing", "ignored": None}):
        assert get_context() == {"service": "billing"}
    assert "service" not in get_context()
