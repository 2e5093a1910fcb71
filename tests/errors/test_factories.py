"""Tests for error factories and the pydantic validation adapter."""

from __future__ import annotations

from pydantic import BaseModel

from packages.faultline.errors import (
    Category,
    FieldError,
    Severity,
    from_pydantic_validation,
    location_capture,
    new_critical,
    new_debug,
    new_fatal,
    new_info,
    new_validation,
    new_validation_from_groups,
    new_validation_from_map,
    new_warning,
    validate_with_pydantic,
)


class _Signup(BaseModel):
    email: str
    age: int


def test_new_validation_keeps_field_errors_in_order() -> None:
    """Validation factories should preserve the field errors they receive."""
    err = new_validation(
        "invalid signup",
        FieldError("email", "required"),
        FieldError("age", "must be positive", -1),
    )

    assert err.category == Category.VALIDATION
    assert [str(entry) for entry in err.validation_errors] == [
        "email: required",
        "age: must be positive",
    ]
    assert err.validation_errors[1].value == -1


def test_new_validation_from_map_and_groups() -> None:
    """Mapping-based factories should expand to one field error per message."""
    single = new_validation_from_map("bad", {"email": "required"})
    grouped = new_validation_from_groups(
        "bad", {"password": ["too short", "needs a digit"]}
    )

    assert single.validation_map() == {"email": "required"}
    assert [entry.message for entry in grouped.validation_errors] == [
        "too short",
        "needs a digit",
    ]


def test_severity_factories() -> None:
    """Severity factories should set the severity and keep the category."""
    assert new_debug("d", Category.INTERNAL).severity is Severity.DEBUG
    assert new_info("i", Category.INTERNAL).severity is Severity.INFO
    assert new_warning("w", Category.EXTERNAL).severity is Severity.WARNING
    assert new_critical("c", Category.INTERNAL).severity is Severity.CRITICAL
    fatal = new_fatal("f", Category.OPERATION)
    assert fatal.severity is Severity.FATAL
    assert fatal.category == Category.OPERATION


def test_severity_factories_record_caller_location() -> None:
    """The captured location should be the factory's caller."""
    with location_capture(True):
        err = new_warning("slow", Category.EXTERNAL)

    assert err.location is not None
    assert err.location.function == "test_severity_factories_record_caller_location"


def test_from_pydantic_validation_flattens_field_errors() -> None:
    """Pydantic failures should become dotted-path field errors."""
    err = validate_with_pydantic(
        lambda: _Signup.model_validate({"age": "old"}), "invalid signup"
    )

    assert err is not None
    assert err.category == Category.VALIDATION
    assert err.message == "invalid signup"
    assert sorted(err.validation_map()) == ["age", "email"]


def test_validate_with_pydantic_returns_none_on_success() -> None:
    """Successful validation should produce no error."""
    assert (
        validate_with_pydantic(
            lambda: _Signup(email="a@example.com", age=30), "invalid signup"
        )
        is None
    )


def test_from_pydantic_validation_wraps_other_exceptions() -> None:
    """Non-pydantic failures should become the source of a validation error."""
    cause = ValueError("unparseable")
    err = from_pydantic_validation(cause, "invalid signup")

    assert err is not None
    assert err.source is cause
    assert err.validation_errors == []
    assert from_pydantic_validation(None, "ignored") is None
