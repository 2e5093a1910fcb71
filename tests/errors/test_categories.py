"""Tests for the open category taxonomy and severity ordering."""

from __future__ import annotations

import pytest

from packages.faultline.errors import (
    Category,
    Severity,
    is_auth,
    is_category,
    is_internal,
    is_not_found,
    is_validation,
    new_error,
)


def test_well_known_categories_have_stable_values() -> None:
    """Category constants should serialize to their wire names."""
    assert Category.AUTH == "authentication"
    assert Category.AUTHZ == "authorization"
    assert Category.METHOD_NOT_ALLOWED == "method_not_allowed"
    assert str(Category.VALIDATION) == "validation"


def test_categories_are_open() -> None:
    """Downstream code should be able to define its own categories."""
    billing = Category("billing")

    assert billing == "billing"
    assert new_error("card declined", billing).category == "billing"


def test_empty_category_is_rejected() -> None:
    """A blank category is a construction-time mistake."""
    with pytest.raises(ValueError, match="category is required"):
        Category("  ")


def test_category_predicates_follow_cause_chain() -> None:
    """Predicates should classify errors reached through foreign causes."""
    wrapper = RuntimeError("request failed")
    wrapper.__cause__ = new_error("bad", Category.VALIDATION)

    assert is_validation(wrapper)
    assert is_category(wrapper, "validation")
    assert not is_auth(wrapper)
    assert not is_not_found(wrapper)
    assert is_internal(new_error("boom"))
    assert not is_internal(ValueError("plain"))


def test_severity_is_totally_ordered() -> None:
    """Severity comparisons should follow declaration order."""
    ordered = [
        Severity.DEBUG,
        Severity.INFO,
        Severity.WARNING,
        Severity.ERROR,
        Severity.CRITICAL,
        Severity.FATAL,
    ]

    assert sorted(reversed(ordered)) == ordered
    assert str(Severity.CRITICAL) == "CRITICAL"
    assert f"{Severity.INFO}" == "INFO"


def test_severity_parse() -> None:
    """Names should parse case-insensitively and unknown names should fail."""
    assert Severity.parse("warning") is Severity.WARNING
    assert Severity.parse(" FATAL ") is Severity.FATAL
    with pytest.raises(ValueError, match="unknown severity"):
        Severity.parse("loud")
