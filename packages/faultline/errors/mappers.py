"""Mapper chain that classifies foreign exceptions into ``Error`` values.

A mapper is a pure function returning an ``Error`` when it recognizes the
exception and ``None`` otherwise. ``map_to_error`` tries mappers in order, so
specific text-code classifiers must come before generic status mapping or
their diagnostics are masked by the generic fallback.
"""

from __future__ import annotations

from typing import Callable, Protocol, Sequence, runtime_checkable

from . import codes
from .categories import Category
from .location import current_location_capture
from .types import Error, as_error, new_error

ErrorMapper = Callable[[BaseException], "Error | None"]


@runtime_checkable
class SupportsStatusCode(Protocol):
    """Capability of exceptions exposing a transport status code."""

    status_code: int


_STATUS_CATEGORIES: dict[int, Category] = {
    codes.CODE_BAD_REQUEST: Category.BAD_INPUT,
    codes.CODE_UNAUTHORIZED: Category.AUTH,
    codes.CODE_FORBIDDEN: Category.AUTHZ,
    codes.CODE_NOT_FOUND: Category.NOT_FOUND,
    codes.CODE_METHOD_NOT_ALLOWED: Category.METHOD_NOT_ALLOWED,
    codes.CODE_REQUEST_TIMEOUT: Category.EXTERNAL,
    codes.CODE_CONFLICT: Category.CONFLICT,
    codes.CODE_GONE: Category.NOT_FOUND,
    codes.CODE_UNPROCESSABLE: Category.VALIDATION,
    codes.CODE_TOO_MANY_REQUESTS: Category.RATE_LIMIT,
    codes.CODE_BAD_GATEWAY: Category.EXTERNAL,
    codes.CODE_SERVICE_UNAVAILABLE: Category.EXTERNAL,
    codes.CODE_GATEWAY_TIMEOUT: Category.EXTERNAL,
}


def map_to_error(
    err: BaseException | None, mappers: Sequence[ErrorMapper]
) -> Error | None:
    """Classify ``err`` into an ``Error``; unknown exceptions become internal."""
    if err is None:
        return None

    existing = as_error(err)
    if existing is not None:
        return existing

    for mapper in mappers:
        mapped = mapper(err)
        if mapped is not None:
            return mapped

    return Error(
        message="An unexpected error occurred",
        category=Category.INTERNAL,
        code=codes.CODE_INTERNAL,
        text_code=codes.UNEXPECTED_ERROR,
        source=err,
        location=current_location_capture().capture(skip=1),
    )


def default_error_mappers() -> list[ErrorMapper]:
    """Return the built-in chain, most specific mapper first."""
    return [
        map_onboarding_errors,
        map_auth_errors,
        map_http_status_errors,
        map_builtin_exceptions,
    ]


def map_onboarding_errors(err: BaseException) -> Error | None:
    """Normalize invite, reset, verification, and feature gate failures."""
    text = str(err)
    msg = _normalize(err)

    if _contains_any(msg, "invite expired", "invitation expired") or _contains_all(
        msg, "invite", "expired"
    ):
        return _classified(text, Category.BAD_INPUT, codes.CODE_GONE, codes.INVITE_EXPIRED)
    if _contains_any(
        msg, "invite used", "invitation used", "invite already used"
    ) or _contains_all(msg, "invite", "used"):
        return _classified(text, Category.CONFLICT, codes.CODE_CONFLICT, codes.INVITE_USED)
    if _contains_any(msg, "token already used"):
        return _classified(
            text, Category.CONFLICT, codes.CODE_CONFLICT, codes.TOKEN_ALREADY_USED
        )
    if _contains_any(msg, "reset not allowed", "password reset not allowed"):
        return _classified(
            text, Category.AUTHZ, codes.CODE_FORBIDDEN, codes.RESET_NOT_ALLOWED
        )
    if _contains_any(
        msg,
        "reset rate limit",
        "password reset rate limit",
        "password reset rate limited",
        "password reset is rate limited",
    ):
        return _classified(
            text, Category.RATE_LIMIT, codes.CODE_TOO_MANY_REQUESTS, codes.RESET_RATE_LIMIT
        )
    if _contains_any(msg, "account locked", "account lockout", "locked out"):
        return _classified(text, Category.AUTH, codes.CODE_FORBIDDEN, codes.ACCOUNT_LOCKED)
    if _contains_any(
        msg,
        "verification required",
        "verification needed",
        "email not verified",
        "email verification required",
    ):
        return _classified(
            text, Category.AUTH, codes.CODE_FORBIDDEN, codes.VERIFICATION_REQUIRED
        )
    if _contains_any(msg, "verification expired", "verification token expired"):
        return _classified(
            text, Category.AUTH, codes.CODE_FORBIDDEN, codes.VERIFICATION_EXPIRED
        )
    if _contains_any(
        msg,
        "feature disabled",
        "signup disabled",
        "registration disabled",
        "self registration disabled",
    ):
        return _classified(
            text, Category.AUTHZ, codes.CODE_FORBIDDEN, codes.FEATURE_DISABLED
        )
    return None


def map_auth_errors(err: BaseException) -> Error | None:
    """Normalize authentication and account-state failures."""
    text = str(err)
    msg = _normalize(err)

    if _contains_any(msg, "too many") and _contains_any(msg, "attempt"):
        return _classified(
            text, Category.RATE_LIMIT, codes.CODE_TOO_MANY_REQUESTS, codes.TOO_MANY_ATTEMPTS
        )
    if _contains_all(msg, "token", "expired"):
        return _classified(text, Category.AUTH, codes.CODE_UNAUTHORIZED, codes.TOKEN_EXPIRED)
    if _contains_all(msg, "token", "malformed") or _contains_all(msg, "token", "invalid"):
        return _classified(
            text, Category.AUTH, codes.CODE_BAD_REQUEST, codes.TOKEN_MALFORMED
        )
    if _contains_all(msg, "account", "suspended"):
        return _classified(
            text, Category.AUTH, codes.CODE_FORBIDDEN, codes.ACCOUNT_SUSPENDED
        )
    if _contains_all(msg, "account", "disabled"):
        return _classified(text, Category.AUTH, codes.CODE_FORBIDDEN, codes.ACCOUNT_DISABLED)
    if _contains_all(msg, "account", "archived"):
        return _classified(text, Category.AUTH, codes.CODE_FORBIDDEN, codes.ACCOUNT_ARCHIVED)
    if _contains_all(msg, "account", "pending"):
        return _classified(text, Category.AUTH, codes.CODE_FORBIDDEN, codes.ACCOUNT_PENDING)
    if _contains_any(msg, "unauthorized", "unauthenticated", "not authenticated"):
        return _classified(text, Category.AUTH, codes.CODE_UNAUTHORIZED, codes.UNAUTHORIZED)
    return None


def map_http_status_errors(err: BaseException) -> Error | None:
    """Classify exceptions that expose a ``status_code`` attribute."""
    if not isinstance(err, SupportsStatusCode):
        return None
    try:
        status = int(err.status_code)
    except (TypeError, ValueError):
        return None

    category = _STATUS_CATEGORIES.get(status)
    if category is None:
        if status >= 500:
            category = Category.EXTERNAL
        elif status >= 400:
            category = Category.BAD_INPUT
        else:
            return None
    return new_error(str(err), category).with_code(status)


def map_builtin_exceptions(err: BaseException) -> Error | None:
    """Classify common Python builtin exceptions.

    This mapping is intentionally conservative and generic; services layer
    domain-specific mappers before it.
    """
    metadata = {"exception_type": type(err).__name__}

    if isinstance(err, TimeoutError):
        return (
            new_error(str(err) or "dependency timeout", Category.EXTERNAL)
            .with_code(codes.CODE_GATEWAY_TIMEOUT)
            .with_text_code(codes.DEPENDENCY_TIMEOUT)
            .with_metadata(metadata)
        )
    if isinstance(err, PermissionError):
        return (
            new_error(str(err), Category.AUTHZ)
            .with_code(codes.CODE_FORBIDDEN)
            .with_text_code(codes.PERMISSION_DENIED)
            .with_metadata(metadata)
        )
    if isinstance(err, ConnectionError):
        return (
            new_error(str(err) or "dependency unavailable", Category.EXTERNAL)
            .with_code(codes.CODE_SERVICE_UNAVAILABLE)
            .with_text_code(codes.DEPENDENCY_UNAVAILABLE)
            .with_metadata(metadata)
        )
    if isinstance(err, ValueError):
        return (
            new_error(str(err), Category.BAD_INPUT)
            .with_code(codes.CODE_BAD_REQUEST)
            .with_text_code(codes.INVALID_ARGUMENT)
            .with_metadata(metadata)
        )
    if isinstance(err, KeyError):
        return (
            new_error(str(err), Category.NOT_FOUND)
            .with_code(codes.CODE_NOT_FOUND)
            .with_text_code(codes.RESOURCE_NOT_FOUND)
            .with_metadata(metadata)
        )
    return None


def _classified(message: str, category: Category, code: int, text_code: str) -> Error:
    return new_error(message, category).with_code(code).with_text_code(text_code)


def _normalize(err: BaseException) -> str:
    return str(err).strip().lower()


def _contains_any(msg: str, *needles: str) -> bool:
    return any(needle and needle in msg for needle in needles)


def _contains_all(msg: str, *needles: str) -> bool:
    present = [needle for needle in needles if needle]
    return len(present) > 0 and all(needle in msg for needle in present)
