"""Tests for the foreign exception mapper chain."""

from __future__ import annotations

from packages.faultline.errors import (
    Category,
    Error,
    codes,
    default_error_mappers,
    map_auth_errors,
    map_to_error,
    new_error,
)


class _HttpFailure(Exception):
    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


def test_missing_error_maps_to_none() -> None:
    """Nothing in should give nothing out."""
    assert map_to_error(None, default_error_mappers()) is None


def test_existing_error_is_returned_unchanged() -> None:
    """Errors already on the chain should bypass the mappers."""
    err = new_error("token has expired", Category.NOT_FOUND)
    wrapper = RuntimeError("outer")
    wrapper.__cause__ = err

    assert map_to_error(err, default_error_mappers()) is err
    assert map_to_error(wrapper, default_error_mappers()) is err


def test_auth_messages_are_classified() -> None:
    """Authentication failures should receive text codes and statuses."""
    mapped = map_to_error(ValueError("Token has expired"), default_error_mappers())

    assert mapped is not None
    assert mapped.category == Category.AUTH
    assert mapped.text_code == codes.TOKEN_EXPIRED
    assert mapped.code == codes.CODE_UNAUTHORIZED
    assert mapped.message == "Token has expired"


def test_account_state_and_rate_limit_messages() -> None:
    """Account states and attempt limits should map to distinct text codes."""
    mappers = default_error_mappers()

    suspended = map_to_error(RuntimeError("account suspended"), mappers)
    attempts = map_to_error(RuntimeError("too many login attempts"), mappers)

    assert suspended is not None and suspended.text_code == codes.ACCOUNT_SUSPENDED
    assert suspended.code == codes.CODE_FORBIDDEN
    assert attempts is not None and attempts.category == Category.RATE_LIMIT
    assert attempts.text_code == codes.TOO_MANY_ATTEMPTS


def test_onboarding_messages_are_classified() -> None:
    """Invite and verification failures should map before generic auth."""
    mappers = default_error_mappers()

    expired = map_to_error(RuntimeError("Invite expired"), mappers)
    used = map_to_error(RuntimeError("invite already used"), mappers)
    verify = map_to_error(RuntimeError("email not verified"), mappers)

    assert expired is not None and expired.text_code == codes.INVITE_EXPIRED
    assert expired.code == codes.CODE_GONE
    assert used is not None and used.category == Category.CONFLICT
    assert verify is not None and verify.text_code == codes.VERIFICATION_REQUIRED


def test_status_codes_are_classified() -> None:
    """Exceptions exposing a status code should map by status."""
    mappers = default_error_mappers()

    not_found = map_to_error(_HttpFailure("no such user", 404), mappers)
    teapot = map_to_error(_HttpFailure("short and stout", 418), mappers)
    unavailable = map_to_error(_HttpFailure("maintenance", 503), mappers)

    assert not_found is not None and not_found.category == Category.NOT_FOUND
    assert not_found.code == 404
    assert teapot is not None and teapot.category == Category.BAD_INPUT
    assert unavailable is not None and unavailable.category == Category.EXTERNAL


def test_builtin_exceptions_are_classified() -> None:
    """Common builtin exceptions should map conservatively."""
    mappers = default_error_mappers()

    timeout = map_to_error(TimeoutError(), mappers)
    missing = map_to_error(KeyError("user"), mappers)
    denied = map_to_error(PermissionError("read only"), mappers)

    assert timeout is not None
    assert timeout.message == "dependency timeout"
    assert timeout.text_code == codes.DEPENDENCY_TIMEOUT
    assert timeout.metadata == {"exception_type": "TimeoutError"}
    assert missing is not None and missing.category == Category.NOT_FOUND
    assert denied is not None and denied.category == Category.AUTHZ


def test_unrecognized_exception_becomes_internal() -> None:
    """Unknown exceptions should be captured as internal with their source."""
    cause = RuntimeError("kaboom")
    mapped = map_to_error(cause, default_error_mappers())

    assert isinstance(mapped, Error)
    assert mapped.message == "An unexpected error occurred"
    assert mapped.category == Category.INTERNAL
    assert mapped.code == codes.CODE_INTERNAL
    assert mapped.text_code == codes.UNEXPECTED_ERROR
    assert mapped.source is cause


def test_first_matching_mapper_wins() -> None:
    """Mappers should be consulted in order."""

    def always_conflict(err: BaseException) -> Error | None:
        return new_error(str(err), Category.CONFLICT)

    mapped = map_to_error(
        RuntimeError("token expired"), [always_conflict, map_auth_errors]
    )

    assert mapped is not None
    assert mapped.category == Category.CONFLICT
