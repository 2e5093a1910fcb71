"""Open error category taxonomy.

Categories answer *why* an error occurred. The set is open: the constants on
``Category`` are the well-known values shared across services, and downstream
code may introduce its own (``Category("billing")``) without touching this
module.
"""

from __future__ import annotations

from typing import ClassVar


class Category(str):
    """String-backed error category with well-known constants."""

    __slots__ = ()

    VALIDATION: ClassVar[Category]
    AUTH: ClassVar[Category]
    AUTHZ: ClassVar[Category]
    NOT_FOUND: ClassVar[Category]
    CONFLICT: ClassVar[Category]
    RATE_LIMIT: ClassVar[Category]
    BAD_INPUT: ClassVar[Category]
    INTERNAL: ClassVar[Category]
    EXTERNAL: ClassVar[Category]
    MIDDLEWARE: ClassVar[Category]
    ROUTING: ClassVar[Category]
    HANDLER: ClassVar[Category]
    METHOD_NOT_ALLOWED: ClassVar[Category]
    OPERATION: ClassVar[Category]

    def __new__(cls, value: str) -> Category:
        text = str(value).strip()
        if text == "":
            raise ValueError("category is required")
        return super().__new__(cls, text)

    def __repr__(self) -> str:
        return f"Category({str.__repr__(self)})"


Category.VALIDATION = Category("validation")
Category.AUTH = Category("authentication")
Category.AUTHZ = Category("authorization")
Category.NOT_FOUND = Category("not_found")
Category.CONFLICT = Category("conflict")
Category.RATE_LIMIT = Category("rate_limit")
Category.BAD_INPUT = Category("bad_input")
Category.INTERNAL = Category("internal")
Category.EXTERNAL = Category("external")
Category.MIDDLEWARE = Category("middleware")
Category.ROUTING = Category("routing")
Category.HANDLER = Category("handler")
Category.METHOD_NOT_ALLOWED = Category("method_not_allowed")
Category.OPERATION = Category("operation")


def is_category(err: BaseException | None, category: str) -> bool:
    """Return whether ``err`` classifies as an Error of ``category``."""
    from .types import as_error

    error = as_error(err)
    if error is None:
        return False
    return error.category == category


def is_validation(err: BaseException | None) -> bool:
    """Return whether ``err`` is a validation-category Error."""
    return is_category(err, Category.VALIDATION)


def is_auth(err: BaseException | None) -> bool:
    """Return whether ``err`` is an authentication-category Error."""
    return is_category(err, Category.AUTH)


def is_not_found(err: BaseException | None) -> bool:
    """Return whether ``err`` is a not-found-category Error."""
    return is_category(err, Category.NOT_FOUND)


def is_internal(err: BaseException | None) -> bool:
    """Return whether ``err`` is an internal-category Error."""
    return is_category(err, Category.INTERNAL)
