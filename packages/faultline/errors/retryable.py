"""Retry advisability and backoff for structured errors.

``RetryableError`` decorates one ``Error`` with an explicit retry flag and a
base delay. The library never retries anything itself: callers ask
``is_retryable_error`` whether a retry is advisable and ``retry_delay`` how
long to wait before attempt ``n``.

Per-error advice combines the explicit flag with severity: critical and fatal
errors are never advised for retry even when flagged retryable. Batch-level
analysis in ``ErrorCollector`` is coarser and looks at severity alone.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any, Mapping, Protocol, runtime_checkable

from .categories import Category
from .codes import CODE_BAD_GATEWAY, EXTERNAL_SERVICE_ERROR
from .location import current_location_capture
from .severity import Severity
from .types import Error, wrap

DEFAULT_RETRY_DELAY = timedelta(seconds=1)
MAX_RETRY_DELAY = timedelta(seconds=30)
OPERATION_RETRY_DELAY = timedelta(milliseconds=500)
EXTERNAL_RETRY_DELAY = timedelta(seconds=2)


@runtime_checkable
class SupportsRetryable(Protocol):
    """Capability of any exception that can advise on retrying."""

    def is_retryable(self) -> bool:
        """Return whether a retry is advisable."""


class RetryableError(Exception):
    """Error decorator carrying retry advice."""

    def __init__(
        self,
        error: Error,
        *,
        retryable: bool = True,
        base_delay: timedelta = DEFAULT_RETRY_DELAY,
    ) -> None:
        super().__init__(error.message)
        self.error = error
        self._retryable = retryable
        self._base_delay = base_delay
        self.__cause__ = error

    def __str__(self) -> str:
        return str(self.error)

    def __reduce__(self) -> tuple[Any, ...]:
        return (type(self), (self.error,), self.__dict__)

    def __repr__(self) -> str:
        return (
            f"RetryableError(error={self.error!r}, retryable={self._retryable}, "
            f"base_delay={self._base_delay!r})"
        )

    @property
    def category(self) -> Category:
        return self.error.category

    @property
    def severity(self) -> Severity:
        return self.error.severity

    @property
    def message(self) -> str:
        return self.error.message

    @property
    def base_delay(self) -> timedelta:
        return self._base_delay

    def to_error(self) -> Error:
        """Return the decorated error."""
        return self.error

    def is_retryable(self) -> bool:
        """Return the explicit flag, vetoed by critical or fatal severity."""
        return self._retryable and self.error.severity < Severity.CRITICAL

    def retry_delay(self, attempt: int) -> timedelta:
        """Return the wait before ``attempt`` (1-based), doubling up to 30s."""
        if attempt <= 0:
            return self._base_delay
        delay = self._base_delay
        for _ in range(1, attempt):
            if delay >= MAX_RETRY_DELAY:
                break
            delay *= 2
        return min(delay, MAX_RETRY_DELAY)

    def with_retryable(self, retryable: bool) -> RetryableError:
        self._retryable = retryable
        return self

    def with_retry_delay(self, delay: timedelta) -> RetryableError:
        self._base_delay = delay
        return self

    def with_metadata(self, *metas: Mapping[str, Any]) -> RetryableError:
        self.error.with_metadata(*metas)
        return self

    def with_code(self, code: int | None) -> RetryableError:
        self.error.with_code(code)
        return self

    def with_text_code(self, text_code: str | None) -> RetryableError:
        self.error.with_text_code(text_code)
        return self

    def with_severity(self, severity: Severity) -> RetryableError:
        self.error.with_severity(severity)
        return self

    def with_stack_trace(self) -> RetryableError:
        self.error.with_stack_trace()
        return self


def new_retryable(message: str, category: str) -> RetryableError:
    """Create a retryable error with a one second base delay."""
    return _new_retryable(message, category)


def _new_retryable(message: str, category: str) -> RetryableError:
    """Build a retryable error located at the caller of the public factory."""
    error = Error(
        message=message,
        category=Category(category),
        location=current_location_capture().capture(skip=2),
    )
    return RetryableError(error)


def wrap_retryable(
    source: BaseException | None, category: str, message: str
) -> RetryableError:
    """Wrap ``source`` and mark the result retryable."""
    error = wrap(source, category, message)
    if error is None:
        error = Error(
            message=message,
            category=Category(category),
            location=current_location_capture().capture(skip=1),
        )
    return RetryableError(error)


def new_non_retryable(message: str, category: str) -> RetryableError:
    """Create an error explicitly marked not worth retrying."""
    return _new_retryable(message, category).with_retryable(False)


def new_retryable_operation(
    message: str, delay: timedelta = OPERATION_RETRY_DELAY
) -> RetryableError:
    """Create a retryable operation failure with a short base delay."""
    return _new_retryable(message, Category.OPERATION).with_retry_delay(delay)


def new_retryable_external(message: str) -> RetryableError:
    """Create a retryable external-service failure."""
    return (
        _new_retryable(message, Category.EXTERNAL)
        .with_retry_delay(EXTERNAL_RETRY_DELAY)
        .with_code(CODE_BAD_GATEWAY)
        .with_text_code(EXTERNAL_SERVICE_ERROR)
    )


def is_retryable_error(err: object) -> bool:
    """Return whether ``err`` advertises and affirms retryability."""
    if isinstance(err, SupportsRetryable):
        return bool(err.is_retryable())
    return False
