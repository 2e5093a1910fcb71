"""Thread-safe collection and aggregation of errors for batch operations.

Workers call ``add`` concurrently; the caller reads live statistics and, at the
end, ``merge``s everything into one actionable ``Error``.

Capacity is bounded by ``max_errors``. In lenient mode (the default) the
collector is a ring buffer that evicts its oldest entry to keep the newest
signal; in strict mode ``add`` refuses new entries once full and returns
``False``.

Two retry notions coexist: ``RetryableError.is_retryable`` honours
an explicit per-error flag, while ``has_retryable_errors`` and
``retryable_errors`` classify a whole batch by severity alone (anything below
``CRITICAL`` is potentially retryable).
"""

from __future__ import annotations

import logging
import threading
from collections import Counter, deque
from typing import TYPE_CHECKING, Any, Iterable, Sequence

from packages.faultline.config import load_startup_settings
from packages.faultline.logging import fields
from packages.faultline.logging import errors as error_logging

from .categories import Category
from .mappers import ErrorMapper, map_to_error
from .retryable import wrap_retryable
from .severity import Severity
from .types import Error, as_error, new_error, wrap
from .validation import FieldError, ValidationErrors

if TYPE_CHECKING:
    from packages.faultline.config import CollectorSettings

    from .response import ErrorResponse

DEFAULT_MAX_ERRORS = 100
MERGED_MESSAGE = "Multiple errors occurred"


class ErrorCollector:
    """Bounded, lock-protected accumulator of classified errors."""

    def __init__(
        self,
        *,
        max_errors: int = DEFAULT_MAX_ERRORS,
        strict_mode: bool = False,
        cancel_event: threading.Event | None = None,
        mappers: Sequence[ErrorMapper] | None = None,
    ) -> None:
        if max_errors < 1:
            raise ValueError("max_errors must be >= 1.")
        self._lock = threading.RLock()
        self._errors: deque[Error] = deque(maxlen=max_errors)
        self._max_errors = max_errors
        self._strict_mode = strict_mode
        self._cancel_event = cancel_event or threading.Event()
        self._mappers = tuple(mappers) if mappers is not None else None

    @classmethod
    def from_settings(
        cls,
        settings: CollectorSettings | None = None,
        *,
        cancel_event: threading.Event | None = None,
        mappers: Sequence[ErrorMapper] | None = None,
    ) -> ErrorCollector:
        """Build a collector from ``collector`` settings."""
        if settings is None:
            settings = load_startup_settings().collector
        return cls(
            max_errors=settings.max_errors,
            strict_mode=settings.strict_mode,
            cancel_event=cancel_event,
            mappers=mappers,
        )

    @property
    def max_errors(self) -> int:
        return self._max_errors

    @property
    def strict_mode(self) -> bool:
        return self._strict_mode

    @property
    def cancel_event(self) -> threading.Event:
        """Cancellation signal carried for the caller; never consulted here."""
        return self._cancel_event

    def is_cancelled(self) -> bool:
        return self._cancel_event.is_set()

    # Ingestion

    def add(self, err: BaseException | None) -> bool:
        """Add one error; return ``False`` only when full in strict mode."""
        if err is None:
            return True

        error = self._classify(err)
        with self._lock:
            if len(self._errors) >= self._max_errors and self._strict_mode:
                return False
            # deque(maxlen=...) drops the oldest entry when full.
            self._errors.append(error)
        return True

    def add_validation(self, field: str, message: str) -> bool:
        """Add a validation error for one field."""
        return self.add(
            Error(
                message="Validation failed",
                category=Category.VALIDATION,
                validation_errors=ValidationErrors([FieldError(field, message)]),
            )
        )

    def add_field_errors(self, *field_errors: FieldError) -> bool:
        """Add several field errors as one validation error."""
        if not field_errors:
            return True
        return self.add(
            Error(
                message="Validation failed",
                category=Category.VALIDATION,
                validation_errors=ValidationErrors(field_errors),
            )
        )

    def add_retryable(
        self, err: BaseException | None, category: str, message: str
    ) -> bool:
        """Add ``err`` (or a new error when ``None``) as a retryable error."""
        return self.add(wrap_retryable(err, category, message).to_error())

    # Snapshots

    def has_errors(self) -> bool:
        with self._lock:
            return len(self._errors) > 0

    def count(self) -> int:
        with self._lock:
            return len(self._errors)

    def errors(self) -> list[Error]:
        """Return a snapshot list of the collected errors, oldest first."""
        with self._lock:
            return list(self._errors)

    def reset(self) -> None:
        """Drop all entries; capacity and mode are kept."""
        with self._lock:
            self._errors.clear()

    def filter_by_severity(self, minimum: Severity) -> list[Error]:
        """Return entries at or above ``minimum``."""
        with self._lock:
            return [error for error in self._errors if error.severity >= minimum]

    def filter_by_category(self, category: str) -> list[Error]:
        """Return entries whose own category equals ``category``."""
        with self._lock:
            return [error for error in self._errors if error.category == category]

    def validation_errors(self) -> ValidationErrors:
        """Return the direct field errors of every entry, in order."""
        with self._lock:
            return _concat_validation(self._errors)

    def all_validation_errors(self) -> ValidationErrors:
        """Return field errors of every entry including wrapped sources."""
        with self._lock:
            result = ValidationErrors()
            for error in self._errors:
                result.extend(error.all_validation_errors())
            return result

    # Statistics

    def category_stats(self) -> dict[Category, int]:
        with self._lock:
            return _category_stats(self._errors)

    def severity_distribution(self) -> dict[Severity, int]:
        with self._lock:
            return _severity_stats(self._errors)

    def most_common_category(self) -> Category:
        """Return the most frequent category; ties and empty give ``internal``."""
        with self._lock:
            return _most_common_category(_category_stats(self._errors))

    def has_retryable_errors(self) -> bool:
        """Return whether any entry is below ``CRITICAL`` severity."""
        with self._lock:
            return any(error.severity < Severity.CRITICAL for error in self._errors)

    def retryable_errors(self) -> list[Error]:
        """Return entries below ``CRITICAL`` severity."""
        with self._lock:
            return _retryable(self._errors)

    # Aggregation

    def merge(self) -> Error | None:
        """Fold the collected errors into one.

        No entries gives ``None``; one entry gives an independent clone; more
        produce a summary whose severity is the worst collected, whose category
        is the most common, and whose field errors are all entries' field
        errors in collection order. The collector itself is not modified.
        """
        with self._lock:
            return self._merge_locked()

    def to_error_response(self, include_stack: bool = False) -> ErrorResponse | None:
        """Return the merge result wrapped in the response envelope."""
        merged = self.merge()
        if merged is None:
            return None
        return merged.to_error_response(include_stack)

    # Logging

    def log_attributes(self) -> list[tuple[str, Any]]:
        """Return ordered key/value pairs describing the collector state."""
        with self._lock:
            return self._log_attributes_locked()

    def log_errors(self, logger: logging.Logger | None) -> None:
        """Log every entry at the level mapped from its severity."""
        if logger is None:
            return
        with self._lock:
            snapshot = list(self._errors)
            collector_attrs = self._log_attributes_locked()

        for index, error in enumerate(snapshot):
            extra = [*collector_attrs, (fields.ERROR_INDEX, index)]
            error_logging.log_by_severity(logger, error, extra=extra)

    # Internals, callers hold the lock

    def _merge_locked(self) -> Error | None:
        if len(self._errors) == 0:
            return None
        if len(self._errors) == 1:
            return self._errors[0].clone()

        category_stats = _category_stats(self._errors)
        severity_stats = _severity_stats(self._errors)
        highest = max(severity_stats)

        aggregate = (
            new_error(MERGED_MESSAGE, _most_common_category(category_stats))
            .with_severity(highest)
            .with_metadata(
                {
                    "error_count": len(self._errors),
                    "category_stats": {
                        str(category): count for category, count in category_stats.items()
                    },
                    "severity_stats": {
                        severity.name: count for severity, count in severity_stats.items()
                    },
                    "aggregated_at": self._errors[0].timestamp,
                }
            )
        )
        aggregate.validation_errors = _concat_validation(self._errors)
        return aggregate

    def _log_attributes_locked(self) -> list[tuple[str, Any]]:
        attrs: list[tuple[str, Any]] = [
            (fields.ERROR_COUNT, len(self._errors)),
            (fields.MAX_ERRORS, self._max_errors),
            (fields.STRICT_MODE, self._strict_mode),
        ]
        if len(self._errors) == 0:
            return attrs

        category_stats = _category_stats(self._errors)
        attrs.append(
            (fields.CATEGORY_STATS, {str(k): v for k, v in category_stats.items()})
        )
        attrs.append(
            (
                fields.SEVERITY_STATS,
                {k.name: v for k, v in _severity_stats(self._errors).items()},
            )
        )
        attrs.append(
            (fields.MOST_COMMON_CATEGORY, str(_most_common_category(category_stats)))
        )

        validation_count = len(_concat_validation(self._errors))
        if validation_count > 0:
            attrs.append((fields.VALIDATION_ERROR_COUNT, validation_count))

        retryable_count = len(_retryable(self._errors))
        if retryable_count > 0:
            attrs.append((fields.RETRYABLE_ERROR_COUNT, retryable_count))
        return attrs

    def _classify(self, err: BaseException) -> Error:
        existing = as_error(err)
        if existing is not None:
            return existing
        if self._mappers is not None:
            mapped = map_to_error(err, self._mappers)
            if mapped is not None:
                return mapped
        wrapped = wrap(err, Category.INTERNAL, str(err))
        if wrapped is None:
            raise TypeError("cannot classify a missing error")
        return wrapped


def _category_stats(errors: Iterable[Error]) -> dict[Category, int]:
    return dict(Counter(error.category for error in errors))


def _severity_stats(errors: Iterable[Error]) -> dict[Severity, int]:
    return dict(Counter(error.severity for error in errors))


def _most_common_category(stats: dict[Category, int]) -> Category:
    if not stats:
        return Category.INTERNAL
    top = max(stats.values())
    leaders = [category for category, count in stats.items() if count == top]
    if len(leaders) != 1:
        return Category.INTERNAL
    return leaders[0]


def _concat_validation(errors: Iterable[Error]) -> ValidationErrors:
    result = ValidationErrors()
    for error in errors:
        result.extend(error.validation_errors)
    return result


def _retryable(errors: Iterable[Error]) -> list[Error]:
    return [error for error in errors if error.severity < Severity.CRITICAL]
