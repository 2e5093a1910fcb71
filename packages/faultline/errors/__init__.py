"""Public structured error API for faultline."""

from . import codes
from .categories import (
    Category,
    is_auth,
    is_category,
    is_internal,
    is_not_found,
    is_validation,
)
from .factories import (
    from_pydantic_validation,
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
from .location import (
    ErrorLocation,
    LocationCapture,
    current_location_capture,
    here,
    is_location_capture_enabled,
    location_capture,
    set_location_capture,
)
from .mappers import (
    ErrorMapper,
    SupportsStatusCode,
    default_error_mappers,
    map_auth_errors,
    map_builtin_exceptions,
    map_http_status_errors,
    map_onboarding_errors,
    map_to_error,
)
from .response import ErrorRecord, ErrorResponse
from .retryable import (
    RetryableError,
    SupportsRetryable,
    is_retryable_error,
    new_non_retryable,
    new_retryable,
    new_retryable_external,
    new_retryable_operation,
    wrap_retryable,
)
from .severity import Severity
from .stacktrace import StackFrame, StackTrace, capture_stack_trace
from .types import (
    Error,
    SupportsError,
    as_error,
    get_validation_errors,
    is_wrapped,
    new_error,
    new_with_location,
    root_category,
    root_cause,
    wrap,
)
from .validation import FieldError, ValidationErrors
from .collector import ErrorCollector

__all__ = [
    "Category",
    "Error",
    "ErrorCollector",
    "ErrorLocation",
    "ErrorMapper",
    "ErrorRecord",
    "ErrorResponse",
    "FieldError",
    "LocationCapture",
    "RetryableError",
    "Severity",
    "StackFrame",
    "StackTrace",
    "SupportsError",
    "SupportsRetryable",
    "SupportsStatusCode",
    "ValidationErrors",
    "as_error",
    "capture_stack_trace",
    "codes",
    "current_location_capture",
    "default_error_mappers",
    "from_pydantic_validation",
    "get_validation_errors",
    "here",
    "is_auth",
    "is_category",
    "is_internal",
    "is_location_capture_enabled",
    "is_not_found",
    "is_retryable_error",
    "is_validation",
    "is_wrapped",
    "location_capture",
    "map_auth_errors",
    "map_builtin_exceptions",
    "map_http_status_errors",
    "map_onboarding_errors",
    "map_to_error",
    "new_critical",
    "new_debug",
    "new_error",
    "new_fatal",
    "new_info",
    "new_non_retryable",
    "new_retryable",
    "new_retryable_external",
    "new_retryable_operation",
    "new_validation",
    "new_validation_from_groups",
    "new_validation_from_map",
    "new_warning",
    "new_with_location",
    "root_category",
    "root_cause",
    "set_location_capture",
    "validate_with_pydantic",
    "wrap",
    "wrap_retryable",
]
