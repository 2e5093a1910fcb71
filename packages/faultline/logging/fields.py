"""Canonical logging field names.

These constants define a stable key set for structured logs and context
propagation, so error attributes look the same wherever they are emitted.
"""

TIMESTAMP = "timestamp"
LEVEL = "level"
LOGGER = "logger"
MESSAGE = "message"

# Structured error fields.
ERROR_CODE = "error_code"
TEXT_CODE = "text_code"
CATEGORY = "category"
SEVERITY = "severity"
CORRELATION_ID = "correlation_id"
VALIDATION_ERRORS = "validation_errors"
METADATA = "metadata"

# Collector fields.
ERROR_INDEX = "error_index"
ERROR_COUNT = "error_count"
MAX_ERRORS = "max_errors"
STRICT_MODE = "strict_mode"
CATEGORY_STATS = "category_stats"
SEVERITY_STATS = "severity_stats"
MOST_COMMON_CATEGORY = "most_common_category"
VALIDATION_ERROR_COUNT = "validation_error_count"
RETRYABLE_ERROR_COUNT = "retryable_error_count"

# Common service-level fields.
SERVICE = "service"
ENVIRONMENT = "environment"
