"""Shared error code constants.

Text codes are stable machine-readable identifiers attached to errors by the
mapper chain. Numeric codes mirror the HTTP statuses the mappers assign.
Service-specific codes should live in service modules rather than extending
this set for one domain.
"""

from http import HTTPStatus

# HTTP status codes
CODE_BAD_REQUEST = int(HTTPStatus.BAD_REQUEST)
CODE_UNAUTHORIZED = int(HTTPStatus.UNAUTHORIZED)
CODE_FORBIDDEN = int(HTTPStatus.FORBIDDEN)
CODE_NOT_FOUND = int(HTTPStatus.NOT_FOUND)
CODE_METHOD_NOT_ALLOWED = int(HTTPStatus.METHOD_NOT_ALLOWED)
CODE_REQUEST_TIMEOUT = int(HTTPStatus.REQUEST_TIMEOUT)
CODE_CONFLICT = int(HTTPStatus.CONFLICT)
CODE_GONE = int(HTTPStatus.GONE)
CODE_UNPROCESSABLE = 422
CODE_TOO_MANY_REQUESTS = int(HTTPStatus.TOO_MANY_REQUESTS)
CODE_INTERNAL = int(HTTPStatus.INTERNAL_SERVER_ERROR)
CODE_BAD_GATEWAY = int(HTTPStatus.BAD_GATEWAY)
CODE_SERVICE_UNAVAILABLE = int(HTTPStatus.SERVICE_UNAVAILABLE)
CODE_GATEWAY_TIMEOUT = int(HTTPStatus.GATEWAY_TIMEOUT)

# Validation
VALIDATION_ERROR = "VALIDATION_ERROR"
INVALID_ARGUMENT = "INVALID_ARGUMENT"

# Not found / conflict
RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
CONFLICT = "CONFLICT"

# Authentication
UNAUTHORIZED = "UNAUTHORIZED"
TOKEN_EXPIRED = "TOKEN_EXPIRED"
TOKEN_MALFORMED = "TOKEN_MALFORMED"
TOO_MANY_ATTEMPTS = "TOO_MANY_ATTEMPTS"
ACCOUNT_SUSPENDED = "ACCOUNT_SUSPENDED"
ACCOUNT_DISABLED = "ACCOUNT_DISABLED"
ACCOUNT_ARCHIVED = "ACCOUNT_ARCHIVED"
ACCOUNT_PENDING = "ACCOUNT_PENDING"
ACCOUNT_LOCKED = "ACCOUNT_LOCKED"
PERMISSION_DENIED = "PERMISSION_DENIED"

# Onboarding
INVITE_EXPIRED = "INVITE_EXPIRED"
INVITE_USED = "INVITE_USED"
TOKEN_ALREADY_USED = "TOKEN_ALREADY_USED"
RESET_NOT_ALLOWED = "RESET_NOT_ALLOWED"
RESET_RATE_LIMIT = "RESET_RATE_LIMIT"
VERIFICATION_REQUIRED = "VERIFICATION_REQUIRED"
VERIFICATION_EXPIRED = "VERIFICATION_EXPIRED"
FEATURE_DISABLED = "FEATURE_DISABLED"

# Dependency / external system
EXTERNAL_SERVICE_ERROR = "EXTERNAL_SERVICE_ERROR"
DEPENDENCY_TIMEOUT = "DEPENDENCY_TIMEOUT"
DEPENDENCY_UNAVAILABLE = "DEPENDENCY_UNAVAILABLE"

# Internal
UNEXPECTED_ERROR = "UNEXPECTED_ERROR"
