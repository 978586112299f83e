"""Error taxonomy: kinds, stable codes, and retry policy tables.

The taxonomy is closed. Every failure the client can observe is mapped onto
exactly one ``ErrorKind``; each kind has a default ``ErrorCode`` and a fixed
retryability.
"""

from enum import Enum
from typing import Dict, FrozenSet


class ErrorKind(str, Enum):
    """Closed set of failure categories."""

    NETWORK = "NetworkError"
    TIMEOUT = "TimeoutError"
    CONNECTION = "ConnectionError"
    AUTHENTICATION = "AuthenticationError"
    AUTHORIZATION = "AuthorizationError"
    VALIDATION = "ValidationError"
    NOT_FOUND = "NotFoundError"
    CONFLICT = "ConflictError"
    RATE_LIMIT = "RateLimitError"
    SERVER = "ServerError"
    BUSINESS = "BusinessError"
    UNKNOWN_HTTP = "UnknownHttpError"
    UNKNOWN = "UnknownError"


class ErrorCode(str, Enum):
    """Stable machine-readable error codes."""

    NETWORK_ERROR = "NETWORK_ERROR"
    TIMEOUT_ERROR = "TIMEOUT_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    AUTHENTICATION_ERROR = "AUTHENTICATION_ERROR"
    AUTHORIZATION_ERROR = "AUTHORIZATION_ERROR"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"
    RESOURCE_ALREADY_EXISTS = "RESOURCE_ALREADY_EXISTS"
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


KIND_DEFAULT_CODES: Dict[ErrorKind, ErrorCode] = {
    ErrorKind.NETWORK: ErrorCode.NETWORK_ERROR,
    ErrorKind.TIMEOUT: ErrorCode.TIMEOUT_ERROR,
    ErrorKind.CONNECTION: ErrorCode.CONNECTION_ERROR,
    ErrorKind.AUTHENTICATION: ErrorCode.AUTHENTICATION_ERROR,
    ErrorKind.AUTHORIZATION: ErrorCode.AUTHORIZATION_ERROR,
    ErrorKind.VALIDATION: ErrorCode.VALIDATION_ERROR,
    ErrorKind.NOT_FOUND: ErrorCode.RESOURCE_NOT_FOUND,
    ErrorKind.CONFLICT: ErrorCode.RESOURCE_ALREADY_EXISTS,
    ErrorKind.RATE_LIMIT: ErrorCode.RATE_LIMIT_EXCEEDED,
    ErrorKind.SERVER: ErrorCode.INTERNAL_SERVER_ERROR,
    ErrorKind.BUSINESS: ErrorCode.UNKNOWN_ERROR,
    ErrorKind.UNKNOWN_HTTP: ErrorCode.UNKNOWN_ERROR,
    ErrorKind.UNKNOWN: ErrorCode.UNKNOWN_ERROR,
}

RETRYABLE_KINDS: FrozenSet[ErrorKind] = frozenset(
    {
        ErrorKind.NETWORK,
        ErrorKind.TIMEOUT,
        ErrorKind.CONNECTION,
        ErrorKind.SERVER,
        ErrorKind.RATE_LIMIT,
    }
)

# Remote envelope ``code`` -> stable code for BusinessError.
BUSINESS_CODE_MAP: Dict[int, ErrorCode] = {
    400: ErrorCode.VALIDATION_ERROR,
    401: ErrorCode.AUTHENTICATION_ERROR,
    403: ErrorCode.AUTHORIZATION_ERROR,
    404: ErrorCode.RESOURCE_NOT_FOUND,
    409: ErrorCode.RESOURCE_ALREADY_EXISTS,
    429: ErrorCode.RATE_LIMIT_EXCEEDED,
    500: ErrorCode.INTERNAL_SERVER_ERROR,
}

SERVER_ERROR_STATUSES: FrozenSet[int] = frozenset({500, 502, 503, 504})


def is_retryable_kind(kind: ErrorKind) -> bool:
    return kind in RETRYABLE_KINDS


def business_code_for(remote_code: object) -> ErrorCode:
    """Map a remote envelope code onto a stable error code."""
    if isinstance(remote_code, bool):
        return ErrorCode.UNKNOWN_ERROR
    try:
        return BUSINESS_CODE_MAP.get(int(remote_code), ErrorCode.UNKNOWN_ERROR)  # type: ignore[call-overload]
    except (TypeError, ValueError):
        return ErrorCode.UNKNOWN_ERROR
