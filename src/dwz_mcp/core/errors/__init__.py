"""Error taxonomy and classification for dwz-mcp."""

from dwz_mcp.core.errors.classified import ClassifiedError, ConfigurationError
from dwz_mcp.core.errors.classifier import (
    business_error,
    classify,
    classify_response,
    field_errors,
    validation_error,
)
from dwz_mcp.core.errors.kinds import (
    BUSINESS_CODE_MAP,
    KIND_DEFAULT_CODES,
    RETRYABLE_KINDS,
    ErrorCode,
    ErrorKind,
    business_code_for,
    is_retryable_kind,
)

__all__ = [
    "BUSINESS_CODE_MAP",
    "KIND_DEFAULT_CODES",
    "RETRYABLE_KINDS",
    "ClassifiedError",
    "ConfigurationError",
    "ErrorCode",
    "ErrorKind",
    "business_code_for",
    "business_error",
    "classify",
    "classify_response",
    "field_errors",
    "is_retryable_kind",
    "validation_error",
]
