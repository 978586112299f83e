"""Classified error types.

``ClassifiedError`` is the single normalized representation of any failure
observed while executing a short-link operation. ``ConfigurationError`` is
raised only while loading startup configuration.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from dwz_mcp.core.errors.kinds import (
    KIND_DEFAULT_CODES,
    ErrorCode,
    ErrorKind,
    is_retryable_kind,
)


class ClassifiedError(Exception):
    """A failure tagged with one taxonomy kind.

    Instances are immutable once constructed: kind, code, message, details
    and retryable are exposed as read-only properties.

    Attributes:
        kind: Taxonomy member describing the failure.
        code: Stable error code (defaults from the kind).
        message: Human-readable, secret-redacted message.
        details: Optional structured payload (field errors, resource id, ...).
        retryable: Whether reissuing the same request may succeed.
    """

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        code: Optional[ErrorCode] = None,
        details: Optional[Any] = None,
    ):
        super().__init__(message)
        self._kind = ErrorKind(kind)
        self._code = ErrorCode(code) if code is not None else KIND_DEFAULT_CODES[self._kind]
        self._message = message
        self._details = details

    @property
    def kind(self) -> ErrorKind:
        return self._kind

    @property
    def code(self) -> ErrorCode:
        return self._code

    @property
    def message(self) -> str:
        return self._message

    @property
    def details(self) -> Optional[Any]:
        return self._details

    @property
    def retryable(self) -> bool:
        return is_retryable_kind(self._kind)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the ``error`` member of a tool result envelope."""
        return {
            "kind": self._kind.value,
            "code": self._code.value,
            "message": self._message,
            "details": self._details,
        }

    def __repr__(self) -> str:
        return f"ClassifiedError(kind={self._kind.value!r}, code={self._code.value!r}, message={self._message!r})"


class ConfigurationError(ValueError):
    """Startup configuration is missing or invalid.

    Attributes:
        field: Name of the offending configuration field, when known.
        code: Always ``CONFIGURATION_ERROR``.
    """

    code = ErrorCode.CONFIGURATION_ERROR

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field
