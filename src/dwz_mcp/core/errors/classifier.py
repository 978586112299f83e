"""Map raw failures onto the closed error taxonomy.

Rules are evaluated in order and the first match wins:

1. An existing ``ClassifiedError`` is returned unchanged.
2. Timeouts (``httpx.TimeoutException``, ``TimeoutError``) -> TimeoutError.
3. Refused/unresolvable connections -> ConnectionError.
4. Any other transport failure -> NetworkError.
5. ``httpx.HTTPStatusError`` -> per-status rules (400, 401, 403, 404, 409,
   429, 5xx, other).
6. ``pydantic.ValidationError`` -> ValidationError with per-field entries.
7. Everything else -> UnknownError.

Remote envelopes with ``code != 0`` are classified by :func:`business_error`.
"""

from __future__ import annotations

import logging
import socket
from typing import Any, Dict, List, Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from dwz_mcp.core.errors.classified import ClassifiedError
from dwz_mcp.core.errors.kinds import (
    SERVER_ERROR_STATUSES,
    ErrorKind,
    business_code_for,
)
from dwz_mcp.core.observability.redaction import redact_secrets

logger = logging.getLogger(__name__)

_STATUS_KINDS: Dict[int, ErrorKind] = {
    400: ErrorKind.VALIDATION,
    401: ErrorKind.AUTHENTICATION,
    403: ErrorKind.AUTHORIZATION,
    404: ErrorKind.NOT_FOUND,
    409: ErrorKind.CONFLICT,
    429: ErrorKind.RATE_LIMIT,
}

_STATUS_MESSAGES: Dict[ErrorKind, str] = {
    ErrorKind.VALIDATION: "Request parameters were rejected by the remote service",
    ErrorKind.AUTHENTICATION: "Authentication failed, check the API key",
    ErrorKind.AUTHORIZATION: "Insufficient permissions for this operation",
    ErrorKind.NOT_FOUND: "The requested resource does not exist",
    ErrorKind.CONFLICT: "The resource already exists",
    ErrorKind.RATE_LIMIT: "Request rate limit exceeded, retry later",
    ErrorKind.SERVER: "The remote service encountered an internal error",
}


def classify(exc: BaseException, *, resource_id: Optional[Any] = None) -> ClassifiedError:
    """Classify *exc* into a ``ClassifiedError``.

    Args:
        exc: The raw failure.
        resource_id: Identifier of the resource the request targeted, used
            to enrich NotFoundError details.

    Returns:
        The classified error. Never raises.
    """
    if isinstance(exc, ClassifiedError):
        return exc

    if isinstance(exc, (httpx.TimeoutException, TimeoutError)):
        return ClassifiedError(
            ErrorKind.TIMEOUT,
            f"Request timed out: {_describe(exc)}",
        )

    if isinstance(exc, (httpx.ConnectError, ConnectionRefusedError, socket.gaierror)):
        return ClassifiedError(
            ErrorKind.CONNECTION,
            f"Unable to connect to the remote service: {_describe(exc)}",
        )

    if isinstance(exc, (httpx.TransportError, OSError)):
        return ClassifiedError(
            ErrorKind.NETWORK,
            f"Network error: {_describe(exc)}",
        )

    if isinstance(exc, httpx.HTTPStatusError):
        return classify_response(exc.response, resource_id=resource_id)

    if isinstance(exc, PydanticValidationError):
        return validation_error(exc)

    return ClassifiedError(
        ErrorKind.UNKNOWN,
        redact_secrets(str(exc)) or "Unexpected error",
        details={
            "error_type": type(exc).__name__,
            "original_error": redact_secrets(str(exc)),
        },
    )


def classify_response(response: httpx.Response, *, resource_id: Optional[Any] = None) -> ClassifiedError:
    """Classify a non-success HTTP response by status code."""
    status = response.status_code
    body = _json_body(response)
    remote_message = _remote_message(body)

    kind = _STATUS_KINDS.get(status)
    if kind is None and status in SERVER_ERROR_STATUSES:
        kind = ErrorKind.SERVER

    if kind is None:
        return ClassifiedError(
            ErrorKind.UNKNOWN_HTTP,
            remote_message or f"HTTP {status}: {response.reason_phrase or 'unexpected status'}",
            details={"status": status},
        )

    message = remote_message or _STATUS_MESSAGES[kind]
    details: Optional[Dict[str, Any]]
    if kind is ErrorKind.VALIDATION:
        details = {"status": status}
        if isinstance(body, dict) and body.get("details") is not None:
            details["details"] = body["details"]
    elif kind is ErrorKind.NOT_FOUND:
        details = {"status": status, "resource": "short_link"}
        if resource_id is not None:
            details["id"] = resource_id
    elif kind is ErrorKind.RATE_LIMIT:
        details = {"status": status}
        retry_after = parse_retry_after(response)
        if retry_after is not None:
            details["retry_after"] = retry_after
    else:
        details = {"status": status}

    return ClassifiedError(kind, message, details=details)


def business_error(remote_code: Any, message: Optional[str]) -> ClassifiedError:
    """Classify a remote envelope whose ``code`` is non-zero.

    Business errors are never retryable: the remote service already ran the
    business logic.
    """
    return ClassifiedError(
        ErrorKind.BUSINESS,
        redact_secrets(str(message)) if message else "Remote service reported a failure",
        code=business_code_for(remote_code),
        details={"remote_code": remote_code},
    )


def validation_error(exc: PydanticValidationError) -> ClassifiedError:
    """Convert a pydantic validation failure into a field-level ValidationError."""
    entries = field_errors(exc)
    summary = "; ".join(f"{e['field']}: {e['message']}" for e in entries)
    return ClassifiedError(
        ErrorKind.VALIDATION,
        f"Parameter validation failed: {summary}" if summary else "Parameter validation failed",
        details=entries,
    )


def field_errors(exc: PydanticValidationError) -> List[Dict[str, Any]]:
    """Return one ``{field, message, value}`` entry per invalid field."""
    entries: List[Dict[str, Any]] = []
    for err in exc.errors(include_url=False, include_context=False):
        loc = ".".join(str(part) for part in err.get("loc", ())) or "__root__"
        message = str(err.get("msg", "invalid value"))
        # pydantic prefixes custom validator messages with "Value error, "
        if message.startswith("Value error, "):
            message = message[len("Value error, ") :]
        value = err.get("input")
        if loc == "__root__" or isinstance(value, dict):
            value = None
        entries.append({"field": loc, "message": message, "value": value})
    return entries


def parse_retry_after(response: httpx.Response) -> Optional[float]:
    """Parse a numeric ``Retry-After`` header, or return ``None``."""
    retry_after = response.headers.get("Retry-After")
    if retry_after:
        try:
            return float(retry_after)
        except ValueError:
            pass
    return None


def _json_body(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _remote_message(body: Any) -> Optional[str]:
    if not isinstance(body, dict):
        return None
    error_field = body.get("error")
    if isinstance(error_field, dict) and error_field.get("message"):
        return redact_secrets(str(error_field["message"]))
    if isinstance(error_field, str) and error_field:
        return redact_secrets(error_field)
    message = body.get("message")
    if message:
        return redact_secrets(str(message))
    return None


def _describe(exc: BaseException) -> str:
    text = str(exc)
    return redact_secrets(text) if text else type(exc).__name__
