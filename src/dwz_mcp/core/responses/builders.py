"""Builders for tool result envelopes."""

from datetime import datetime, timezone
from typing import Any, Dict, Mapping, Optional

from dwz_mcp.core.context import get_correlation_id
from dwz_mcp.core.errors.classified import ClassifiedError
from dwz_mcp.core.responses.types import ToolResult


def _build_meta(
    *,
    operation: Optional[str] = None,
    request_id: Optional[str] = None,
    extra: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """Construct the ``meta`` member of an envelope.

    Args:
        operation: Tool/operation name
        request_id: Explicit correlation ID (defaults to the one in context)
        extra: Arbitrary extra metadata to merge
    """
    meta: Dict[str, Any] = {
        "operation": operation,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    effective_request_id = request_id or get_correlation_id() or None
    if effective_request_id:
        meta["request_id"] = effective_request_id
    if extra:
        meta.update(dict(extra))
    return meta


def success_result(
    data: Any = None,
    *,
    operation: Optional[str] = None,
    request_id: Optional[str] = None,
    meta: Optional[Mapping[str, Any]] = None,
) -> ToolResult:
    """Create a success envelope carrying *data*."""
    return ToolResult(
        success=True,
        data=data,
        meta=_build_meta(operation=operation, request_id=request_id, extra=meta),
    )


def error_result(
    error: ClassifiedError,
    *,
    operation: Optional[str] = None,
    request_id: Optional[str] = None,
    meta: Optional[Mapping[str, Any]] = None,
) -> ToolResult:
    """Create a failure envelope from a classified error.

    Example:
        >>> error_result(
        ...     ClassifiedError(ErrorKind.NOT_FOUND, "Short link 7 not found"),
        ...     operation="get_url_info",
        ... ).to_dict()["error"]["code"]
        'RESOURCE_NOT_FOUND'
    """
    return ToolResult(
        success=False,
        error=error.to_dict(),
        meta=_build_meta(operation=operation, request_id=request_id, extra=meta),
    )
