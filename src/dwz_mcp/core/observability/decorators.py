"""MCP tool decorator with logging and audit trails."""

import functools
import logging
import time
from typing import Any, Callable, Optional, TypeVar

from dwz_mcp.core.context import (
    generate_correlation_id,
    get_correlation_id,
    request_context,
)
from dwz_mcp.core.observability.audit import _audit

logger = logging.getLogger(__name__)

T = TypeVar("T")


def mcp_tool(tool_name: Optional[str] = None, audit: bool = True) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Decorator for async MCP tool handlers with observability.

    Automatically:
    - Establishes a correlation id for the call
    - Logs start and finish with duration
    - Creates an audit log entry

    A handler that returns a result envelope (``{"success": False, ...}``)
    is recorded as failed even though it did not raise.

    Args:
        tool_name: Override tool name (defaults to function name)
        audit: Whether to create audit log entries
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        name = tool_name or func.__name__

        @functools.wraps(func)
        async def async_wrapper(*args: Any, **kwargs: Any) -> T:
            existing_corr_id = get_correlation_id()
            if existing_corr_id:
                return await _invoke(existing_corr_id, *args, **kwargs)
            with request_context(generate_correlation_id(prefix="tool")) as corr_id:
                return await _invoke(corr_id, *args, **kwargs)

        async def _invoke(_corr_id: str, *args: Any, **kwargs: Any) -> T:
            start = time.perf_counter()
            success = True
            error_msg = None
            logger.debug("Tool %s started (correlation_id=%s)", name, _corr_id)
            try:
                result = await func(*args, **kwargs)  # type: ignore[misc]
                if isinstance(result, dict) and result.get("success") is False:
                    success = False
                    error = result.get("error") or {}
                    error_msg = error.get("message") if isinstance(error, dict) else str(error)
                return result
            except Exception as e:
                success = False
                error_msg = str(e)
                raise
            finally:
                duration_ms = (time.perf_counter() - start) * 1000
                logger.info(
                    "Tool %s finished: success=%s duration_ms=%.2f",
                    name,
                    success,
                    duration_ms,
                )
                if audit:
                    _audit.tool_invocation(
                        tool_name=name,
                        success=success,
                        duration_ms=round(duration_ms, 2),
                        error=error_msg,
                        correlation_id=_corr_id,
                    )

        return async_wrapper  # type: ignore[return-value]

    return decorator
