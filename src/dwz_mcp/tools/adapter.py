"""Tool adapter: the boundary where every failure becomes an envelope.

``invoke`` runs one operation and always returns a serialized
``ToolResult``; nothing above this layer ever observes a raised error.
"""

from __future__ import annotations

import logging
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

from dwz_mcp.core.errors import ErrorKind, classify
from dwz_mcp.core.responses import error_result, success_result

logger = logging.getLogger(__name__)

OperationFn = Callable[[Mapping[str, Any]], Awaitable[Any]]


async def invoke(
    operation_fn: OperationFn,
    args: Optional[Mapping[str, Any]] = None,
    *,
    operation: Optional[str] = None,
    meta: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """Run *operation_fn* and wrap its outcome in a result envelope.

    Args:
        operation_fn: Coroutine function taking the raw argument mapping.
        args: Raw tool arguments.
        operation: Operation name recorded in ``meta.operation``.
        meta: Extra metadata merged into ``meta``.

    Returns:
        ``{"success": True, "data", "meta"}`` or
        ``{"success": False, "error", "meta"}``. Never raises ``Exception``.
    """
    name = operation or getattr(operation_fn, "__name__", "operation")
    try:
        data = await operation_fn(args or {})
    except Exception as exc:
        error = classify(exc)
        if error.kind is ErrorKind.UNKNOWN:
            logger.exception("Unclassified failure in %s", name)
        else:
            logger.warning("%s failed: [%s] %s", name, error.code.value, error.message)
        return error_result(error, operation=name, meta=meta).to_dict()
    return success_result(data, operation=name, meta=meta).to_dict()
