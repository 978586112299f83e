"""Tool result envelope type.

Every tool call returns exactly one of two shapes::

    {"success": true,  "data": ...,                                   "meta": {...}}
    {"success": false, "error": {"kind", "code", "message", "details"}, "meta": {...}}
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass(frozen=True)
class ToolResult:
    """
    Result envelope returned to the MCP protocol layer.

    Attributes:
        success: Whether the operation completed successfully
        data: Operation payload when success is True (may itself be None)
        error: Serialized ``ClassifiedError`` when success is False
        meta: Response metadata (operation, timestamp, request_id)
    """

    success: bool
    data: Any = None
    error: Optional[Dict[str, Any]] = None
    meta: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if self.success and self.error is not None:
            raise ValueError("a successful ToolResult cannot carry an error")
        if not self.success and self.error is None:
            raise ValueError("a failed ToolResult must carry an error")
        if not self.success and self.data is not None:
            raise ValueError("a failed ToolResult cannot carry data")

    def to_dict(self) -> Dict[str, Any]:
        """Serialize with exactly one of ``data`` / ``error`` present."""
        result: Dict[str, Any] = {"success": self.success}
        if self.success:
            result["data"] = self.data
        else:
            result["error"] = dict(self.error or {})
        result["meta"] = dict(self.meta)
        return result
