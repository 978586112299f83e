"""Tool result envelopes."""

from dwz_mcp.core.responses.builders import error_result, success_result
from dwz_mcp.core.responses.types import ToolResult

__all__ = ["ToolResult", "error_result", "success_result"]
