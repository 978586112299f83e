"""MCP tools exposed by the dwz-mcp server."""

from dwz_mcp.tools.adapter import invoke
from dwz_mcp.tools.shortlinks import (
    TOOL_OPERATIONS,
    ToolOperation,
    dispatch_tool,
    register_shortlink_tools,
)

__all__ = [
    "TOOL_OPERATIONS",
    "ToolOperation",
    "dispatch_tool",
    "invoke",
    "register_shortlink_tools",
]
