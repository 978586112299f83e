"""Core building blocks for the dwz-mcp client.

Submodules are imported explicitly by callers; nothing is re-exported here
so that importing ``dwz_mcp.core`` stays cheap.
"""
