"""Command line interface for dwz-mcp."""

from dwz_mcp.cli.main import cli

__all__ = ["cli"]
