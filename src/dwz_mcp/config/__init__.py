"""Configuration for the dwz-mcp server."""

from dwz_mcp.config.loader import CONFIG_FILE_ENV_VAR
from dwz_mcp.config.server import ServerConfig
from dwz_mcp.core.errors.classified import ConfigurationError

__all__ = ["CONFIG_FILE_ENV_VAR", "ConfigurationError", "ServerConfig"]
