"""ServerConfig dataclass.

This module defines the immutable ``ServerConfig`` (field declarations and
simple accessors). Loading lives in ``loader.py`` via the
``_ServerConfigLoader`` mixin.

A config is built once at startup and passed by reference to every
component that needs it. Nothing outside the loader reads the environment.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import asdict, dataclass, field
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as get_package_version
from typing import Any, Dict
from urllib.parse import urlparse

from dwz_mcp.config.loader import _ServerConfigLoader
from dwz_mcp.core.errors.classified import ConfigurationError

logger = logging.getLogger(__name__)

_LOG_HANDLER_NAME = "dwz_mcp_stderr"


def _get_version() -> str:
    """Get package version from metadata (single source of truth: pyproject.toml)."""
    try:
        return get_package_version("dwz-mcp")
    except PackageNotFoundError:
        return "0.3.0"


@dataclass(frozen=True)
class ServerConfig(_ServerConfigLoader):
    """Server configuration, read-only for the process lifetime."""

    # Remote short-link service
    base_url: str = ""
    api_key: str = ""
    api_version: str = "v1"

    # Request execution (milliseconds)
    request_timeout_ms: int = 10000
    max_retries: int = 3
    retry_delay_ms: int = 1000

    # Server identity
    server_name: str = "dwz-mcp"
    server_version: str = field(default_factory=_get_version)

    # Logging
    log_level: str = "INFO"
    structured_logging: bool = True

    def validate(self) -> None:
        """Refuse configurations the client cannot run with.

        Raises:
            ConfigurationError: If the base URL or API key is missing, or the
                base URL is not an absolute http(s) URL.
        """
        if not self.base_url:
            raise ConfigurationError("REMOTE_BASE_URL is required", field="base_url")
        if not self.api_key:
            raise ConfigurationError("REMOTE_API_KEY is required", field="api_key")
        parsed = urlparse(self.base_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ConfigurationError(
                f"REMOTE_BASE_URL must be an absolute http(s) URL, got {self.base_url!r}",
                field="base_url",
            )
        if not self.api_version:
            raise ConfigurationError("API_VERSION must not be empty", field="api_version")

    @property
    def request_timeout_seconds(self) -> float:
        return self.request_timeout_ms / 1000.0

    @property
    def user_agent(self) -> str:
        return f"{self.server_name}/{self.server_version}"

    def api_url(self, endpoint: str) -> str:
        """Join base URL, ``/api/{version}`` and *endpoint*."""
        if not endpoint.startswith("/"):
            endpoint = f"/{endpoint}"
        return f"{self.base_url.rstrip('/')}/api/{self.api_version}{endpoint}"

    def default_headers(self) -> Dict[str, str]:
        """Headers sent on every remote request."""
        headers = {
            "Content-Type": "application/json",
            "User-Agent": self.user_agent,
        }
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    def debug_view(self) -> Dict[str, Any]:
        """Return every field with the API key masked, for diagnostics."""
        view = asdict(self)
        view["api_key"] = "***configured***" if self.api_key else "not configured"
        return view

    def setup_logging(self) -> None:
        """Configure logging based on settings.

        Logs go to stderr: stdout carries the MCP stdio protocol.
        """
        level = getattr(logging, self.log_level, logging.INFO)

        if self.structured_logging:
            # JSON-style structured logging
            formatter = logging.Formatter(
                '{"timestamp":"%(asctime)s","level":"%(levelname)s","logger":"%(name)s","message":"%(message)s"}'
            )
        else:
            formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")

        handler = logging.StreamHandler(sys.stderr)
        handler.set_name(_LOG_HANDLER_NAME)
        handler.setFormatter(formatter)

        root_logger = logging.getLogger("dwz_mcp")
        root_logger.setLevel(level)
        for existing in list(root_logger.handlers):
            if existing.get_name() == _LOG_HANDLER_NAME:
                root_logger.removeHandler(existing)
        root_logger.addHandler(handler)
