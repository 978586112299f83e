"""dwz-mcp server entry point.

Builds a FastMCP server exposing the short-link tools and runs it over stdio.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from mcp.server.fastmcp import FastMCP

from dwz_mcp.config import ConfigurationError, ServerConfig
from dwz_mcp.core.observability import audit_log
from dwz_mcp.core.shortlinks import ShortLinkService
from dwz_mcp.tools import register_shortlink_tools

logger = logging.getLogger(__name__)


def load_config(config_file: Optional[str] = None) -> ServerConfig:
    """Load and validate configuration.

    Raises:
        ConfigurationError: If configuration cannot be parsed or is incomplete.
    """
    config = ServerConfig.from_env(config_file)
    config.validate()
    audit_log(
        "config_loaded",
        base_url=config.base_url,
        api_version=config.api_version,
        max_retries=config.max_retries,
        request_timeout_ms=config.request_timeout_ms,
    )
    return config


def create_server(config: ServerConfig, service: Optional[ShortLinkService] = None) -> FastMCP:
    """
    Create and configure the FastMCP server.

    Args:
        config: Validated server configuration
        service: Optional pre-built service (defaults to one built from config)

    Returns:
        Configured FastMCP server instance
    """
    shortlinks = service or ShortLinkService(config)

    @asynccontextmanager
    async def lifespan(_server: FastMCP) -> AsyncIterator[None]:
        try:
            yield
        finally:
            await shortlinks.aclose()
            logger.info("Short-link HTTP pool closed")

    mcp = FastMCP(name=config.server_name, lifespan=lifespan)
    register_shortlink_tools(mcp, shortlinks)

    logger.info(f"Server created: {config.server_name} v{config.server_version}")
    return mcp


def main() -> None:
    """Main entry point for the dwz-mcp server."""
    try:
        config = load_config()
    except ConfigurationError as e:
        print(f"dwz-mcp: configuration error: {e}", file=sys.stderr)
        sys.exit(1)

    config.setup_logging()
    server = create_server(config)
    logger.info(f"Starting {config.server_name} v{config.server_version} against {config.base_url}")
    server.run()


if __name__ == "__main__":
    main()
