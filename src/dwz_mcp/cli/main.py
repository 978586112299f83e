"""dwz-mcp command line interface.

Commands:
    serve        Run the MCP server over stdio
    show-config  Print the effective configuration (API key masked)
    health       Probe the remote short-link service
    call         Invoke one tool and print its result envelope
"""

import asyncio
import json
import logging
from typing import Any, Dict, Optional

import click

from dwz_mcp import __version__
from dwz_mcp.cli.output import emit, emit_error, emit_success
from dwz_mcp.config import ConfigurationError, ServerConfig
from dwz_mcp.core.shortlinks import ShortLinkService
from dwz_mcp.server import create_server, load_config
from dwz_mcp.tools import TOOL_OPERATIONS, dispatch_tool

logger = logging.getLogger(__name__)


def _load(ctx: click.Context, *, validate: bool = True) -> ServerConfig:
    config_file = ctx.obj.get("config_file")
    try:
        if validate:
            return load_config(config_file)
        return ServerConfig.from_env(config_file)
    except ConfigurationError as e:
        emit_error(str(e), code=e.code.value, details={"field": e.field})


async def _service_status(config: ServerConfig) -> Dict[str, Any]:
    service = ShortLinkService(config)
    try:
        return await service.get_service_status()
    finally:
        await service.aclose()


async def _call_tool(config: ServerConfig, name: str, arguments: Dict[str, Any]) -> Dict[str, Any]:
    service = ShortLinkService(config)
    try:
        return await dispatch_tool(service, name, arguments)
    finally:
        await service.aclose()


@click.group()
@click.version_option(__version__, prog_name="dwz-mcp")
@click.option(
    "--config-file",
    type=click.Path(dir_okay=False),
    envvar="DWZ_MCP_CONFIG_FILE",
    help="TOML config file (overrides ./dwz-mcp.toml and the XDG config).",
)
@click.pass_context
def cli(ctx: click.Context, config_file: Optional[str]) -> None:
    """Short-URL management tools for MCP clients."""
    ctx.ensure_object(dict)
    ctx.obj["config_file"] = config_file


@cli.command("serve")
@click.option("--skip-health-check", is_flag=True, help="Do not probe the remote service at startup.")
@click.pass_context
def serve_cmd(ctx: click.Context, skip_health_check: bool) -> None:
    """Run the MCP server over stdio."""
    config = _load(ctx)
    config.setup_logging()

    if not skip_health_check:
        status = asyncio.run(_service_status(config))
        if status["status"] != "healthy":
            logger.warning(
                "Remote service unhealthy at startup (%s): %s",
                status.get("error_code"),
                status.get("message"),
            )
        else:
            logger.info("Remote service healthy")

    create_server(config).run()


@cli.command("show-config")
@click.pass_context
def show_config_cmd(ctx: click.Context) -> None:
    """Print the effective configuration with the API key masked."""
    config = _load(ctx, validate=False)
    emit_success(config.debug_view())


@cli.command("health")
@click.pass_context
def health_cmd(ctx: click.Context) -> None:
    """Probe the remote service; exit 1 when it is unhealthy."""
    config = _load(ctx)
    status = asyncio.run(_service_status(config))
    emit({"success": status["status"] == "healthy", "data": status})
    if status["status"] != "healthy":
        ctx.exit(1)


@cli.command("call")
@click.argument("tool_name", type=click.Choice(sorted(TOOL_OPERATIONS)))
@click.option("--args", "raw_args", default="{}", show_default=True, help="Tool arguments as a JSON object.")
@click.pass_context
def call_cmd(ctx: click.Context, tool_name: str, raw_args: str) -> None:
    """Invoke TOOL_NAME and print its result envelope."""
    try:
        arguments = json.loads(raw_args)
    except json.JSONDecodeError as e:
        raise click.BadParameter(f"not valid JSON: {e}", param_hint="--args") from e
    if not isinstance(arguments, dict):
        raise click.BadParameter("must be a JSON object", param_hint="--args")

    config = _load(ctx)
    result = asyncio.run(_call_tool(config, tool_name, arguments))
    emit(result)
    if not result["success"]:
        ctx.exit(1)


if __name__ == "__main__":
    cli()
