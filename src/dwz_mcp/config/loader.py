"""ServerConfig loading logic.

Provides ``_ServerConfigLoader``, a mixin whose classmethods are inherited by
``ServerConfig`` (defined in ``server.py``). Loading collects raw values from
TOML files and the environment into a plain dict, parses them, and only then
constructs the frozen config, so a ``ServerConfig`` is never mutated after
construction.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Any, Dict, Mapping, Optional, Tuple

from dwz_mcp.config.parsing import _parse_bool, _parse_int, _parse_log_level
from dwz_mcp.core.errors.classified import ConfigurationError

if TYPE_CHECKING:
    from dwz_mcp.config.server import ServerConfig

logger = logging.getLogger(__name__)

CONFIG_FILE_ENV_VAR = "DWZ_MCP_CONFIG_FILE"
PROJECT_CONFIG_NAME = "dwz-mcp.toml"

# field name -> environment variable
_ENV_VARS: Dict[str, str] = {
    "base_url": "REMOTE_BASE_URL",
    "api_key": "REMOTE_API_KEY",
    "api_version": "API_VERSION",
    "request_timeout_ms": "REQUEST_TIMEOUT",
    "max_retries": "MAX_RETRIES",
    "retry_delay_ms": "RETRY_DELAY",
    "server_name": "MCP_SERVER_NAME",
    "server_version": "MCP_SERVER_VERSION",
    "log_level": "LOG_LEVEL",
    "structured_logging": "LOG_STRUCTURED",
}

# field name -> (TOML table, key)
_TOML_KEYS: Dict[str, Tuple[str, str]] = {
    "base_url": ("remote", "base_url"),
    "api_key": ("remote", "api_key"),
    "api_version": ("remote", "api_version"),
    "request_timeout_ms": ("request", "timeout_ms"),
    "max_retries": ("request", "max_retries"),
    "retry_delay_ms": ("request", "retry_delay_ms"),
    "server_name": ("server", "name"),
    "server_version": ("server", "version"),
    "log_level": ("logging", "level"),
    "structured_logging": ("logging", "structured"),
}


class _ServerConfigLoader:
    """Mixin providing config-loading classmethods for ``ServerConfig``."""

    @classmethod
    def from_env(
        cls,
        config_file: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
    ) -> "ServerConfig":
        """
        Create configuration from environment variables and optional TOML files.

        Priority (highest to lowest):
        1. Environment variables
        2. Explicit TOML file (``config_file`` or ``DWZ_MCP_CONFIG_FILE``)
        3. Project TOML config (./dwz-mcp.toml)
        4. XDG config (~/.config/dwz-mcp/config.toml)
        5. Default values

        Raises:
            ConfigurationError: If a value cannot be parsed.
        """
        env = os.environ if environ is None else environ
        raw: Dict[str, Any] = {}
        sources = []

        # Layered config loading (lowest to highest priority)
        xdg_config_home = env.get("XDG_CONFIG_HOME") or str(Path.home() / ".config")
        xdg_config = Path(xdg_config_home) / "dwz-mcp" / "config.toml"
        if xdg_config.exists():
            raw.update(cls._read_toml(xdg_config))
            sources.append(str(xdg_config))
            logger.debug(f"Loaded XDG config from {xdg_config}")

        project_config = Path(PROJECT_CONFIG_NAME)
        if project_config.exists():
            raw.update(cls._read_toml(project_config))
            sources.append(str(project_config))
            logger.debug(f"Loaded project config from {project_config}")

        explicit = config_file or env.get(CONFIG_FILE_ENV_VAR)
        if explicit:
            explicit_path = Path(explicit)
            if not explicit_path.exists():
                raise ConfigurationError(f"Config file not found: {explicit_path}", field="config_file")
            raw.update(cls._read_toml(explicit_path))
            sources.append(str(explicit_path))

        raw.update(cls._read_env(env))
        config = cls(**cls._parse_values(raw))  # type: ignore[call-arg]
        logger.debug("Configuration loaded from %s", ", ".join(sources) or "environment/defaults")
        return config  # type: ignore[return-value]

    @staticmethod
    def _read_toml(path: Path) -> Dict[str, Any]:
        """Read the known keys of one TOML file into a flat field dict."""
        try:
            with open(path, "rb") as f:
                data = tomllib.load(f)
        except (OSError, tomllib.TOMLDecodeError) as e:
            raise ConfigurationError(f"Error loading config file {path}: {e}", field="config_file") from e

        values: Dict[str, Any] = {}
        for field_name, (table, key) in _TOML_KEYS.items():
            section = data.get(table)
            if isinstance(section, dict) and key in section:
                values[field_name] = section[key]
        return values

    @staticmethod
    def _read_env(env: Mapping[str, str]) -> Dict[str, Any]:
        values: Dict[str, Any] = {}
        for field_name, var in _ENV_VARS.items():
            value = env.get(var)
            if value is not None and value != "":
                values[field_name] = value
        return values

    @staticmethod
    def _parse_values(raw: Dict[str, Any]) -> Dict[str, Any]:
        """Convert raw TOML/env values into typed constructor kwargs."""
        values: Dict[str, Any] = {}
        for field_name in ("base_url", "api_key", "api_version", "server_name", "server_version"):
            if field_name in raw:
                values[field_name] = str(raw[field_name]).strip()
        if "request_timeout_ms" in raw:
            values["request_timeout_ms"] = _parse_int(raw["request_timeout_ms"], "request_timeout_ms", minimum=1)
        if "max_retries" in raw:
            values["max_retries"] = _parse_int(raw["max_retries"], "max_retries", minimum=0)
        if "retry_delay_ms" in raw:
            values["retry_delay_ms"] = _parse_int(raw["retry_delay_ms"], "retry_delay_ms", minimum=1)
        if "log_level" in raw:
            values["log_level"] = _parse_log_level(raw["log_level"])
        if "structured_logging" in raw:
            values["structured_logging"] = _parse_bool(raw["structured_logging"])
        return values
