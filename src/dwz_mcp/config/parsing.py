"""Parsing helpers for configuration values read from TOML or the environment."""

from typing import Any

from dwz_mcp.core.errors.classified import ConfigurationError


def _parse_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"true", "1", "yes", "on"}


def _parse_int(value: Any, field: str, *, minimum: int = 0) -> int:
    """Parse an integer leniently, rejecting values below *minimum*.

    Accepts ints and numeric strings (surrounding whitespace allowed).
    Booleans are rejected even though they are ints in Python.
    """
    if isinstance(value, bool):
        raise ConfigurationError(f"{field} must be an integer, got {value!r}", field=field)
    try:
        parsed = int(str(value).strip()) if not isinstance(value, int) else value
    except ValueError:
        raise ConfigurationError(f"{field} must be an integer, got {value!r}", field=field) from None
    if parsed < minimum:
        raise ConfigurationError(f"{field} must be >= {minimum}, got {parsed}", field=field)
    return parsed


def _parse_log_level(value: Any) -> str:
    level = str(value).strip().upper()
    if level == "WARN":
        level = "WARNING"
    if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
        raise ConfigurationError(f"log_level must be a standard logging level, got {value!r}", field="log_level")
    return level
