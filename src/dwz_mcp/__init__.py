"""dwz-mcp: short-URL management tools for MCP clients."""

from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as _get_package_version

try:
    __version__ = _get_package_version("dwz-mcp")
except PackageNotFoundError:
    __version__ = "0.3.0"  # Fallback for dev without install

__all__ = ["__version__"]
