"""JSON output helpers for CLI commands.

Commands print a single JSON document to stdout: ``{"success": true, "data"}``
or ``{"success": false, "error"}``. Errors exit with status 1.
"""

import json
import sys
from typing import Any, Mapping, NoReturn, Optional

import click


def emit(payload: Mapping[str, Any]) -> None:
    click.echo(json.dumps(payload, indent=2, ensure_ascii=False, default=str))


def emit_success(data: Any) -> None:
    emit({"success": True, "data": data})


def emit_error(
    message: str,
    *,
    code: str,
    details: Optional[Any] = None,
) -> NoReturn:
    emit({"success": False, "error": {"code": code, "message": message, "details": details}})
    sys.exit(1)
