"""Secret redaction for log lines and error messages.

Anything that originates outside the process (remote error bodies, HTTP
headers) passes through these helpers before it is logged or placed in a
``ClassifiedError``.
"""

import re
from typing import Mapping

_SECRET_PATTERN = re.compile(
    r"(?i)"
    r"(?:"
    r"(?:api[_-]?key|token|bearer|authorization|secret|password|credential)"
    r"[\s:=]+"
    r")"
    r"['\"]?([^\s'\"]{8,})['\"]?",
)

# Headers that should never appear in logs/errors
_SENSITIVE_HEADERS = frozenset(
    {
        "authorization",
        "x-api-key",
        "api-key",
        "apikey",
        "cookie",
        "set-cookie",
        "proxy-authorization",
    }
)

REDACTED = "****"


def redact_secrets(text: str) -> str:
    """Replace API keys and bearer tokens found in *text* with ``****``.

    Matches patterns such as ``api_key=...``, ``Bearer ...`` and
    ``token: ...``; only the secret part of each match is replaced.
    """
    if not text:
        return text

    def _replace(match: "re.Match[str]") -> str:
        return match.group(0).replace(match.group(1), REDACTED)

    return _SECRET_PATTERN.sub(_replace, text)


def redact_headers(headers: Mapping[str, str]) -> dict:
    """Return a copy of *headers* with sensitive values replaced by ``****``."""
    return {key: REDACTED if key.lower() in _SENSITIVE_HEADERS else value for key, value in headers.items()}
