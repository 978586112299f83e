"""Request context propagation.

Holds the correlation id of the tool call currently being served in a
``contextvars.ContextVar`` so that logs and audit events emitted deep in the
request path can be tied back to one invocation. Context variables are
task-local under asyncio, so concurrent tool calls never see each other's id.
"""

import contextvars
import uuid
from contextlib import contextmanager
from typing import Iterator, Optional

_correlation_id: contextvars.ContextVar[str] = contextvars.ContextVar("dwz_correlation_id", default="")


def generate_correlation_id(prefix: str = "req") -> str:
    """Generate a new correlation id such as ``tool_1f2e3d4c5b6a``."""
    return f"{prefix}_{uuid.uuid4().hex[:12]}"


def get_correlation_id() -> str:
    """Return the current correlation id, or ``""`` outside a request."""
    return _correlation_id.get()


@contextmanager
def request_context(correlation_id: Optional[str] = None) -> Iterator[str]:
    """Bind a correlation id for the duration of the ``with`` block."""
    corr_id = correlation_id or generate_correlation_id()
    token = _correlation_id.set(corr_id)
    try:
        yield corr_id
    finally:
        _correlation_id.reset(token)
