"""Retry with exponential backoff for remote requests.

Exports:
- compute_delay / should_retry: backoff timing and retry eligibility
- execute_with_retry: the sequential retry loop
- AttemptRecord / AttemptOutcome / SleepFunc: supporting types
"""

from dwz_mcp.core.resilience.backoff import compute_delay, should_retry
from dwz_mcp.core.resilience.execution import execute_with_retry
from dwz_mcp.core.resilience.models import (
    JITTER_RATIO,
    MAX_DELAY_MS,
    AttemptObserver,
    AttemptOutcome,
    AttemptRecord,
    SleepFunc,
)

__all__ = [
    "JITTER_RATIO",
    "MAX_DELAY_MS",
    "AttemptObserver",
    "AttemptOutcome",
    "AttemptRecord",
    "SleepFunc",
    "compute_delay",
    "execute_with_retry",
    "should_retry",
]
