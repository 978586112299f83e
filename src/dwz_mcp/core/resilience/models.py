"""Resilience data models and protocols.

Defines the types shared across the resilience sub-package:
- AttemptOutcome enum for per-attempt results
- AttemptRecord for observers of the retry loop
- SleepFunc protocol for injectable async sleep
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Protocol

from dwz_mcp.core.errors.classified import ClassifiedError

# Hard ceiling on any single backoff delay.
MAX_DELAY_MS = 30000.0

# Jitter is drawn uniformly from [0, JITTER_RATIO * exponential delay].
JITTER_RATIO = 0.1


class AttemptOutcome(str, Enum):
    """What happened on one attempt of a request."""

    SUCCESS = "success"
    RETRY = "retry"
    FAILED = "failed"


@dataclass(frozen=True)
class AttemptRecord:
    """Immutable record of one attempt, handed to retry observers.

    ``delay_ms`` is set only when the outcome is ``RETRY``.
    """

    attempt: int
    outcome: AttemptOutcome
    error: Optional[ClassifiedError] = None
    delay_ms: Optional[float] = None


class SleepFunc(Protocol):
    """Protocol for injectable sleep function."""

    async def __call__(self, seconds: float) -> None: ...


class AttemptObserver(Protocol):
    """Protocol for callbacks observing each attempt of the retry loop."""

    def __call__(self, record: AttemptRecord) -> None: ...
