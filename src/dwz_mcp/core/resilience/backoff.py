"""Backoff delay computation and retry eligibility.

Both functions are pure apart from the random draw used for jitter, which is
injectable for deterministic testing.
"""

import random
from typing import Optional

from dwz_mcp.core.errors.classified import ClassifiedError
from dwz_mcp.core.resilience.models import JITTER_RATIO, MAX_DELAY_MS


def compute_delay(
    attempt: int,
    base_delay_ms: float,
    *,
    rng: Optional[random.Random] = None,
) -> float:
    """Compute the delay before retrying after *attempt* failed.

    Delay is ``base_delay_ms * 2 ** (attempt - 1)`` plus jitter drawn from
    ``[0, 10%]`` of that value, capped at 30000 ms.

    Args:
        attempt: 1-based number of the attempt that just failed.
        base_delay_ms: Base delay in milliseconds.
        rng: Injectable Random instance for deterministic testing.

    Returns:
        Delay in milliseconds.

    Example:
        >>> compute_delay(3, 1000, rng=random.Random(0)) >= 4000
        True
    """
    if attempt < 1:
        raise ValueError(f"attempt must be >= 1, got {attempt}")
    _rng = rng or random
    exponential = base_delay_ms * (2 ** (attempt - 1))
    jitter = _rng.random() * JITTER_RATIO * exponential
    return min(exponential + jitter, MAX_DELAY_MS)


def should_retry(error: ClassifiedError, attempt: int, max_retries: int) -> bool:
    """Decide whether the request that failed on *attempt* may be reissued.

    Attempts are numbered from 1 and a call gets ``max_retries + 1`` attempts
    in total, so no retry follows attempt ``max_retries + 1``.
    """
    if attempt > max_retries:
        return False
    return error.retryable
