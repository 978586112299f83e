"""Request execution with bounded retry and classified failures.

Runs one logical request as a strictly sequential loop of attempts. Every
failure is classified; retryable failures are retried after an exponential
backoff until the attempt limit, everything else surfaces immediately as a
``ClassifiedError``.
"""

import asyncio
import logging
import random
from typing import Awaitable, Callable, Optional, TypeVar

from dwz_mcp.core.errors.classified import ClassifiedError
from dwz_mcp.core.errors.classifier import classify
from dwz_mcp.core.observability import audit_log
from dwz_mcp.core.resilience.backoff import compute_delay, should_retry
from dwz_mcp.core.resilience.models import (
    AttemptObserver,
    AttemptOutcome,
    AttemptRecord,
    SleepFunc,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def execute_with_retry(
    func: Callable[[], Awaitable[T]],
    *,
    max_retries: int = 3,
    retry_delay_ms: float = 1000,
    classify_error: Optional[Callable[[Exception], ClassifiedError]] = None,
    sleep_func: Optional[SleepFunc] = None,
    rng: Optional[random.Random] = None,
    observer: Optional[AttemptObserver] = None,
    operation: Optional[str] = None,
) -> T:
    """Execute an async request with retry on transient failures.

    Attempts are numbered 1..max_retries+1. After a failed attempt the error
    is classified; if it is retryable and attempts remain, the loop sleeps for
    ``compute_delay(attempt, retry_delay_ms)`` and tries again.

    Args:
        func: Async function issuing one attempt (no arguments; use lambda for args).
        max_retries: Number of retries after the first attempt (default 3).
        retry_delay_ms: Base backoff delay in milliseconds (default 1000).
        classify_error: Custom classifier (default :func:`classify`).
        sleep_func: Injectable sleep function for time control in tests.
        rng: Injectable Random instance for deterministic jitter.
        observer: Callback receiving an ``AttemptRecord`` per attempt.
            Observer failures are logged and never affect the loop.
        operation: Label used in logs and audit events.

    Returns:
        Result from the function on success.

    Raises:
        ClassifiedError: The classified failure of the final attempt, or of
            the first non-retryable attempt. The raw failure is chained as
            ``__cause__``.

    Testing example:
        >>> seeded_rng = random.Random(42)
        >>> sleep_times = []
        >>> async def fake_sleep(s): sleep_times.append(s)
        >>> await execute_with_retry(
        ...     func, rng=seeded_rng, sleep_func=fake_sleep
        ... )
    """
    _classify = classify_error or classify
    _sleep = sleep_func or asyncio.sleep
    _rng = rng or random.Random()
    label = operation or getattr(func, "__name__", "request")

    def _notify(record: AttemptRecord) -> None:
        if observer is None:
            return
        try:
            observer(record)
        except Exception:
            logger.exception("Attempt observer failed for %s (attempt %d)", label, record.attempt)

    for attempt in range(1, max_retries + 2):
        logger.debug("%s: attempt %d of %d", label, attempt, max_retries + 1)
        audit_log("request_attempt", operation=label, attempt=attempt)
        try:
            result = await func()
        except Exception as exc:
            error = _classify(exc)

            if not should_retry(error, attempt, max_retries):
                logger.warning(
                    "%s failed on attempt %d: %s (%s)",
                    label,
                    attempt,
                    error.message,
                    error.kind.value,
                )
                audit_log(
                    "request_failed",
                    operation=label,
                    attempt=attempt,
                    kind=error.kind.value,
                    code=error.code.value,
                    retryable=error.retryable,
                )
                _notify(AttemptRecord(attempt=attempt, outcome=AttemptOutcome.FAILED, error=error))
                if error is exc:
                    raise
                raise error from exc

            delay_ms = compute_delay(attempt, retry_delay_ms, rng=_rng)
            logger.info(
                "%s attempt %d failed with %s, retrying in %.0f ms",
                label,
                attempt,
                error.kind.value,
                delay_ms,
            )
            audit_log(
                "request_retry",
                operation=label,
                attempt=attempt,
                kind=error.kind.value,
                delay_ms=round(delay_ms, 1),
            )
            _notify(AttemptRecord(attempt=attempt, outcome=AttemptOutcome.RETRY, error=error, delay_ms=delay_ms))
            await _sleep(delay_ms / 1000.0)
            continue

        _notify(AttemptRecord(attempt=attempt, outcome=AttemptOutcome.SUCCESS))
        return result

    # Unreachable: the final attempt either returns or raises.
    raise RuntimeError("execute_with_retry: unexpected state")
