"""Tests for backoff delay computation and retry eligibility."""

import random

import pytest

from dwz_mcp.core.errors import ClassifiedError, ErrorKind
from dwz_mcp.core.resilience import MAX_DELAY_MS, compute_delay, should_retry


class TestComputeDelay:
    """Tests for compute_delay."""

    @pytest.mark.parametrize("attempt", [1, 2, 3, 4, 5])
    def test_delay_within_jitter_bounds(self, attempt):
        """Delay lies in [base*2^(a-1), base*2^(a-1)*1.1], capped at 30s."""
        rng = random.Random(attempt)
        exponential = 1000 * 2 ** (attempt - 1)
        for _ in range(200):
            delay = compute_delay(attempt, 1000, rng=rng)
            assert min(exponential, MAX_DELAY_MS) <= delay <= min(exponential * 1.1, MAX_DELAY_MS)

    def test_zero_draw_gives_exact_exponential(self):
        """Without jitter the delay doubles per attempt."""

        class ZeroRandom(random.Random):
            def random(self):
                return 0.0

        delays = [compute_delay(a, 1000, rng=ZeroRandom()) for a in (1, 2, 3, 4)]
        assert delays == [1000, 2000, 4000, 8000]

    def test_maximum_jitter_is_ten_percent(self):
        """A draw just below 1.0 adds almost 10% of the exponential delay."""

        class MaxRandom(random.Random):
            def random(self):
                return 0.999999

        assert compute_delay(2, 1000, rng=MaxRandom()) == pytest.approx(2200, abs=0.01)

    def test_capped_at_ceiling(self):
        """Large attempts never exceed the 30 second ceiling."""
        assert compute_delay(10, 1000, rng=random.Random(0)) == MAX_DELAY_MS
        assert compute_delay(6, 1000, rng=random.Random(0)) == MAX_DELAY_MS

    def test_deterministic_with_seeded_rng(self):
        """Same seed produces the same delays."""
        first = [compute_delay(a, 500, rng=random.Random(7)) for a in range(1, 5)]
        second = [compute_delay(a, 500, rng=random.Random(7)) for a in range(1, 5)]
        assert first == second

    def test_rejects_attempt_zero(self):
        """Attempts are numbered from 1."""
        with pytest.raises(ValueError):
            compute_delay(0, 1000)


class TestShouldRetry:
    """Tests for should_retry."""

    def test_retryable_within_limit(self):
        error = ClassifiedError(ErrorKind.SERVER, "boom")
        assert should_retry(error, 1, 3) is True
        assert should_retry(error, 3, 3) is True

    def test_no_retry_after_final_attempt(self):
        """No retry once the attempt number exceeds max retries."""
        error = ClassifiedError(ErrorKind.TIMEOUT, "slow")
        assert should_retry(error, 4, 3) is False

    def test_non_retryable_kind(self):
        """Authentication failures are never retried."""
        error = ClassifiedError(ErrorKind.AUTHENTICATION, "bad key")
        assert should_retry(error, 1, 3) is False

    @pytest.mark.parametrize(
        "kind",
        [
            ErrorKind.VALIDATION,
            ErrorKind.AUTHORIZATION,
            ErrorKind.NOT_FOUND,
            ErrorKind.CONFLICT,
            ErrorKind.BUSINESS,
            ErrorKind.UNKNOWN_HTTP,
            ErrorKind.UNKNOWN,
        ],
    )
    def test_client_side_kinds_not_retried(self, kind):
        assert should_retry(ClassifiedError(kind, "nope"), 1, 3) is False

    def test_zero_max_retries_never_retries(self):
        error = ClassifiedError(ErrorKind.NETWORK, "reset")
        assert should_retry(error, 1, 0) is False
