"""
Token bucket rate limiter for geocoding requests.

Implements an asyncio token bucket with exponential backoff so bursts of
geocodes stay under the provider's quota without blocking the event loop.
"""

import asyncio
import time

from ..config.logger_module import log_info
from .resolution_errors import GeocodeError, GeocodeErrorKind


class AsyncTokenBucketRateLimiter:
    """
    Token bucket rate limiter for geocode calls (single event loop).

    Tokens are added at a constant rate up to the burst capacity; each
    request consumes one. When the bucket is empty callers sleep until
    enough tokens accumulate.
    """

    def __init__(self,
                 rate_per_second: float = 10.0,
                 burst_capacity: int = 10,
                 retry_attempts: int = 3,
                 backoff_factor: float = 2.0):
        """
        Initialize the rate limiter.

        Args:
            rate_per_second: Tokens added per second (average rate)
            burst_capacity: Maximum tokens in bucket (burst allowance)
            retry_attempts: Max waits before giving up
            backoff_factor: Exponential backoff multiplier
        """
        if rate_per_second <= 0:
            raise ValueError(f"rate_per_second must be positive, got {rate_per_second}")
        if burst_capacity < 1:
            raise ValueError(f"burst_capacity must be at least 1, got {burst_capacity}")

        self.rate_per_second = rate_per_second
        self.burst_capacity = burst_capacity
        self.retry_attempts = retry_attempts
        self.backoff_factor = backoff_factor

        self.tokens = float(burst_capacity)
        self.last_update = time.monotonic()

        log_info(
            f"RateLimiter initialized: {rate_per_second}/sec, "
            f"burst capacity: {burst_capacity}"
        )

    def _refill_tokens(self) -> None:
        """Refill tokens based on elapsed time."""
        current_time = time.monotonic()
        elapsed = current_time - self.last_update

        self.tokens = min(self.tokens + elapsed * self.rate_per_second, self.burst_capacity)
        self.last_update = current_time

    def acquire(self, tokens_needed: int = 1) -> bool:
        """
        Attempt to acquire tokens without waiting.

        Returns:
            True if successful, False if rate limited
        """
        self._refill_tokens()

        if self.tokens >= tokens_needed:
            self.tokens -= tokens_needed
            return True
        return False

    async def wait_for_token(self, tokens_needed: int = 1) -> None:
        """
        Suspend until tokens are available, with exponential backoff.

        Raises:
            GeocodeError: RATE_LIMITED after max retry attempts
        """
        wait_time = 0.1

        for attempt in range(self.retry_attempts):
            if self.acquire(tokens_needed):
                return

            tokens_deficit = tokens_needed - self.tokens
            actual_wait = max(wait_time, tokens_deficit / self.rate_per_second)

            log_info(
                f"Rate limited. Waiting {actual_wait:.2f}s "
                f"(attempt {attempt + 1}/{self.retry_attempts})"
            )

            await asyncio.sleep(actual_wait)
            wait_time *= self.backoff_factor

        if self.acquire(tokens_needed):
            return

        raise GeocodeError(
            GeocodeErrorKind.RATE_LIMITED,
            f"Failed to acquire {tokens_needed} token(s) after "
            f"{self.retry_attempts} attempts"
        )

    def get_available_tokens(self) -> float:
        """Get current number of available tokens."""
        self._refill_tokens()
        return self.tokens

    def get_wait_time(self, tokens_needed: int = 1) -> float:
        """
        Calculate wait time for tokens without waiting.

        Returns:
            Estimated wait time in seconds (0 if tokens available)
        """
        self._refill_tokens()

        if self.tokens >= tokens_needed:
            return 0.0

        return (tokens_needed - self.tokens) / self.rate_per_second
