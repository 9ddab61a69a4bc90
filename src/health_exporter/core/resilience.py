"""
Retry policy for remote record sources.

Remote sources retry a single request on transient failures; a failure that
outlives the policy surfaces as the stage's error. The export core itself
never retries.
"""

import asyncio
import logging
import random

logger = logging.getLogger(__name__)

RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


class ExponentialBackoff:
    """Implements exponential backoff with jitter for retry logic."""

    def __init__(self, base_delay: float = 1.0, max_delay: float = 60.0, max_retries: int = 3):
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.max_retries = max_retries

    def calculate_delay(self, attempt: int, retry_after: float | None = None) -> float:
        """Delay before the next attempt. A server supplied ``retry_after`` wins, capped at max_delay."""
        if retry_after is not None:
            return min(max(0.0, retry_after), self.max_delay)

        delay = min(self.base_delay * (2**attempt), self.max_delay)
        # Add jitter (±25%)
        jitter = delay * 0.25 * (random.random() * 2 - 1)
        return max(0, delay + jitter)

    def should_retry(self, attempt: int) -> bool:
        """Check if should retry based on attempt count."""
        return attempt < self.max_retries

    async def wait(self, attempt: int, retry_after: float | None = None) -> None:
        delay = self.calculate_delay(attempt, retry_after)
        logger.warning(f"Retrying in {delay:.1f}s (attempt {attempt + 1}/{self.max_retries})")
        await asyncio.sleep(delay)


def parse_retry_after(value: str | None) -> float | None:
    """Seconds from a ``Retry-After`` header; HTTP-date values are ignored."""
    if not value:
        return None
    try:
        return float(value)
    except ValueError:
        return None
