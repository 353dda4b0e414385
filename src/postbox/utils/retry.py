"""Retry utilities for Postbox.

Provides opt-in retry with exponential backoff for operations the broker
would otherwise attempt exactly once, such as the post-delivery save.

Usage:
    from postbox.utils.retry import RetryConfig, with_retry

    config = RetryConfig(max_attempts=3, base_delay=0.5)
    await with_retry(lambda: store.save(message), config)
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Awaitable, Callable, TypeVar

logger = logging.getLogger("postbox.retry")

T = TypeVar("T")


@dataclass
class RetryConfig:
    """Configuration for retry behavior.

    Attributes:
        max_attempts: Maximum total attempts (including first try)
        base_delay: Initial delay in seconds before first retry
        max_delay: Maximum delay between retries
        exponential_base: Multiplier for exponential backoff (default: 2)
        jitter: Random jitter factor (0-1) to prevent thundering herd
        retry_on: Exception types that should trigger retry
    """

    max_attempts: int = 1
    base_delay: float = 0.5
    max_delay: float = 30.0
    exponential_base: float = 2.0
    jitter: float = 0.1
    retry_on: tuple[type[Exception], ...] = (Exception,)

    def calculate_delay(self, attempt: int) -> float:
        """Delay before the retry that follows ``attempt`` (1-indexed).

        Example:
            >>> RetryConfig(base_delay=1.0, jitter=0).calculate_delay(3)
            4.0
        """
        delay = min(self.base_delay * (self.exponential_base ** (attempt - 1)), self.max_delay)

        if self.jitter > 0:
            jitter_amount = delay * self.jitter
            delay += random.uniform(-jitter_amount, jitter_amount)

        return max(0.0, delay)

    def should_retry(self, exc: Exception, attempt: int) -> bool:
        """Whether another attempt should follow a failure on ``attempt``."""
        if attempt >= self.max_attempts:
            return False
        return isinstance(exc, self.retry_on)


async def with_retry(
    func: Callable[[], Awaitable[T]],
    config: RetryConfig | None = None,
) -> T:
    """Execute an async function with retry logic.

    The last error is re-raised unchanged once attempts run out, so callers
    handle the same exception types with or without retries.

    Args:
        func: Async function to execute
        config: Retry configuration (default: a single attempt)

    Returns:
        The result of the function
    """
    config = config or RetryConfig()
    attempt = 1

    while True:
        try:
            return await func()
        except Exception as e:
            if not config.should_retry(e, attempt):
                raise

            delay = config.calculate_delay(attempt)
            logger.warning(
                f"Attempt {attempt}/{config.max_attempts} failed: {e}. "
                f"Retrying in {delay:.1f}s..."
            )
            await asyncio.sleep(delay)
            attempt += 1
