"""
Exponential backoff for idempotent LuidGPT requests.

Only GET requests are routed through the retry manager; writes are sent
exactly once.
"""

import asyncio
import random
from typing import Awaitable, Callable, Optional, TypeVar
from dataclasses import dataclass
import logging

from .errors import is_retryable_error

logger = logging.getLogger(__name__)

T = TypeVar('T')


@dataclass
class RetryConfig:
    """Configuration for retry behavior."""
    max_attempts: int = 1
    initial_delay_ms: int = 500
    max_delay_ms: int = 8000
    jitter: bool = True
    jitter_range: float = 0.1  # ±10% jitter
    backoff_multiplier: float = 2.0
    respect_retry_after: bool = True

    should_retry_func: Optional[Callable[[Exception], bool]] = None

    @classmethod
    def from_max_retries(cls, max_retries: int) -> "RetryConfig":
        """Build a config allowing `max_retries` extra attempts."""
        return cls(max_attempts=max_retries + 1)


class RetryManager:
    """Runs an async call again on transient failures with exponential backoff."""

    def __init__(self, config: Optional[RetryConfig] = None):
        self.config = config or RetryConfig()

    @property
    def enabled(self) -> bool:
        return self.config.max_attempts > 1

    async def retry(self, func: Callable[[], Awaitable[T]], *, description: str = "request") -> T:
        """
        Call `func` until it succeeds or a non-retryable error is raised.

        Args:
            func: Async function to retry
            description: Label used in log messages

        Returns:
            Result of the function call

        Raises:
            The last exception encountered
        """
        current_delay = self.config.initial_delay_ms

        for attempt in range(self.config.max_attempts):
            try:
                result = await func()
                if attempt > 0:
                    logger.info(f"{description} succeeded after {attempt + 1} attempts")
                return result
            except Exception as e:
                if not self._should_retry(e, attempt):
                    raise

                logger.warning(f"Attempt {attempt + 1}/{self.config.max_attempts} of {description} failed: {e}")

                delay_ms = self._calculate_delay(e, current_delay)
                if delay_ms > 0:
                    logger.debug(f"Waiting {delay_ms}ms before retry {attempt + 2}")
                    await asyncio.sleep(delay_ms / 1000.0)

                current_delay = min(
                    int(current_delay * self.config.backoff_multiplier),
                    self.config.max_delay_ms
                )

        # max_attempts < 1 never enters the loop
        return await func()

    def _should_retry(self, error: Exception, attempt: int) -> bool:
        """Determine if an error should be retried."""
        if attempt >= self.config.max_attempts - 1:
            return False

        if self.config.should_retry_func:
            return self.config.should_retry_func(error)

        return is_retryable_error(error)

    def _calculate_delay(self, error: Exception, current_delay: int) -> int:
        """Calculate delay for next retry attempt."""
        if self.config.respect_retry_after:
            retry_after = get_retry_delay(error)
            if retry_after:
                return min(retry_after * 1000, self.config.max_delay_ms)

        delay = current_delay
        if self.config.jitter:
            jitter_amount = delay * self.config.jitter_range
            delay = int(delay + random.uniform(-jitter_amount, jitter_amount))

        return max(0, min(delay, self.config.max_delay_ms))


def get_retry_delay(error: Exception) -> Optional[int]:
    """
    Get the retry delay from an error if available.

    Args:
        error: The error to check

    Returns:
        Retry delay in seconds, or None if not specified
    """
    details = getattr(error, "details", None) or {}
    retry_after = details.get("retry_after")
    if retry_after is None:
        return None
    try:
        return int(retry_after)
    except (TypeError, ValueError):
        return None
