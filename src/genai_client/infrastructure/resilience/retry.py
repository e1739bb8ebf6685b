"""Retry mechanism with exponential backoff for API calls."""

from __future__ import annotations

import asyncio
import random
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from structlog import get_logger

from ...core.config.settings import RetryPolicy
from ...core.exceptions import ApiError, RateLimitedError

T = TypeVar("T")

logger = get_logger(__name__)

SleepFunc = Callable[[float], Awaitable[Any]]


class RetryController:
    """Per-call retry state machine: Attempting(n) -> Success | Attempting(n+1) | GivenUp.

    One controller may be shared by a client; ``run`` keeps its attempt
    count local to the call.
    """

    def __init__(self, policy: RetryPolicy | None = None, sleep: SleepFunc | None = None):
        """Initialize the controller.

        Args:
            policy: Retry bounds
            sleep: Awaitable sleep function, replaceable in tests
        """
        self.policy = policy or RetryPolicy()
        self._sleep = sleep or asyncio.sleep

    def compute_delay(self, attempt: int, error: ApiError | None = None) -> float:
        """Delay to wait after failed attempt ``attempt`` (1-based).

        ``base_delay * 2**(attempt - 1)`` capped at ``max_delay``; a retry-after
        hint on a rate-limit error replaces the computed value.
        """
        if isinstance(error, RateLimitedError) and error.retry_after is not None:
            return max(0.0, error.retry_after)

        delay = min(self.policy.base_delay * (2 ** (attempt - 1)), self.policy.max_delay)
        if self.policy.jitter:
            jitter_amount = delay * 0.25
            delay += random.uniform(-jitter_amount, jitter_amount)
        return delay

    def should_retry(self, error: ApiError, attempt: int) -> bool:
        """Whether another attempt follows failed attempt ``attempt``."""
        return error.retryable and attempt < self.policy.max_attempts

    async def backoff(self, attempt: int, error: ApiError) -> float:
        """Sleep before the next attempt and return the delay used."""
        delay = self.compute_delay(attempt, error)
        logger.warning(
            "Retrying after failed attempt",
            attempt=attempt,
            max_attempts=self.policy.max_attempts,
            delay=round(delay, 3),
            error_kind=error.kind.value,
        )
        await self._sleep(delay)
        return delay

    async def run(self, operation: Callable[[], Awaitable[T]]) -> T:
        """Execute ``operation`` with retry and exponential backoff.

        Args:
            operation: Zero-argument coroutine function performing one attempt

        Returns:
            The operation's result

        Raises:
            ApiError: The last classified error, unchanged, once the error is
                not retryable or ``max_attempts`` attempts have failed
        """
        attempt = 1
        while True:
            try:
                result = await operation()
            except ApiError as e:
                if not self.should_retry(e, attempt):
                    logger.error(
                        "Giving up",
                        attempts=attempt,
                        error_kind=e.kind.value,
                        retryable=e.retryable,
                    )
                    raise
                await self.backoff(attempt, e)
                attempt += 1
                continue

            if attempt > 1:
                logger.info("Call succeeded after retries", attempts=attempt)
            return result
