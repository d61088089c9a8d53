"""Bounded exponential-backoff retry for upstream calls."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from typing import TypeVar

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from coverly_api.errors import is_retryable

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_MAX_ATTEMPTS = 3
DEFAULT_INITIAL_DELAY = 0.5  # seconds; doubles after every failed attempt


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    initial_delay: float = DEFAULT_INITIAL_DELAY,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    should_retry: Callable[[BaseException], bool] = is_retryable,
) -> T:
    """Run ``operation`` until it succeeds, fails for good, or runs out of attempts.

    Waits ``initial_delay`` seconds after the first failure and doubles the
    wait after each further one (0.5 s, 1 s, 2 s ...). The wait suspends only
    the calling task. The last failure is never retried.

    Args:
        operation: Zero-argument callable returning an awaitable; called
            afresh for every attempt
        max_attempts: Total number of attempts, including the first
        initial_delay: Wait in seconds before the second attempt
        sleep: Async sleep function, replaceable in tests
        should_retry: Predicate deciding whether a failure is transient

    Returns:
        The operation's result

    Raises:
        Exception: The non-retryable failure, or the last failure once
            attempts are exhausted, unchanged
    """
    async for attempt in AsyncRetrying(
        stop=stop_after_attempt(max_attempts),
        wait=wait_exponential(multiplier=initial_delay),
        retry=retry_if_exception(should_retry),
        sleep=sleep,
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    ):
        with attempt:
            result = await operation()
    return result
