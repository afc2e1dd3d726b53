"""Retry executor with exponential backoff."""

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from .config import Settings
from .errors import APIError, NetworkError, RateLimitedError

T = TypeVar("T")


class RetryPolicy(BaseModel):
    """Attempt budget and backoff shape for a single upstream operation.

    The wait before retry ``n`` (0-based) is ``base_delay * multiplier ** n``.

    Example:
        >>> policy = RetryPolicy()
        >>> (policy.max_attempts, policy.base_delay, policy.multiplier)
        (3, 1.0, 2.0)
    """

    model_config = ConfigDict(frozen=True)

    max_attempts: int = Field(default=3, ge=1)
    base_delay: float = Field(default=1.0, ge=0.0)
    multiplier: float = Field(default=2.0, ge=1.0)

    @classmethod
    def from_settings(cls, settings: Settings) -> "RetryPolicy":
        return cls(
            max_attempts=settings.RETRY_MAX_ATTEMPTS,
            base_delay=settings.RETRY_BASE_DELAY,
            multiplier=settings.RETRY_BACKOFF_MULTIPLIER,
        )


DEFAULT_RETRY_POLICY = RetryPolicy()


def is_retryable(exception: BaseException) -> bool:
    """Determine if a failed upstream call is worth another attempt.

    Retry on rate limiting, API errors and transport failures. Everything else
    (decoding failures, missing data, unsupported or unknown locations, bad URLs)
    means the request itself cannot succeed.

    Example:
        >>> is_retryable(RateLimitedError())
        True
        >>> from .errors import DecodingError
        >>> is_retryable(DecodingError(ValueError("bad json")))
        False
    """
    return isinstance(exception, (RateLimitedError, APIError, NetworkError))


def _log_retry(retry_state: RetryCallState) -> None:
    exception = retry_state.outcome.exception() if retry_state.outcome else None
    logger.warning(
        "Upstream call failed, retrying",
        attempt=retry_state.attempt_number,
        delay=retry_state.next_action.sleep if retry_state.next_action else None,
        error=str(exception),
    )


async def execute(
    operation: Callable[[], Awaitable[T]],
    *,
    policy: RetryPolicy = DEFAULT_RETRY_POLICY,
    should_retry: Callable[[BaseException], bool] = is_retryable,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Run ``operation`` with bounded retries.

    The first attempt always runs. When an attempt fails and ``should_retry``
    rejects the error, it propagates immediately; otherwise the executor waits
    and tries again until ``policy.max_attempts`` is exhausted, then re-raises
    the last error unchanged.

    Args:
        operation: Zero-argument coroutine function to run
        policy: Attempt budget and backoff shape
        should_retry: Classifier deciding whether an error is transient
        sleep: Awaitable sleep used between attempts

    Returns:
        Whatever the first successful attempt returns

    Example:
        >>> async def example():
        ...     return await execute(fetch, policy=RetryPolicy(max_attempts=5))
    """
    retrying = AsyncRetrying(
        retry=retry_if_exception(should_retry),
        stop=stop_after_attempt(policy.max_attempts),
        wait=wait_exponential(multiplier=policy.base_delay, exp_base=policy.multiplier),
        before_sleep=_log_retry,
        sleep=sleep,
        reraise=True,
    )
    return await retrying(operation)
