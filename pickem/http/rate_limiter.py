"""
Retry with exponential backoff for rate-limited API calls.

Features:
- Exponential backoff: initial_delay * 2^attempt
- Retry predicate (defaults to rate-limit failures only)
- Retry-After header parsing
"""
import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime
from email.utils import parsedate_to_datetime
from typing import Awaitable, Callable, Optional, TypeVar

from pickem.errors import is_rate_limited
from pickem.utils.observability import get_metrics

logger = logging.getLogger(__name__)

T = TypeVar("T")


def parse_retry_after(header_value: Optional[str]) -> Optional[int]:
    """
    Parse Retry-After header (seconds or HTTP-date).

    Args:
        header_value: Value of Retry-After header

    Returns:
        Seconds to wait, or None if header not parseable
    """
    if not header_value:
        return None

    try:
        return int(header_value)
    except ValueError:
        pass

    try:
        retry_time = parsedate_to_datetime(header_value)
    except (TypeError, ValueError):
        return None
    if retry_time is None:
        return None
    delta = retry_time - datetime.now(retry_time.tzinfo)
    return max(0, int(delta.total_seconds()))


async def delay(seconds: float) -> None:
    """Suspend for ``seconds``."""
    await asyncio.sleep(seconds)


@dataclass
class RetryPolicy:
    """
    Bounded exponential backoff.

    ``max_retries`` counts retries after the first attempt, so the operation
    runs at most ``max_retries + 1`` times. There is no separate delay cap.

    Example:
        policy = RetryPolicy(max_retries=3, initial_delay=1.0)
        [policy.get_delay(i) for i in range(3)]  # [1.0, 2.0, 4.0]
    """
    max_retries: int = 3
    initial_delay: float = 1.0
    multiplier: float = 2.0
    should_retry: Callable[[BaseException], bool] = field(default=is_rate_limited)

    def get_delay(self, attempt: int) -> float:
        """Delay before retry number ``attempt`` (0-indexed)."""
        return self.initial_delay * (self.multiplier ** attempt)


async def with_retry(
    operation: Callable[[], Awaitable[T]],
    policy: Optional[RetryPolicy] = None,
    *,
    max_retries: Optional[int] = None,
    initial_delay: Optional[float] = None,
    should_retry: Optional[Callable[[BaseException], bool]] = None,
    sleep: Callable[[float], Awaitable[None]] = delay,
) -> T:
    """
    Run ``operation`` until it succeeds, fails with a non-retryable error, or
    runs out of retries.

    Attempts are strictly sequential. The failure itself is never altered:
    after the last retry the final error propagates unchanged.

    Args:
        operation: Zero-argument callable returning a fresh awaitable per attempt
        policy: Base policy; keyword overrides are applied on top of it
        max_retries: Override for ``policy.max_retries``
        initial_delay: Override for ``policy.initial_delay`` (seconds)
        should_retry: Override for ``policy.should_retry``
        sleep: Awaitable delay function

    Returns:
        The operation's result
    """
    policy = policy or RetryPolicy()
    retries = policy.max_retries if max_retries is None else max_retries
    first_delay = policy.initial_delay if initial_delay is None else initial_delay
    retryable = should_retry or policy.should_retry

    attempt = 0
    while True:
        try:
            return await operation()
        except Exception as e:
            if attempt >= retries or not retryable(e):
                raise
            wait = first_delay * (policy.multiplier ** attempt)
            attempt += 1
            get_metrics().retry_attempts.inc()
            logger.warning(f"Retryable failure ({e}), retry {attempt}/{retries} in {wait:.2f}s")
            await sleep(wait)
