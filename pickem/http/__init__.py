from .client import AsyncHttpClient
from .rate_limiter import RetryPolicy, delay, parse_retry_after, with_retry

__all__ = [
    "AsyncHttpClient",
    "RetryPolicy",
    "delay",
    "parse_retry_after",
    "with_retry",
]
