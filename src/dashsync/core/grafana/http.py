"""
Retry with exponential backoff for requests to the remote service.

Only transient failures are retried: 5xx responses, timeouts and
connection errors. Client errors (4xx) are raised on the first attempt.

Example:
    >>> @with_retry(RetryConfig(max_retries=2))
    ... def fetch(client: httpx.Client) -> httpx.Response:
    ...     response = client.get("/health")
    ...     response.raise_for_status()
    ...     return response
"""

from __future__ import annotations

import functools
import logging
import random
import time
from collections.abc import Callable
from typing import Any, TypeVar

import httpx

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryConfig:
    """
    Configuration for retry behavior.

    Attributes:
        max_retries: Maximum number of retry attempts (default: 3)
        base_delay: Initial delay in seconds before first retry (default: 0.5)
        multiplier: Exponential backoff multiplier (default: 2.0)
        jitter_ratio: Random variance ratio applied to each delay (default: 0.2)
    """

    def __init__(
        self,
        max_retries: int = 3,
        base_delay: float = 0.5,
        multiplier: float = 2.0,
        jitter_ratio: float = 0.2,
    ) -> None:
        if max_retries < 0:
            raise ValueError("max_retries must be non-negative")
        if base_delay < 0:
            raise ValueError("base_delay must be non-negative")
        if multiplier < 1.0:
            raise ValueError("multiplier must be >= 1.0")
        if not 0.0 <= jitter_ratio <= 1.0:
            raise ValueError("jitter_ratio must be between 0.0 and 1.0")

        self.max_retries = max_retries
        self.base_delay = base_delay
        self.multiplier = multiplier
        self.jitter_ratio = jitter_ratio

    def calculate_delay(self, attempt: int) -> float:
        """Delay before retry ``attempt`` (0-indexed): base * multiplier^attempt, with jitter."""
        delay = self.base_delay * (self.multiplier**attempt)
        variance = delay * self.jitter_ratio
        return max(0.0, delay + random.uniform(-variance, variance))


def is_retryable_error(exception: Exception) -> bool:
    """
    Determine if an exception represents a transient, retryable error.

    HTTPStatusError is checked first because it is also an HTTPError.
    """
    if isinstance(exception, httpx.HTTPStatusError):
        return 500 <= exception.response.status_code < 600
    if isinstance(exception, httpx.UnsupportedProtocol):
        return False
    if isinstance(exception, (httpx.TimeoutException, httpx.TransportError)):
        return True
    return False


def with_retry(config: RetryConfig | None = None) -> Callable[[Callable[..., T]], Callable[..., T]]:
    """
    Decorator retrying the wrapped call on transient httpx errors.

    The last exception is re-raised unchanged once retries run out.
    """
    config = config or RetryConfig()

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @functools.wraps(func)
        def wrapper(*args: Any, **kwargs: Any) -> T:
            func_name = getattr(func, "__name__", repr(func))
            attempt = 0
            while True:
                try:
                    return func(*args, **kwargs)
                except Exception as e:
                    if not is_retryable_error(e):
                        raise
                    if attempt >= config.max_retries:
                        logger.warning(
                            f"{func_name}: Max retries ({config.max_retries}) exceeded: {e}"
                        )
                        raise
                    delay = config.calculate_delay(attempt)
                    logger.info(
                        f"{func_name}: Retry attempt {attempt + 1}/{config.max_retries} "
                        f"after {delay:.2f}s due to: {e}"
                    )
                    time.sleep(delay)
                    attempt += 1

        return wrapper

    return decorator


__all__ = ["RetryConfig", "is_retryable_error", "with_retry"]
