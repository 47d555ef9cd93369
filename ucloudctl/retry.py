"""Generic retry decorator with exponential backoff.

Used by the API client to retry read and mutate actions on transient
transport failures. Resource-creating actions are never retried.

Example:
    from ucloudctl.retry import retry, on_transient_http_error

    @retry(on=on_transient_http_error, max_attempts=3)
    async def describe():
        ...
"""

from __future__ import annotations

import asyncio
import functools
import random
from collections.abc import Awaitable, Callable
from typing import ParamSpec, TypeVar

from loguru import logger

P = ParamSpec("P")
T = TypeVar("T")

RetryPredicate = Callable[[Exception], bool]


def retry(
    on: type[Exception] | tuple[type[Exception], ...] | RetryPredicate = Exception,
    max_attempts: int = 3,
    base_delay: float = 0.5,
    exponential_base: float = 2.0,
    max_delay: float = 10.0,
    jitter: bool = True,
) -> Callable[[Callable[P, Awaitable[T]]], Callable[P, Awaitable[T]]]:
    """Decorator that retries async functions with exponential backoff.

    Args:
        on: When to retry. An exception class, a tuple of classes or a predicate.
        max_attempts: Maximum number of attempts (including the first one).
        base_delay: Initial delay in seconds before first retry.
        exponential_base: Multiplier for exponential backoff.
            Delay formula: min(base_delay * (exponential_base ** attempt), max_delay)
        max_delay: Maximum delay cap in seconds.
        jitter: Whether to add random jitter (up to 10%) to the delay.
    """
    if isinstance(on, type) and issubclass(on, Exception):
        should_retry: RetryPredicate = lambda e: isinstance(e, on)
    elif isinstance(on, tuple):
        should_retry = lambda e: isinstance(e, on)
    else:
        should_retry = on

    def decorator(func: Callable[P, Awaitable[T]]) -> Callable[P, Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            for attempt in range(max(1, max_attempts)):
                try:
                    return await func(*args, **kwargs)
                except Exception as e:
                    has_retries_left = attempt < max_attempts - 1
                    if not (should_retry(e) and has_retries_left):
                        raise

                    delay = min(base_delay * (exponential_base**attempt), max_delay)
                    if jitter:
                        delay += random.uniform(0, delay * 0.1)

                    logger.bind(component="retry").warning(
                        "Retry {n}/{total} after {kind}: {error}. Waiting {delay:.1f}s...",
                        n=attempt + 1, total=max_attempts,
                        kind=type(e).__name__, error=e, delay=delay,
                    )
                    await asyncio.sleep(delay)
            raise AssertionError("unreachable")

        return wrapper  # type: ignore[return-value]

    return decorator


def on_transient_http_error(e: Exception) -> bool:
    """Retry on connection failures, throttling and server-side errors."""
    return bool(getattr(e, "transient", False))
