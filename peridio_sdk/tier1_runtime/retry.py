"""
peridio_sdk.tier1_runtime.retry
────────────────────────────────
Opt-in retry/backoff policy for callers. The client itself makes exactly one
attempt per call; wrap calls with this decorator to retry transient failures
(transport errors, 5xx). Backed by Tenacity.

Usage:
    @retry_policy()
    async def fetch(api, prn):
        return await api.products().get(GetProductParams(prn=prn))
"""
from __future__ import annotations

import functools
from collections.abc import Callable
from typing import Any

from tenacity import (
    AsyncRetrying,
    retry_if_exception,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
    wait_random,
)


def is_retryable(exc: BaseException) -> bool:
    """True for errors flagged ``retryable`` (RequestFailedError, InternalServerError, ...)."""
    return bool(getattr(exc, "retryable", False))


def retry_policy(
    max_attempts: int = 3,
    min_wait: float = 0.5,
    max_wait: float = 10.0,
    jitter: float = 1.0,
    on: list[type[Exception]] | None = None,
) -> Callable:
    """
    Decorator applying exponential backoff with jitter to an async callable.

    Args:
        max_attempts: Total number of attempts (including first).
        min_wait:     Minimum wait seconds between retries.
        max_wait:     Maximum wait seconds between retries.
        jitter:       Maximum random seconds added to each wait.
        on:           Specific exception types to retry on. If None, retries
                      on errors whose ``retryable`` flag is set.
    """
    def decorator(fn: Callable) -> Callable:
        @functools.wraps(fn)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            if on:
                retry_on = retry_if_exception_type(tuple(on))
            else:
                retry_on = retry_if_exception(is_retryable)

            async for attempt in AsyncRetrying(
                stop=stop_after_attempt(max_attempts),
                wait=wait_exponential(min=min_wait, max=max_wait) + wait_random(0, jitter),
                retry=retry_on,
                reraise=True,
            ):
                with attempt:
                    return await fn(*args, **kwargs)

        return wrapper
    return decorator


__all__ = ["retry_policy", "is_retryable"]
