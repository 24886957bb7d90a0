"""Async retry helper with bounded exponential backoff."""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, TypeVar

from chronotoken.domain import TransientReadError


T = TypeVar("T")


def backoff_delay(attempt: int, base_delay_seconds: float, max_delay_seconds: float) -> float:
    """Delay before retrying after the given (1-based) failed attempt."""
    return min(base_delay_seconds * (2 ** (attempt - 1)), max_delay_seconds)


async def with_retry(
    func: Callable[[], Awaitable[T]],
    *,
    attempts: int = 3,
    base_delay_seconds: float = 0.2,
    max_delay_seconds: float = 2.0,
    retry_on: tuple[type[BaseException], ...] = (TransientReadError,),
    on_retry: Callable[[int, float, Exception], None] | None = None,
    sleep: Callable[[float], Awaitable[object]] = asyncio.sleep,
) -> T:
    """
    Await `func()` until it succeeds or attempts run out.

    Only exceptions in `retry_on` are retried; anything else propagates
    immediately. The last retryable error is re-raised when attempts are
    exhausted.
    """
    if attempts < 1:
        raise ValueError(f"attempts must be >= 1, got {attempts}")
    for attempt in range(1, attempts + 1):
        try:
            return await func()
        except retry_on as exc:
            if attempt >= attempts:
                raise
            delay = backoff_delay(attempt, base_delay_seconds, max_delay_seconds)
            if on_retry:
                on_retry(attempt, delay, exc)
            await sleep(delay)
    raise RuntimeError("RETRY_FAILED")
