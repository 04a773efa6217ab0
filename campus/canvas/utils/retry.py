"""Bounded retry with exponential backoff for async callables."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import TypeVar

T = TypeVar("T")


async def retry_async(
    func: Callable[[], Awaitable[T]],
    *,
    retries: int,
    base_delay: float,
    retry_on: tuple[type[BaseException], ...],
    max_delay: float = 10.0,
    on_retry: Callable[[int, float, BaseException], None] | None = None,
) -> T:
    """Call ``func`` until it succeeds or ``retries`` extra attempts are spent.

    Only exceptions in ``retry_on`` are retried; anything else propagates
    immediately. The delay doubles after each failure, capped at ``max_delay``.

    Args:
        func: Zero-argument coroutine factory
        retries: Extra attempts after the first (0 = call once)
        base_delay: Delay before the first retry, in seconds
        retry_on: Exception types worth retrying
        max_delay: Upper bound for a single delay, in seconds
        on_retry: Called with (attempt, delay, error) before each sleep

    Returns:
        The first successful result
    """
    attempt = 0
    while True:
        try:
            return await func()
        except retry_on as exc:
            if attempt >= retries:
                raise
            delay = min(base_delay * (2**attempt), max_delay)
            attempt += 1
            if on_retry is not None:
                on_retry(attempt, delay, exc)
            await asyncio.sleep(delay)
