"""Retry helpers without external dependencies."""

from __future__ import annotations

import asyncio
import os
import random
from collections.abc import Awaitable, Callable
from typing import TypeVar

T = TypeVar("T")

RETRY_BASE_DELAY = float(os.environ.get("RETRY_BASE_DELAY", 1.0))


async def retry_async(
    func: Callable[[], Awaitable[T]],
    *,
    should_retry: Callable[[T, int], bool],
    base_delay: float | None = None,
) -> T:
    """Call ``func`` until ``should_retry(result, attempt)`` says stop.

    ``attempt`` is 1-based. Delays double after each attempt, with jitter.
    The caller's predicate owns the attempt bound.
    """
    delay = RETRY_BASE_DELAY if base_delay is None else base_delay
    attempt = 1
    while True:
        result = await func()
        if not should_retry(result, attempt):
            return result
        if delay > 0:
            await asyncio.sleep(delay + random.random() * delay)
            delay *= 2
        attempt += 1
