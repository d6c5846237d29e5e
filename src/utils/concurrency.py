"""Async helpers shared by the chart aggregation services.

Two patterns live here:

1. **throttled_gather** -- ``asyncio.gather`` with each awaitable wrapped in
   a semaphore acquire/release.  The overlay enricher uses it to fan out one
   analytics request per app without flooding the analytics provider.

2. **fold_batches** -- the opposite shape: a strictly sequential left fold
   over fixed-size batches with an injected async delay between them.  The
   bulk resolver uses it so only one lookup batch is in flight at a time and
   the politeness pause can be swapped out in tests.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, Sequence, TypeVar

_T = TypeVar("_T")
_A = TypeVar("_A")

DelayFn = Callable[[float], Awaitable[None]]

# Default cap on concurrent overlay requests.  Overlay windows are small
# (six ranks by default), so this only matters for the direct overlay
# endpoint where a caller can submit an arbitrary id list.
_DEFAULT_CONCURRENCY = 8


async def throttled_gather(
    coros: list[Awaitable[_T]],
    semaphore: asyncio.Semaphore | None = None,
    return_exceptions: bool = True,
) -> list[_T | BaseException]:
    """Run awaitables concurrently with semaphore throttling.

    Parameters
    ----------
    coros:
        Awaitable objects to execute concurrently.
    semaphore:
        Semaphore bounding concurrency.  A fresh one sized
        ``_DEFAULT_CONCURRENCY`` is created per call when omitted, so no
        state leaks between requests.
    return_exceptions:
        If ``True``, exceptions are returned in the results list rather
        than being raised.  Mirrors ``asyncio.gather`` semantics.

    Returns
    -------
    list[_T | BaseException]
        Results in the same order as the input coroutines.
    """
    if semaphore is None:
        semaphore = asyncio.Semaphore(_DEFAULT_CONCURRENCY)

    async def _wrapped(coro: Awaitable[_T]) -> _T:
        async with semaphore:
            return await coro

    tasks = [_wrapped(c) for c in coros]
    return await asyncio.gather(*tasks, return_exceptions=return_exceptions)


def chunked(items: Sequence[_T], size: int) -> list[list[_T]]:
    """Split *items* into consecutive lists of at most *size* elements."""
    if size <= 0:
        raise ValueError("chunk size must be positive")
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


async def fold_batches(
    batches: Sequence[Sequence[_T]],
    step: Callable[[_A, Sequence[_T]], Awaitable[_A]],
    initial: _A,
    delay: float = 0.0,
    sleep: DelayFn = asyncio.sleep,
) -> _A:
    """Sequentially fold *step* over *batches*, pausing *delay* seconds between them.

    Each ``step(acc, batch)`` is awaited before the next batch starts.  The
    pause is only taken between batches, never before the first or after
    the last, and is skipped entirely for a single batch.
    """
    acc = initial
    for index, batch in enumerate(batches):
        if index > 0 and delay > 0:
            await sleep(delay)
        acc = await step(acc, batch)
    return acc
