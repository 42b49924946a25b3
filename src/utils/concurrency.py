"""Bounded fan-out helper for relation-source calls.

The Graph Builder issues one relation fetch per frontier node.  Those calls
are independent, but the relation source is rate-limited, so they run
through :func:`throttled_gather`: a drop-in for ``asyncio.gather`` that
wraps each awaitable in a semaphore acquire/release.

Cancellation propagates: if the caller's task is cancelled while the gather
is pending, ``asyncio.gather`` cancels every child that has not finished.
"""

from __future__ import annotations

import asyncio
from typing import Awaitable, TypeVar

_T = TypeVar("_T")


async def throttled_gather(
    coros: list[Awaitable[_T]],
    semaphore: asyncio.Semaphore,
    return_exceptions: bool = False,
) -> list[_T | BaseException]:
    """Run awaitables concurrently, at most ``semaphore`` slots at a time.

    Parameters
    ----------
    coros:
        Awaitable objects to execute concurrently.
    semaphore:
        Semaphore bounding how many awaitables run simultaneously.  Callers
        size it per request (e.g. by seed count).
    return_exceptions:
        If ``True``, exceptions are returned in the results list rather
        than raised.  Mirrors ``asyncio.gather`` semantics.

    Returns
    -------
    list
        Results in the same order as the input awaitables.
    """

    async def _wrapped(coro: Awaitable[_T]) -> _T:
        async with semaphore:
            return await coro

    tasks = [_wrapped(c) for c in coros]
    return await asyncio.gather(*tasks, return_exceptions=return_exceptions)
