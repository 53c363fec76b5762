"""Bounded fan-out for per-user batch work."""

import asyncio
from typing import Awaitable, Callable, Sequence, TypeVar

T = TypeVar("T")
R = TypeVar("R")


async def map_with_concurrency(
    items: Sequence[T],
    concurrency: int,
    fn: Callable[[T], Awaitable[R]],
) -> list[R]:
    """Apply an async function to every item with at most ``concurrency`` in flight.

    Results are returned in input order. Exceptions raised by ``fn`` propagate;
    callers that want per-item failure isolation catch inside ``fn``.
    """
    semaphore = asyncio.Semaphore(max(1, concurrency))

    async def run(item: T) -> R:
        async with semaphore:
            return await fn(item)

    return list(await asyncio.gather(*(run(item) for item in items)))


__all__ = ["map_with_concurrency"]
