from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, Sequence, TypeVar

T = TypeVar("T")
R = TypeVar("R")


async def gather_in_batches(
    items: Sequence[T],
    worker: Callable[[T], Awaitable[R]],
    batch_size: int,
    on_batch_start: Callable[[int], None] | None = None,
    on_batch_end: Callable[[int], None] | None = None,
) -> list[R | BaseException]:
    """Runs ``worker`` over ``items`` with at most ``batch_size`` calls in flight.

    A batch starts only once every call of the previous batch has settled.
    Results line up with ``items``; a call that raised yields its exception.
    """

    results: list[Any] = []
    for start in range(0, len(items), batch_size):
        batch = items[start : start + batch_size]
        if on_batch_start is not None:
            on_batch_start(start)
        settled = await asyncio.gather(*(worker(item) for item in batch), return_exceptions=True)
        for outcome in settled:
            if isinstance(outcome, asyncio.CancelledError):
                raise outcome
        results.extend(settled)
        if on_batch_end is not None:
            on_batch_end(min(start + batch_size, len(items)))
    return results
