from __future__ import annotations

import asyncio
from typing import Awaitable, Iterable, TypeVar

T = TypeVar("T")


async def settle_all(aws: Iterable[Awaitable[T]]) -> list[T]:
    """Run ``aws`` concurrently and wait for every one of them to settle.

    Results keep the input order. If any awaitable failed, the first failure
    (in input order) is raised once all of them are done.
    """
    results = await asyncio.gather(*aws, return_exceptions=True)
    for r in results:
        if isinstance(r, BaseException):
            raise r
    return results
