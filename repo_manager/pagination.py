"""Page-following for list endpoints that signal the end with an empty page."""

from __future__ import annotations

import logging
from typing import Awaitable, Callable, TypeVar

log = logging.getLogger(__name__)

T = TypeVar("T")

FetchPage = Callable[[int], Awaitable[list[T]]]


async def collect(fetch_page: FetchPage[T], *, start: int = 1) -> list[T]:
    """Fetch pages ``start``, ``start + 1``, ... until one comes back empty.

    Pages are requested one at a time. An error from any page propagates and
    whatever was accumulated so far is dropped. There is no page limit: an
    endpoint that never returns an empty page is never exhausted.
    """
    items: list[T] = []
    page = start
    while True:
        batch = await fetch_page(page)
        if not batch:
            log.debug("Pagination finished after %d page(s), %d item(s)", page - start + 1, len(items))
            return items
        items.extend(batch)
        page += 1
