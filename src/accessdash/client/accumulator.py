"""Incremental cursor pagination shared by the report list and asset views."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Hashable
from typing import Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

PageFetcher = Callable[[str | None], Awaitable[tuple[list[T], str | None]]]


class PaginationAccumulator(Generic[T]):
    """Holds a growing list built from successive cursor pages.

    ``items`` is always the concatenation of the fetched pages in request
    order. ``fetch_next_page`` appends and never replaces; a failure keeps
    what was already accumulated. Duplicates are kept unless ``dedupe_key``
    is given.
    """

    def __init__(
        self,
        fetch_page: PageFetcher,
        dedupe_key: Callable[[T], Hashable] | None = None,
    ) -> None:
        self._fetch_page = fetch_page
        self._dedupe_key = dedupe_key
        self._seen: set[Hashable] = set()
        self._generation = 0
        self.items: list[T] = []
        self.cursor: str | None = None
        self.more: bool = False
        self.loading: bool = False
        self.error: str | None = None

    def _append(self, page: list[T]) -> None:
        if self._dedupe_key is None:
            self.items.extend(page)
            return
        for item in page:
            key = self._dedupe_key(item)
            if key in self._seen:
                continue
            self._seen.add(key)
            self.items.append(item)

    async def _load(self, cursor: str | None) -> bool:
        generation = self._generation
        self.loading = True
        try:
            page, next_cursor = await self._fetch_page(cursor)
        except Exception as exc:
            if generation != self._generation:
                return False
            logger.warning("Page fetch failed (cursor=%s): %s", cursor, exc)
            self.error = str(exc) or exc.__class__.__name__
            self.loading = False
            return False

        # reset while in flight: this page belongs to a discarded accumulation
        if generation != self._generation:
            return False

        self._append(page)
        self.cursor = next_cursor or None
        self.more = self.cursor is not None
        self.loading = False
        return True

    def clear(self) -> None:
        """Discard the accumulation; in-flight fetches are ignored on return."""
        self._generation += 1
        self._seen.clear()
        self.items = []
        self.cursor = None
        self.more = False
        self.loading = False
        self.error = None

    async def reset_and_fetch_first_page(self) -> bool:
        """Start over from the first page."""
        self.clear()
        return await self._load(None)

    async def fetch_next_page(self) -> bool:
        """Append the next page; no-op without a cursor or while loading."""
        if self.cursor is None or self.loading:
            return False
        self.error = None
        return await self._load(self.cursor)


class KeyedAccumulator(PaginationAccumulator[T]):
    """Accumulator bound to one key (e.g. a report id).

    Attaching a different key throws the previous accumulation away and
    fetches the first page for the new key. Re-attaching the same key is a
    no-op unless its first page failed, in which case the fetch is retried.
    """

    def __init__(
        self,
        fetch_for_key: Callable[[Hashable, str | None], Awaitable[tuple[list[T], str | None]]],
        dedupe_key: Callable[[T], Hashable] | None = None,
    ) -> None:
        super().__init__(self._fetch_current, dedupe_key)
        self._fetch_for_key = fetch_for_key
        self.key: Hashable | None = None

    async def _fetch_current(self, cursor: str | None) -> tuple[list[T], str | None]:
        return await self._fetch_for_key(self.key, cursor)

    async def attach(self, key: Hashable) -> bool:
        """Bind to *key*; fetches the first page when the key changes or never loaded."""
        if key == self.key and not (self.error is not None and not self.items):
            return False
        self.key = key
        return await self.reset_and_fetch_first_page()
