"""
Category Cache Store

Session-lifetime cache of normalized news per category tab.

Policy:
    - cache-first: any stored entry, even an empty one, is served without a fetch
    - force_refresh always fetches and keeps the previous entry if it fails
    - at most one fetch per key is in flight; later callers join it
    - failures are reported and never raised to callers
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Optional

from news_desk.core.types import NewsDeskError
from news_desk.models.news import Category, NewsItem
from news_desk.news_client.client import NewsTransport
from news_desk.news_client.endpoints import category_key, endpoint_for
from news_desk.news_client.normalizer import normalize_many
from news_desk.telemetry import ErrorReporter, report_error

logger = logging.getLogger(__name__)


class CacheStatus(str, Enum):
    """Lifecycle of one category key."""

    EMPTY = "empty"  # never fetched
    LOADING = "loading"  # fetch in flight
    READY = "ready"  # entry stored


@dataclass(frozen=True)
class CacheEntry:
    """Most recent fetch result for one category."""

    items: tuple[NewsItem, ...]
    fetched_at: datetime


@dataclass(frozen=True)
class CacheState:
    """
    Observable view of one key.

    While LOADING, items holds the previous entry's items (if any) so a
    refreshing tab keeps showing its stale list.
    """

    status: CacheStatus
    items: tuple[NewsItem, ...] = ()


@dataclass
class CacheStats:
    """Statistics for the cache store."""

    cache_hits: int = 0
    network_fetches: int = 0
    joined_in_flight: int = 0
    failures: int = 0


StateCallback = Callable[[str, CacheState], None]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class CategoryCacheStore:
    """
    Per-category news cache backed by a NewsTransport.

    Only the fetch-completion path writes entries; readers get immutable
    CacheEntry/CacheState snapshots.
    """

    def __init__(
        self,
        transport: NewsTransport,
        reporter: ErrorReporter,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._transport = transport
        self._reporter = reporter
        self._clock = clock

        self._entries: dict[str, CacheEntry] = {}
        self._in_flight: dict[str, asyncio.Task[CacheEntry]] = {}
        self._listeners: list[StateCallback] = []
        self._stats = CacheStats()

    @property
    def stats(self) -> CacheStats:
        """Get cache statistics."""
        return self._stats

    @property
    def cached_keys(self) -> list[str]:
        return list(self._entries)

    def on_state_change(self, callback: StateCallback) -> None:
        """Register callback(key, state) for every state transition."""
        self._listeners.append(callback)

    def entry(self, key: str | Category) -> Optional[CacheEntry]:
        return self._entries.get(category_key(key))

    def is_loading(self, key: str | Category) -> bool:
        return category_key(key) in self._in_flight

    def state(self, key: str | Category) -> CacheState:
        """Current state of a key."""
        k = category_key(key)
        entry = self._entries.get(k)
        items = entry.items if entry is not None else ()

        if k in self._in_flight:
            return CacheState(CacheStatus.LOADING, items)
        if entry is not None:
            return CacheState(CacheStatus.READY, items)
        return CacheState(CacheStatus.EMPTY)

    async def get_or_fetch(self, key: str | Category) -> CacheEntry:
        """
        Return the cached entry for key, fetching it only if none exists.

        Never raises for fetch failures; a failed first fetch yields an empty entry.
        """
        k = category_key(key)
        entry = self._entries.get(k)
        if entry is not None:
            self._stats.cache_hits += 1
            logger.debug("Cache hit", extra={"category": k, "items": len(entry.items)})
            return entry

        return await self._join_or_start(k, keep_previous=False)

    async def force_refresh(self, key: str | Category) -> CacheEntry:
        """
        Fetch key regardless of cache state.

        On success the entry is overwritten; on failure the previous entry is
        returned unchanged.
        """
        return await self._join_or_start(category_key(key), keep_previous=True)

    async def _join_or_start(self, key: str, *, keep_previous: bool) -> CacheEntry:
        task = self._in_flight.get(key)
        if task is None:
            task = asyncio.create_task(self._fetch(key, keep_previous=keep_previous))
            self._in_flight[key] = task
            self._emit(key)
        else:
            self._stats.joined_in_flight += 1
            logger.debug("Joining in-flight fetch", extra={"category": key})

        # Shielded so a cancelled caller does not abort the shared fetch
        return await asyncio.shield(task)

    async def _fetch(self, key: str, *, keep_previous: bool) -> CacheEntry:
        path = endpoint_for(key)
        self._stats.network_fetches += 1
        logger.info("Fetching category", extra={"category": key, "path": path})

        try:
            records = await self._transport.fetch_news(path)
            entry = CacheEntry(items=tuple(normalize_many(records)), fetched_at=self._clock())
            self._entries[key] = entry
            logger.info(
                "Category loaded",
                extra={"category": key, "items": len(entry.items)},
            )
            return entry

        except NewsDeskError as e:
            self._stats.failures += 1
            await report_error(self._reporter, f"category:{key}", e)

            previous = self._entries.get(key)
            if keep_previous and previous is not None:
                return previous

            entry = CacheEntry(items=(), fetched_at=self._clock())
            self._entries[key] = entry
            return entry

        finally:
            self._in_flight.pop(key, None)
            self._emit(key)

    def _emit(self, key: str) -> None:
        if not self._listeners:
            return
        state = self.state(key)
        for callback in list(self._listeners):
            try:
                callback(key, state)
            except Exception as e:
                logger.error(
                    "State callback failed",
                    extra={"category": key, "error": str(e)},
                    exc_info=True,
                )
