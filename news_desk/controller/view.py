"""
View Controller

Decides which source supplies the displayed list:

    Browsing(category)   -> CategoryCacheStore entry for category
    CompanyFocus(name)   -> CompanyNewsResolver result for name

Exactly one mode is active. Work started for a mode that has since been left
finishes in the background (the cache still stores its result) but never
changes the controller's items or loading flag.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Union

from news_desk.cache.store import CacheState, CategoryCacheStore
from news_desk.company.resolver import CompanyNewsResolver
from news_desk.models.news import Category, NewsItem
from news_desk.news_client.endpoints import category_key
from news_desk.search.engine import SearchSuggestionEngine

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Browsing:
    category: str


@dataclass(frozen=True)
class CompanyFocus:
    company: str


ViewMode = Union[Browsing, CompanyFocus]

ChangeCallback = Callable[["ViewController"], None]


class ViewController:
    """
    Orchestrates category tabs, company focus and refreshes.

    In Browsing mode the loading flag mirrors the store's in-flight state for
    the active category; in CompanyFocus mode it belongs to the latest resolve.
    """

    def __init__(
        self,
        store: CategoryCacheStore,
        resolver: CompanyNewsResolver,
        search: Optional[SearchSuggestionEngine] = None,
        *,
        initial_category: str | Category = Category.ALL,
    ) -> None:
        self._store = store
        self._resolver = resolver
        self._search = search

        self._last_category = category_key(initial_category)
        self._mode: ViewMode = Browsing(self._last_category)

        self._company_items: tuple[NewsItem, ...] = ()
        self._company_loading = False
        self._operation = 0

        self._listeners: list[ChangeCallback] = []
        self._store.on_state_change(self._on_store_change)

    # ── State ─────────────────────────────────────────────────────────────────

    @property
    def mode(self) -> ViewMode:
        return self._mode

    @property
    def last_category(self) -> str:
        return self._last_category

    @property
    def store(self) -> CategoryCacheStore:
        return self._store

    @property
    def search(self) -> Optional[SearchSuggestionEngine]:
        return self._search

    @property
    def loading(self) -> bool:
        if isinstance(self._mode, Browsing):
            return self._store.is_loading(self._mode.category)
        return self._company_loading

    @property
    def items(self) -> tuple[NewsItem, ...]:
        """The list to render for the current mode."""
        if isinstance(self._mode, Browsing):
            return self._store.state(self._mode.category).items
        return self._company_items

    def on_change(self, callback: ChangeCallback) -> None:
        """Register callback(controller) for mode, item and loading changes."""
        self._listeners.append(callback)

    # ── Transitions ───────────────────────────────────────────────────────────

    async def start(self) -> tuple[NewsItem, ...]:
        """Load the initial category."""
        return await self.select_category(self._last_category)

    async def select_category(self, key: str | Category) -> tuple[NewsItem, ...]:
        """Switch to Browsing(key), fetching only if the tab is not cached."""
        k = category_key(key)
        self._enter(Browsing(k))
        self._last_category = k

        entry = await self._store.get_or_fetch(k)
        return entry.items

    async def select_company(self, name: str) -> tuple[NewsItem, ...]:
        """Switch to CompanyFocus(name) and resolve its news."""
        company = name.strip()
        if self._search is not None:
            self._search.select(company)
        self._enter(CompanyFocus(company))
        return await self._resolve_company(company)

    def clear_search(self) -> None:
        """Leave company focus and return to the last browsed category."""
        if self._search is not None:
            self._search.clear()
        self._enter(Browsing(self._last_category))

    async def refresh(self) -> tuple[NewsItem, ...]:
        """Force-refresh the active category, or re-resolve the focused company."""
        mode = self._mode
        if isinstance(mode, CompanyFocus):
            return await self._resolve_company(mode.company)

        entry = await self._store.force_refresh(mode.category)
        return entry.items

    async def run_auto_refresh(self, interval_seconds: float) -> None:
        """Refresh the active view every interval_seconds until cancelled."""
        if interval_seconds <= 0:
            return
        logger.info("Auto-refresh enabled", extra={"interval_seconds": interval_seconds})
        while True:
            await asyncio.sleep(interval_seconds)
            logger.debug("Auto-refresh tick", extra={"mode": repr(self._mode)})
            await self.refresh()

    # ── Internals ─────────────────────────────────────────────────────────────

    def _enter(self, mode: ViewMode) -> None:
        self._operation += 1
        self._mode = mode
        self._company_items = ()
        self._company_loading = False
        self._notify()

    async def _resolve_company(self, company: str) -> tuple[NewsItem, ...]:
        self._operation += 1
        operation = self._operation
        self._company_loading = True
        self._notify()

        items = tuple(await self._resolver.resolve(company))

        if operation != self._operation or self._mode != CompanyFocus(company):
            logger.debug(
                "Dropping company result for inactive view",
                extra={"company": company},
            )
            return items

        self._company_items = items
        self._company_loading = False
        self._notify()
        return items

    def _on_store_change(self, key: str, state: CacheState) -> None:
        if isinstance(self._mode, Browsing) and self._mode.category == key:
            self._notify()

    def _notify(self) -> None:
        for callback in list(self._listeners):
            try:
                callback(self)
            except Exception as e:
                logger.error(
                    "View callback failed",
                    extra={"error": str(e)},
                    exc_info=True,
                )
