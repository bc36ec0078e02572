"""
Search Suggestion Engine

Turns keystrokes into company-name suggestions.

    set_query("R") -> set_query("Re") -> set_query("Rel")
        |  each call cancels and reschedules the debounce sleep
        v
    debounce fires once for "Rel" -> request #n -> response
        |  applied only if #n is still the latest sequence number
        v
    suggestions for "Rel"

Clearing the query or selecting a suggestion bumps the sequence number, so
late responses from before the reset are discarded.
"""
from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional

from news_desk.core.types import NewsDeskError
from news_desk.news_client.client import NewsTransport
from news_desk.telemetry import ErrorReporter, report_error

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.26
DEFAULT_MAX_SUGGESTIONS = 6


class SearchStatus(str, Enum):
    """Search session state."""

    IDLE = "idle"  # empty query
    DEBOUNCING = "debouncing"  # waiting for typing to pause
    PENDING = "pending"  # latest request in flight
    READY = "ready"  # latest request completed


@dataclass
class SearchStats:
    """Statistics for the search engine."""

    requests_issued: int = 0
    responses_applied: int = 0
    responses_discarded: int = 0
    failures: int = 0


ChangeCallback = Callable[["SearchSuggestionEngine"], None]


class SearchSuggestionEngine:
    """
    Debounced, sequence-guarded company search.

    Must be driven from inside a running event loop.
    """

    def __init__(
        self,
        transport: NewsTransport,
        reporter: ErrorReporter,
        *,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        max_suggestions: int = DEFAULT_MAX_SUGGESTIONS,
    ) -> None:
        self._transport = transport
        self._reporter = reporter
        self._debounce_seconds = debounce_seconds
        self._max_suggestions = max_suggestions

        # Session state
        self._query = ""
        self._status = SearchStatus.IDLE
        self._suggestions: tuple[str, ...] = ()
        self._sequence = 0

        # Task management
        self._debounce_task: Optional[asyncio.Task[None]] = None
        self._requests: set[asyncio.Task[None]] = set()

        self._listeners: list[ChangeCallback] = []
        self._stats = SearchStats()

    @property
    def query(self) -> str:
        return self._query

    @property
    def status(self) -> SearchStatus:
        return self._status

    @property
    def sequence(self) -> int:
        """Latest sequence number; responses tagged otherwise are stale."""
        return self._sequence

    @property
    def suggestions(self) -> tuple[str, ...]:
        """Suggestions from the most recently applied response."""
        return self._suggestions

    @property
    def visible_suggestions(self) -> tuple[str, ...]:
        """Suggestions offered for display, capped at max_suggestions."""
        return self._suggestions[: self._max_suggestions]

    @property
    def stats(self) -> SearchStats:
        return self._stats

    def on_change(self, callback: ChangeCallback) -> None:
        """Register callback(engine) for status and suggestion changes."""
        self._listeners.append(callback)

    # ── Input ─────────────────────────────────────────────────────────────────

    def set_query(self, text: str) -> None:
        """Record a keystroke; schedules a request once typing pauses."""
        self._cancel_debounce()

        query = text.strip()
        if not query:
            self._reset("")
            return

        self._query = text
        self._status = SearchStatus.DEBOUNCING
        self._debounce_task = asyncio.create_task(self._debounce(query))
        self._notify()

    def clear(self) -> None:
        """Drop the query, the pending timer and any in-flight results."""
        self._reset("")

    def select(self, name: str) -> str:
        """Accept a suggestion: the session resets and keeps name as the query."""
        self._reset(name)
        return name

    async def settle(self) -> None:
        """Wait until no debounce timer or request is outstanding."""
        while True:
            pending = [
                t for t in (self._debounce_task, *self._requests)
                if t is not None and not t.done()
            ]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    async def aclose(self) -> None:
        """Cancel all outstanding work."""
        self._cancel_debounce()
        tasks = list(self._requests)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    # ── Internals ─────────────────────────────────────────────────────────────

    def _reset(self, query: str) -> None:
        self._cancel_debounce()
        self._sequence += 1
        self._query = query
        self._suggestions = ()
        self._status = SearchStatus.IDLE
        self._notify()

    def _cancel_debounce(self) -> None:
        if self._debounce_task is not None and not self._debounce_task.done():
            self._debounce_task.cancel()
        self._debounce_task = None

    async def _debounce(self, query: str) -> None:
        await asyncio.sleep(self._debounce_seconds)
        self._debounce_task = None
        self._issue(query)

    def _issue(self, query: str) -> None:
        self._sequence += 1
        sequence = self._sequence
        self._status = SearchStatus.PENDING
        self._stats.requests_issued += 1

        task = asyncio.create_task(self._request(sequence, query))
        self._requests.add(task)
        task.add_done_callback(self._requests.discard)

        logger.debug("Search request issued", extra={"query": query, "sequence": sequence})
        self._notify()

    async def _request(self, sequence: int, query: str) -> None:
        try:
            names = await self._transport.search_companies(query)
        except NewsDeskError as e:
            self._stats.failures += 1
            await report_error(self._reporter, f"search:{query}", e)
            names = []

        if sequence != self._sequence:
            self._stats.responses_discarded += 1
            logger.debug(
                "Discarding stale search response",
                extra={"query": query, "sequence": sequence, "latest": self._sequence},
            )
            return

        self._stats.responses_applied += 1
        self._suggestions = tuple(names)
        # a newer keystroke is still waiting out its debounce window
        if self._debounce_task is not None:
            self._status = SearchStatus.DEBOUNCING
        else:
            self._status = SearchStatus.READY
        self._notify()

    def _notify(self) -> None:
        for callback in list(self._listeners):
            try:
                callback(self)
            except Exception as e:
                logger.error(
                    "Search callback failed",
                    extra={"error": str(e)},
                    exc_info=True,
                )
