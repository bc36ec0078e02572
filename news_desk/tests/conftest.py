"""
Shared fixtures: an in-memory transport and a recording error reporter.

No network access; every test drives the real event loop.
"""
from __future__ import annotations

import asyncio
from typing import Any

import pytest

from news_desk.cache import CategoryCacheStore
from news_desk.company import CompanyNewsResolver


class FakeTransport:
    """
    NewsTransport double.

    news:        path  -> list of raw records, or an exception to raise
    companies:   query -> list of names, or an exception to raise
    gates:       path or query -> asyncio.Event the call waits on
    """

    def __init__(self) -> None:
        self.news: dict[str, Any] = {}
        self.companies: dict[str, Any] = {}
        self.gates: dict[str, asyncio.Event] = {}
        self.news_calls: list[str] = []
        self.search_calls: list[tuple[str, float]] = []

    def gate(self, key: str) -> asyncio.Event:
        event = asyncio.Event()
        self.gates[key] = event
        return event

    async def fetch_news(self, path: str) -> list[Any]:
        self.news_calls.append(path)
        if path in self.gates:
            await self.gates[path].wait()
        result = self.news.get(path, [])
        if isinstance(result, Exception):
            raise result
        return list(result)

    async def search_companies(self, query: str) -> list[str]:
        self.search_calls.append((query, asyncio.get_running_loop().time()))
        if query in self.gates:
            await self.gates[query].wait()
        result = self.companies.get(query, [])
        if isinstance(result, Exception):
            raise result
        return list(result)


class RecordingReporter:
    """ErrorReporter double that keeps every (context, error) pair."""

    def __init__(self) -> None:
        self.reports: list[tuple[str, BaseException]] = []

    async def report(self, context: str, error: BaseException) -> None:
        self.reports.append((context, error))


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def store(transport, reporter) -> CategoryCacheStore:
    return CategoryCacheStore(transport, reporter)


@pytest.fixture
def resolver(transport, reporter) -> CompanyNewsResolver:
    return CompanyNewsResolver(transport, reporter)
