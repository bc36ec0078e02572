"""
Company News Resolver

One-shot, uncached lookup of a single company's news.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass

from news_desk.core.types import NewsDeskError
from news_desk.models.news import NewsItem
from news_desk.news_client.client import NewsTransport
from news_desk.news_client.endpoints import company_path
from news_desk.news_client.normalizer import normalize_many
from news_desk.telemetry import ErrorReporter, report_error

logger = logging.getLogger(__name__)


@dataclass
class ResolverStats:
    lookups: int = 0
    failures: int = 0


class CompanyNewsResolver:
    """Fetches and normalizes a company's news in source order; never raises on fetch failure."""

    def __init__(self, transport: NewsTransport, reporter: ErrorReporter) -> None:
        self._transport = transport
        self._reporter = reporter
        self._stats = ResolverStats()

    @property
    def stats(self) -> ResolverStats:
        return self._stats

    async def resolve(self, company: str) -> list[NewsItem]:
        name = company.strip()
        if not name:
            return []

        path = company_path(name)
        self._stats.lookups += 1
        logger.info("Resolving company news", extra={"company": name, "path": path})

        try:
            records = await self._transport.fetch_news(path)
        except NewsDeskError as e:
            self._stats.failures += 1
            await report_error(self._reporter, f"company:{name}", e)
            return []

        return normalize_many(records)
