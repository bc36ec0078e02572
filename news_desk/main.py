"""
News Desk command-line front end

Usage:
    news-desk                          # default tab (NEWS_DESK_DEFAULT_CATEGORY)
    news-desk --category FMCG          # one tab
    news-desk --company "Relaxo Footwears"
    news-desk --search Rel             # list suggestions
    news-desk --search Rel --pick 2    # show news for the 2nd suggestion
    news-desk --category BANKING --watch   # re-render on auto-refresh
"""
from __future__ import annotations

import argparse
import asyncio
import logging
import signal
import sys
from datetime import datetime, timezone
from typing import Iterable, Optional, TextIO

from dotenv import load_dotenv

from news_desk.cache import CategoryCacheStore
from news_desk.company import CompanyNewsResolver
from news_desk.config import ConfigurationError, Settings, load_settings
from news_desk.controller import Browsing, ViewController
from news_desk.models import Category, NewsItem
from news_desk.news_client import NewsApiClient, time_ago
from news_desk.search import SearchSuggestionEngine
from news_desk.telemetry import ErrorReporter, LoggingErrorReporter, RedisErrorReporter

logger = logging.getLogger("news_desk")


def format_item(item: NewsItem, now: Optional[datetime] = None) -> str:
    """Render one item as a short text block."""
    meta = [item.sector]
    if item.company:
        meta.append(item.company)
    label = time_ago(item.published_at, now)
    if label:
        meta.append(label)
    meta.append(item.sentiment.value)

    lines = [item.title, "  " + " | ".join(meta)]
    if item.description and item.description != item.title:
        lines.append("  " + item.description)
    if item.facts:
        lines.append("  " + ", ".join(f"{k}: {v}" for k, v in item.facts.items()))
    if item.link:
        lines.append("  " + item.link)
    return "\n".join(lines)


def render(
    heading: str,
    items: Iterable[NewsItem],
    *,
    limit: int = 0,
    out: Optional[TextIO] = None,
    now: Optional[datetime] = None,
) -> None:
    out = out or sys.stdout
    now = now or datetime.now(timezone.utc)
    items = list(items)
    if limit > 0:
        items = items[:limit]

    print(f"== {heading} ==", file=out)
    if not items:
        print("No news yet", file=out)
        return
    for item in items:
        print(format_item(item, now), file=out)
        print(file=out)


def heading_for(controller: ViewController) -> str:
    mode = controller.mode
    if isinstance(mode, Browsing):
        return mode.category
    return f"News for: {mode.company}"


async def build_reporter(settings: Settings) -> ErrorReporter:
    if not settings.telemetry.redis_enabled:
        return LoggingErrorReporter()
    reporter = RedisErrorReporter(
        settings.telemetry.redis_url,
        channel=settings.telemetry.error_channel,
    )
    await reporter.connect()
    return reporter


async def run(args: argparse.Namespace, settings: Settings) -> int:
    reporter = await build_reporter(settings)

    async with NewsApiClient(
        settings.api.base_url,
        timeout_seconds=settings.api.timeout_seconds,
    ) as client:
        store = CategoryCacheStore(client, reporter)
        resolver = CompanyNewsResolver(client, reporter)
        search = SearchSuggestionEngine(
            client,
            reporter,
            debounce_seconds=settings.search.debounce_seconds,
            max_suggestions=settings.search.max_suggestions,
        )
        controller = ViewController(
            store,
            resolver,
            search,
            initial_category=args.category or settings.view.default_category,
        )

        try:
            if args.search:
                search.set_query(args.search)
                await search.settle()
                suggestions = search.visible_suggestions
                if not args.pick:
                    for i, name in enumerate(suggestions, start=1):
                        print(f"{i}. {name}")
                    if not suggestions:
                        print("No matching companies")
                    return 0
                if not 1 <= args.pick <= len(suggestions):
                    print(f"--pick must be between 1 and {len(suggestions)}", file=sys.stderr)
                    return 2
                await controller.select_company(suggestions[args.pick - 1])
            elif args.company:
                await controller.select_company(args.company)
            else:
                await controller.start()

            render(heading_for(controller), controller.items, limit=args.limit)

            if args.watch:
                await watch(controller, settings, limit=args.limit)
        finally:
            await search.aclose()
            if isinstance(reporter, RedisErrorReporter):
                await reporter.close()
            log_final_stats(client, store)
    return 0


def log_final_stats(client: NewsApiClient, store: CategoryCacheStore) -> None:
    stats = store.stats
    logger.info(
        "Final stats",
        extra={
            **client.get_stats(),
            "cache_hits": stats.cache_hits,
            "network_fetches": stats.network_fetches,
            "fetch_failures": stats.failures,
        },
    )


async def watch(controller: ViewController, settings: Settings, *, limit: int) -> None:
    """Keep refreshing the active view until SIGINT/SIGTERM."""
    interval = settings.view.auto_refresh_seconds
    if interval <= 0:
        logger.warning("Auto-refresh is disabled (NEWS_DESK_AUTO_REFRESH_SECONDS=0)")
        return

    def rerender(ctl: ViewController) -> None:
        if not ctl.loading:
            render(heading_for(ctl), ctl.items, limit=limit)

    controller.on_change(rerender)

    shutdown_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, shutdown_event.set)

    refresher = asyncio.create_task(controller.run_auto_refresh(interval))
    try:
        await shutdown_event.wait()
    finally:
        logger.info("Shutting down...")
        refresher.cancel()
        await asyncio.gather(refresher, return_exceptions=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Categorized market news")
    parser.add_argument(
        "--category",
        help=f"Category tab, one of: {', '.join(c.value for c in Category)}",
    )
    parser.add_argument("--company", help="Show news for one company")
    parser.add_argument("--search", help="Search company names")
    parser.add_argument("--pick", type=int, default=0, help="Open the Nth search suggestion")
    parser.add_argument("--limit", type=int, default=0, help="Show at most N items")
    parser.add_argument("--watch", action="store_true", help="Auto-refresh the view")
    return parser


def cli(argv: Optional[list[str]] = None) -> int:
    load_dotenv()
    args = build_parser().parse_args(argv)

    try:
        settings = load_settings()
    except ConfigurationError as e:
        print(f"Configuration error: {e}", file=sys.stderr)
        return 1

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s [%(name)s] %(levelname)s - %(message)s",
    )
    return asyncio.run(run(args, settings))


if __name__ == "__main__":
    raise SystemExit(cli())
