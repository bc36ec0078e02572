"""
News Item Normalizer

Transforms raw news service records into display-ready NewsItem objects.
Every function here is pure; "now" is passed in where time matters.
"""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Iterable, Optional

from dateutil import parser as dtparser

from news_desk.core.types import ValidationError
from news_desk.models.news import DEFAULT_SECTOR, NewsItem, Sentiment

logger = logging.getLogger(__name__)

POSITIVE_TOKENS = ("good", "positive", "bull", "up", "buy", "green")
NEGATIVE_TOKENS = ("bad", "negative", "bear", "down", "sell", "red")

# Long-form content is clipped to this many characters when used as description
MAX_CONTENT_CHARS = 280

# Words kept when the description falls back to the title
EXCERPT_WORDS = 28

ELLIPSIS = "..."

# Shorter strings such as "5" are read by dateutil as a day of the current month
MIN_DATE_LEN = 8

FACT_FIELDS = ("revenue", "net_profit", "eps", "dividend", "buyback_amount")


def _text(value: Any) -> str:
    """Stripped string form of a raw field; None and non-scalars become ""."""
    if value is None or isinstance(value, (dict, list, tuple)):
        return ""
    return str(value).strip()


def _first_text(raw: dict[str, Any], *keys: str) -> str:
    for key in keys:
        value = _text(raw.get(key))
        if value:
            return value
    return ""


def resolve_sentiment(label: Any) -> Sentiment:
    """
    Map a free-text sentiment label onto the fixed client classes.

    Substring match on the lower-cased label; the positive lexicon is checked
    before the negative one.
    """
    text = _text(label).lower()
    if not text:
        return Sentiment.NEUTRAL
    if any(token in text for token in POSITIVE_TOKENS):
        return Sentiment.GOOD
    if any(token in text for token in NEGATIVE_TOKENS):
        return Sentiment.BAD
    return Sentiment.NEUTRAL


def excerpt(text: str, max_words: int = EXCERPT_WORDS) -> str:
    """First max_words words of text, with an ellipsis if anything was cut."""
    words = _text(text).split()
    if len(words) <= max_words:
        return " ".join(words)
    return " ".join(words[:max_words]) + ELLIPSIS


def resolve_description(raw: dict[str, Any], max_words: int = EXCERPT_WORDS) -> str:
    """
    Pick the description text.

    Priority: summary -> description -> clipped long-form content ->
    title excerpt -> "".
    """
    explicit = _first_text(raw, "summary", "description")
    if explicit:
        return explicit

    content = _first_text(raw, "content", "raw_text")
    if content:
        return content[:MAX_CONTENT_CHARS]

    return excerpt(_text(raw.get("title")), max_words)


def resolve_sector(raw: dict[str, Any]) -> str:
    """Sector label: sector -> category -> first tag -> GENERAL."""
    label = _first_text(raw, "sector", "category")
    if label:
        return label

    tags = raw.get("tags")
    if isinstance(tags, (list, tuple)) and tags:
        first = _text(tags[0])
        if first:
            return first

    return DEFAULT_SECTOR


def resolve_facts(raw: dict[str, Any]) -> dict[str, str]:
    """
    Collect display facts from a nested "facts" object and known top-level fields.

    Values are stringified; empty values are dropped.
    """
    facts: dict[str, str] = {}

    nested = raw.get("facts")
    if isinstance(nested, dict):
        for name, value in nested.items():
            text = _text(value)
            if text:
                facts[str(name)] = text

    for name in FACT_FIELDS:
        if name in facts:
            continue
        text = _text(raw.get(name))
        if text:
            facts[name] = text

    return facts


def parse_timestamp(ts: str) -> Optional[datetime]:
    """
    Parse a timestamp to a UTC-aware datetime.

    ISO 8601 is tried first; RFC 2822 (RSS pubDate) and other common layouts
    go through dateutil. Returns None for anything unparseable.
    """
    value = _text(ts)
    if not value:
        return None

    iso = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        dt = datetime.fromisoformat(iso)
    except ValueError:
        if len(value) < MIN_DATE_LEN:
            return None
        try:
            dt = dtparser.parse(value)
        except (ValueError, OverflowError):
            return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def time_ago(ts: Optional[str], now: Optional[datetime] = None) -> str:
    """
    Relative-time label such as "42s ago", "5m ago", "3h ago" or "2d ago".

    An absent timestamp yields ""; an unparseable one is returned unchanged.
    Timestamps in the future count as zero seconds ago.
    """
    if not ts:
        return ""

    dt = parse_timestamp(ts)
    if dt is None:
        return ts

    now = now or datetime.now(timezone.utc)
    diff = max(0, int((now - dt).total_seconds()))

    if diff < 60:
        return f"{diff}s ago"
    if diff < 3600:
        return f"{diff // 60}m ago"
    if diff < 86400:
        return f"{diff // 3600}h ago"
    return f"{diff // 86400}d ago"


def validate_news_record(raw: Any) -> None:
    """
    Validate raw news record structure.

    Raises:
        ValidationError: If the record is not an object or has no title
    """
    if not isinstance(raw, dict):
        raise ValidationError(
            f"Expected dict, got {type(raw).__name__}",
            field="record",
            value=raw,
        )

    if not _text(raw.get("title")):
        raise ValidationError(
            "Missing or empty required field: title",
            field="title",
        )


def normalize_news(raw: dict[str, Any]) -> NewsItem:
    """
    Transform a single raw record into a NewsItem.

    Raises:
        ValidationError: If the record is invalid
    """
    validate_news_record(raw)

    company = _text(raw.get("company")) or None
    published_at = _first_text(raw, "publishedAt", "pubDate", "published_at", "published") or None
    link = _first_text(raw, "link", "url") or None

    return NewsItem(
        title=_text(raw["title"]),
        company=company,
        sector=resolve_sector(raw),
        sentiment=resolve_sentiment(raw.get("sentiment") or raw.get("tag")),
        description=resolve_description(raw),
        published_at=published_at,
        link=link,
        facts=resolve_facts(raw),
    )


def normalize_many(records: Iterable[Any]) -> list[NewsItem]:
    """Normalize records in source order, skipping the ones that fail validation."""
    items: list[NewsItem] = []
    skipped = 0

    for raw in records:
        try:
            items.append(normalize_news(raw))
        except ValidationError as e:
            skipped += 1
            logger.warning(
                "Skipping news record",
                extra={"error": str(e), "field": e.field},
            )

    if skipped:
        logger.info(
            "Normalized news batch",
            extra={"normalized": len(items), "skipped": skipped},
        )
    return items
