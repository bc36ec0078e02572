"""
News Data Models

Display-ready news items and the category keys used to partition them.
All models use frozen dataclasses with __post_init__ validation.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Optional

DEFAULT_SECTOR = "GENERAL"


class Sentiment(str, Enum):
    """Client-side sentiment class."""

    GOOD = "good"
    BAD = "bad"
    NEUTRAL = "neutral"


class Category(str, Enum):
    """News category tabs offered by the service."""

    ALL = "ALL"
    RESULTS = "RESULTS"
    PENNY = "PENNY"
    LARGE_CAP = "LARGE CAP"
    MIDCAP = "MIDCAP"
    SMALLCAP = "SMALLCAP"
    FMCG = "FMCG"
    IT = "IT"
    BANKING = "BANKING"
    AUTO = "AUTO"
    ENERGY = "ENERGY"
    PSU = "PSU"
    TELECOM = "TELECOM"
    INDEXES = "INDEXES"
    GENERAL = "GENERAL"

    @classmethod
    def from_string(cls, value: str) -> Optional["Category"]:
        """Convert a tab label to Category, returning None if not found."""
        v = " ".join(value.strip().upper().replace("_", " ").replace("-", " ").split())
        for member in cls:
            if member.value == v:
                return member
        return _CATEGORY_ALIASES.get(v)


_CATEGORY_ALIASES = {
    "LARGECAP": Category.LARGE_CAP,
    "MID CAP": Category.MIDCAP,
    "SMALL CAP": Category.SMALLCAP,
    "BANK": Category.BANKING,
    "INDEX": Category.INDEXES,
}


@dataclass(frozen=True)
class NewsItem:
    """
    Normalized news record ready for display.

    Produced only by the normalizer; downstream code never inspects raw
    payload fields.
    """

    title: str
    sector: str = DEFAULT_SECTOR
    sentiment: Sentiment = Sentiment.NEUTRAL
    description: str = ""
    company: Optional[str] = None
    published_at: Optional[str] = None
    link: Optional[str] = None
    facts: Mapping[str, str] = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        """Validate required fields."""
        if not self.title:
            raise ValueError("title must be non-empty string")
        if not self.sector:
            raise ValueError("sector must be non-empty string")
        if not isinstance(self.sentiment, Sentiment):
            raise ValueError(f"sentiment must be a Sentiment, got {self.sentiment!r}")
        object.__setattr__(self, "facts", MappingProxyType(dict(self.facts)))
