"""
News Desk Data Models

Frozen dataclasses with validation.
"""
from news_desk.models.news import (
    DEFAULT_SECTOR,
    Category,
    NewsItem,
    Sentiment,
)

__all__ = [
    "DEFAULT_SECTOR",
    "Category",
    "NewsItem",
    "Sentiment",
]
