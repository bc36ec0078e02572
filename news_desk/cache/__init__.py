"""
Category Cache Module

Session cache of news per category tab.
"""
from news_desk.cache.store import (
    CacheEntry,
    CacheState,
    CacheStats,
    CacheStatus,
    CategoryCacheStore,
)

__all__ = [
    "CacheEntry",
    "CacheState",
    "CacheStats",
    "CacheStatus",
    "CategoryCacheStore",
]
