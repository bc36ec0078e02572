"""
Search Module

Debounced company suggestions.
"""
from news_desk.search.engine import SearchStats, SearchStatus, SearchSuggestionEngine

__all__ = [
    "SearchStats",
    "SearchStatus",
    "SearchSuggestionEngine",
]
