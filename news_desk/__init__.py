"""
News Desk

Client-side data layer for a categorized market news reader.
Fetches news per category tab from the news service, caches each tab for the
session, runs a debounced company search and resolves a selected company's news.

Architecture:
    ViewController -> [CategoryCacheStore, SearchSuggestionEngine, CompanyNewsResolver]
                   -> NewsApiClient -> normalizer -> NewsItem

Components:
    - news_client: aiohttp transport for the news service plus item normalizer
    - cache: per-category session cache with one in-flight fetch per key
    - search: debounced company suggestions with a stale-response guard
    - company: uncached company news lookups
    - controller: view mode, loading flag and refresh orchestration
    - telemetry: error reporters (logging, Redis pub/sub)
"""
