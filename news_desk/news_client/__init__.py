"""
News Client Module

HTTP transport for the news service and the raw-record normalizer.
"""
from news_desk.news_client.client import NewsApiClient, NewsTransport
from news_desk.news_client.endpoints import category_key, company_path, endpoint_for
from news_desk.news_client.normalizer import normalize_many, normalize_news, time_ago

__all__ = [
    "NewsApiClient",
    "NewsTransport",
    "category_key",
    "company_path",
    "endpoint_for",
    "normalize_many",
    "normalize_news",
    "time_ago",
]
