"""
News Service HTTP Client

Thin aiohttp transport for the news service REST API. No retries, no caching:
each call is exactly one GET and either returns decoded JSON or raises.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional, Protocol, runtime_checkable

import aiohttp

from news_desk.core.types import MalformedResponse, TransportError
from news_desk.news_client import endpoints

logger = logging.getLogger(__name__)


@runtime_checkable
class NewsTransport(Protocol):
    """What the cache, search and company components need from the service."""

    async def fetch_news(self, path: str) -> list[Any]:
        """Return the raw records of a list-bearing endpoint."""
        ...

    async def search_companies(self, query: str) -> list[str]:
        """Return company names matching query, in service order."""
        ...


class NewsApiClient:
    """
    HTTP client for the news service.

    Owns its aiohttp session unless one is supplied.

    Usage:
        async with NewsApiClient("http://localhost:8000/api") as client:
            records = await client.fetch_news("/news/all")
    """

    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float = 10.0,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: Service URL including the API prefix
            timeout_seconds: Total timeout per request
            session: Shared session; the client will not close it
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self._session = session
        self._owns_session = session is None

        # Stats
        self._requests_sent = 0
        self._requests_failed = 0

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def requests_sent(self) -> int:
        """Get total requests issued."""
        return self._requests_sent

    async def __aenter__(self) -> NewsApiClient:
        self._ensure_session()
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.close()

    def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = aiohttp.ClientSession(timeout=self._timeout)
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        """Close the session if this client created it."""
        if self._session is not None and self._owns_session:
            await self._session.close()
            self._session = None

    def url_for(self, path: str) -> str:
        return f"{self._base_url}/{path.lstrip('/')}"

    async def fetch_json(self, path: str, params: Optional[dict[str, str]] = None) -> Any:
        """
        Issue one GET request and decode the JSON body.

        Raises:
            TransportError: On connection failure, timeout, non-2xx status or
                a body that is not JSON
        """
        session = self._ensure_session()
        url = self.url_for(path)
        self._requests_sent += 1

        logger.debug("GET %s", url, extra={"params": params or {}})

        try:
            async with session.get(url, params=params, timeout=self._timeout) as resp:
                resp.raise_for_status()
                return await resp.json(content_type=None)

        except aiohttp.ClientResponseError as e:
            self._requests_failed += 1
            raise TransportError(
                f"Request failed with status {e.status}",
                path=path,
                status=e.status,
            ) from e

        except asyncio.TimeoutError as e:
            self._requests_failed += 1
            raise TransportError("Request timed out", path=path) from e

        except aiohttp.ClientError as e:
            self._requests_failed += 1
            raise TransportError(f"Request failed: {e}", path=path) from e

        except ValueError as e:
            self._requests_failed += 1
            raise TransportError("Response body is not valid JSON", path=path) from e

    async def fetch_news(self, path: str) -> list[Any]:
        """
        Fetch a list-bearing endpoint and return its raw "news" records.

        A missing or null "news" field is an empty list.

        Raises:
            TransportError: See fetch_json
            MalformedResponse: If the body is not an object or "news" is not a list
        """
        data = await self.fetch_json(path)

        if not isinstance(data, dict):
            raise MalformedResponse(
                f"Expected object body, got {type(data).__name__}",
                path=path,
            )

        news = data.get("news")
        if news is None:
            return []
        if not isinstance(news, list):
            raise MalformedResponse(
                f"Expected 'news' list, got {type(news).__name__}",
                path=path,
            )
        return news

    async def fetch_company_news(self, name: str) -> list[Any]:
        """Raw news records for one company."""
        return await self.fetch_news(endpoints.company_path(name))

    async def search_companies(self, query: str) -> list[str]:
        """
        Company names matching query.

        Accepts a bare list body or an object with a "companies"/"results" list.

        Raises:
            TransportError: See fetch_json
            MalformedResponse: If no list of names can be found
        """
        path = endpoints.COMPANY_SEARCH
        data = await self.fetch_json(path, params={"q": query})

        if isinstance(data, dict):
            data = data.get("companies", data.get("results"))

        if data is None:
            return []
        if not isinstance(data, list):
            raise MalformedResponse(
                f"Expected list of company names, got {type(data).__name__}",
                path=path,
            )
        return [name for name in data if isinstance(name, str) and name.strip()]

    def get_stats(self) -> dict[str, Any]:
        """Get request statistics."""
        return {
            "base_url": self._base_url,
            "requests_sent": self._requests_sent,
            "requests_failed": self._requests_failed,
        }
