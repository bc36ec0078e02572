"""
Tests for news_desk.news_client.client

The aiohttp session is replaced with MagicMock/AsyncMock; no live service required.
"""
import asyncio
import json
from unittest.mock import AsyncMock, MagicMock

import aiohttp
import pytest

from news_desk.core.types import MalformedResponse, TransportError
from news_desk.news_client.client import NewsApiClient, NewsTransport

BASE_URL = "http://localhost:8000/api"


# ── Helpers ───────────────────────────────────────────────────────────────────

def _make_session(body=None, *, status_error=None, json_error=None):
    """
    Build a mock ClientSession whose get() works as an async context manager
    yielding a response with the given JSON body.
    """
    resp = MagicMock()
    resp.raise_for_status = MagicMock(side_effect=status_error)
    resp.json = AsyncMock(return_value=body, side_effect=json_error)

    session = MagicMock()
    ctx = session.get.return_value
    ctx.__aenter__.return_value = resp
    # Falsy so exceptions raised inside the block are not swallowed
    ctx.__aexit__.return_value = False
    return session


def _status_error(status: int) -> aiohttp.ClientResponseError:
    return aiohttp.ClientResponseError(
        request_info=MagicMock(),
        history=(),
        status=status,
        message="error",
    )


# ── fetch_json() ──────────────────────────────────────────────────────────────

async def test_fetch_json_requests_joined_url():
    session = _make_session({"news": []})
    client = NewsApiClient(BASE_URL, session=session)

    await client.fetch_json("/news/all")

    session.get.assert_called_once()
    assert session.get.call_args.args[0] == "http://localhost:8000/api/news/all"
    assert client.requests_sent == 1


async def test_non_2xx_raises_transport_error_with_status():
    session = _make_session(status_error=_status_error(503))
    client = NewsApiClient(BASE_URL, session=session)

    with pytest.raises(TransportError, match="status 503") as exc_info:
        await client.fetch_json("/news/all")

    assert exc_info.value.status == 503
    assert exc_info.value.path == "/news/all"


async def test_connection_error_raises_transport_error():
    session = MagicMock()
    session.get.side_effect = aiohttp.ClientConnectionError("refused")
    client = NewsApiClient(BASE_URL, session=session)

    with pytest.raises(TransportError, match="Request failed"):
        await client.fetch_json("/news/all")


async def test_timeout_raises_transport_error():
    session = MagicMock()
    session.get.side_effect = asyncio.TimeoutError()
    client = NewsApiClient(BASE_URL, session=session)

    with pytest.raises(TransportError, match="timed out"):
        await client.fetch_json("/news/all")


async def test_invalid_json_raises_transport_error():
    session = _make_session(json_error=json.JSONDecodeError("Expecting value", "<html>", 0))
    client = NewsApiClient(BASE_URL, session=session)

    with pytest.raises(TransportError, match="not valid JSON"):
        await client.fetch_json("/news/all")

    assert client.get_stats()["requests_failed"] == 1


# ── fetch_news() ──────────────────────────────────────────────────────────────

async def test_fetch_news_returns_records():
    records = [{"title": "A"}, {"title": "B"}]
    client = NewsApiClient(BASE_URL, session=_make_session({"news": records}))

    assert await client.fetch_news("/news/sector/fmcg") == records


@pytest.mark.parametrize("body", [{}, {"news": None}, {"count": 0}])
async def test_fetch_news_missing_array_is_empty(body):
    client = NewsApiClient(BASE_URL, session=_make_session(body))
    assert await client.fetch_news("/news/all") == []


async def test_fetch_news_wrong_typed_array_is_malformed():
    client = NewsApiClient(BASE_URL, session=_make_session({"news": "oops"}))
    with pytest.raises(MalformedResponse, match="'news' list"):
        await client.fetch_news("/news/all")


async def test_fetch_news_non_object_body_is_malformed():
    client = NewsApiClient(BASE_URL, session=_make_session([{"title": "A"}]))
    with pytest.raises(MalformedResponse, match="object body"):
        await client.fetch_news("/news/all")


async def test_fetch_company_news_encodes_name():
    session = _make_session({"news": []})
    client = NewsApiClient(BASE_URL, session=session)

    await client.fetch_company_news("Relaxo Footwears")

    assert session.get.call_args.args[0] == (
        "http://localhost:8000/api/news/company/Relaxo%20Footwears"
    )


# ── search_companies() ────────────────────────────────────────────────────────

async def test_search_companies_sends_query_param():
    names = ["Reliance Industries Limited", "Relaxo Footwears"]
    session = _make_session(names)
    client = NewsApiClient(BASE_URL, session=session)

    result = await client.search_companies("Rel")

    assert result == names
    assert session.get.call_args.args[0] == "http://localhost:8000/api/companies/search"
    assert session.get.call_args.kwargs["params"] == {"q": "Rel"}


async def test_search_companies_drops_non_string_entries():
    client = NewsApiClient(BASE_URL, session=_make_session(["Infosys", None, 42, " ", "TCS"]))
    assert await client.search_companies("I") == ["Infosys", "TCS"]


async def test_search_companies_accepts_wrapped_list():
    client = NewsApiClient(BASE_URL, session=_make_session({"companies": ["Wipro"]}))
    assert await client.search_companies("Wi") == ["Wipro"]


async def test_search_companies_rejects_scalar_body():
    client = NewsApiClient(BASE_URL, session=_make_session("Wipro"))
    with pytest.raises(MalformedResponse):
        await client.search_companies("Wi")


# ── Lifecycle ─────────────────────────────────────────────────────────────────

async def test_injected_session_is_not_closed():
    session = _make_session({"news": []})
    client = NewsApiClient(BASE_URL, session=session)

    await client.close()

    session.close.assert_not_called()


def test_client_satisfies_transport_protocol():
    assert isinstance(NewsApiClient(BASE_URL, session=MagicMock()), NewsTransport)
