"""
Tests for news_desk.controller.view

End-to-end through the real store, resolver and search engine over FakeTransport.
"""
import asyncio

import pytest

from news_desk.controller import Browsing, CompanyFocus, ViewController
from news_desk.search import SearchSuggestionEngine

ALL = "/news/all"
BANKING = "/news/sector/banking"
RELIANCE = "/news/company/Reliance%20Industries%20Limited"
RELAXO = "/news/company/Relaxo%20Footwears"


@pytest.fixture
def search(transport, reporter):
    return SearchSuggestionEngine(transport, reporter, debounce_seconds=0.01)


@pytest.fixture
def controller(store, resolver, search):
    return ViewController(store, resolver, search)


async def _flush(rounds: int = 5) -> None:
    for _ in range(rounds):
        await asyncio.sleep(0)


# ── Browsing ──────────────────────────────────────────────────────────────────

async def test_start_loads_initial_category(controller, transport):
    transport.news[ALL] = [{"title": "Sensex opens higher"}]

    items = await controller.start()

    assert controller.mode == Browsing("ALL")
    assert [i.title for i in items] == ["Sensex opens higher"]
    assert [i.title for i in controller.items] == ["Sensex opens higher"]
    assert controller.loading is False


async def test_initial_category_is_configurable(store, resolver, transport):
    controller = ViewController(store, resolver, initial_category="banking")

    await controller.start()

    assert controller.mode == Browsing("BANKING")
    assert transport.news_calls == [BANKING]


async def test_revisiting_a_tab_uses_cache(controller, transport):
    await controller.select_category("BANKING")
    await controller.select_category("ALL")
    await controller.select_category("BANKING")

    assert transport.news_calls == [BANKING, ALL]


async def test_loading_flag_tracks_category_fetch(controller, transport):
    gate = transport.gate(BANKING)

    task = asyncio.create_task(controller.select_category("BANKING"))
    await _flush()
    assert controller.loading is True

    gate.set()
    await task
    assert controller.loading is False


# ── Company focus ─────────────────────────────────────────────────────────────

async def test_search_then_select_second_suggestion(controller, search, transport):
    transport.companies["Rel"] = ["Reliance Industries Limited", "Relaxo Footwears"]
    transport.news[RELAXO] = [{"title": "Relaxo Q3 results"}]

    search.set_query("Rel")
    await search.settle()
    chosen = search.visible_suggestions[1]
    await controller.select_company(chosen)

    assert transport.news_calls[-1] == RELAXO
    assert controller.mode == CompanyFocus("Relaxo Footwears")
    assert [i.title for i in controller.items] == ["Relaxo Q3 results"]
    assert search.query == "Relaxo Footwears"
    assert search.suggestions == ()


async def test_company_news_is_never_cached(controller, transport):
    await controller.select_company("Relaxo Footwears")
    controller.clear_search()
    await controller.select_company("Relaxo Footwears")

    assert transport.news_calls == [RELAXO, RELAXO]


async def test_clear_search_returns_to_last_category(controller, transport):
    transport.news[BANKING] = [{"title": "HDFC Bank update"}]
    await controller.select_category("BANKING")
    await controller.select_company("Relaxo Footwears")

    controller.clear_search()

    assert controller.mode == Browsing("BANKING")
    assert [i.title for i in controller.items] == ["HDFC Bank update"]
    assert transport.news_calls == [BANKING, RELAXO]


async def test_selecting_company_during_category_fetch(controller, transport, store):
    transport.news[BANKING] = [{"title": "Bank news"}]
    transport.news[RELAXO] = [{"title": "Relaxo news"}]
    gate = transport.gate(BANKING)

    category_task = asyncio.create_task(controller.select_category("BANKING"))
    await _flush()
    await controller.select_company("Relaxo Footwears")

    assert controller.mode == CompanyFocus("Relaxo Footwears")
    assert controller.loading is False

    gate.set()
    await category_task

    # Category result lands in the cache but does not take over the view
    assert controller.mode == CompanyFocus("Relaxo Footwears")
    assert [i.title for i in controller.items] == ["Relaxo news"]
    assert [i.title for i in store.entry("BANKING").items] == ["Bank news"]


async def test_superseded_company_result_is_dropped(controller, transport):
    transport.news[RELIANCE] = [{"title": "Reliance news"}]
    transport.news[RELAXO] = [{"title": "Relaxo news"}]
    gate = transport.gate(RELIANCE)

    first = asyncio.create_task(controller.select_company("Reliance Industries Limited"))
    await _flush()
    assert controller.loading is True

    await controller.select_company("Relaxo Footwears")
    gate.set()
    await first

    assert controller.mode == CompanyFocus("Relaxo Footwears")
    assert [i.title for i in controller.items] == ["Relaxo news"]
    assert controller.loading is False


async def test_company_result_dropped_after_clear(controller, transport):
    transport.news[RELAXO] = [{"title": "Relaxo news"}]
    gate = transport.gate(RELAXO)

    task = asyncio.create_task(controller.select_company("Relaxo Footwears"))
    await _flush()
    controller.clear_search()
    gate.set()
    await task

    assert controller.mode == Browsing("ALL")
    assert controller.items == ()


# ── Refresh ───────────────────────────────────────────────────────────────────

async def test_refresh_in_browsing_forces_fetch(controller, transport):
    await controller.select_category("BANKING")
    transport.news[BANKING] = [{"title": "Fresh"}]

    items = await controller.refresh()

    assert transport.news_calls == [BANKING, BANKING]
    assert [i.title for i in items] == ["Fresh"]


async def test_refresh_in_company_focus_resolves_again(controller, transport):
    await controller.select_company("Relaxo Footwears")
    transport.news[RELAXO] = [{"title": "Later"}]

    await controller.refresh()

    assert transport.news_calls == [RELAXO, RELAXO]
    assert [i.title for i in controller.items] == ["Later"]


async def test_auto_refresh_repeats_until_cancelled(controller, transport):
    await controller.select_category("BANKING")

    task = asyncio.create_task(controller.run_auto_refresh(0.01))
    await asyncio.sleep(0.05)
    task.cancel()
    await asyncio.gather(task, return_exceptions=True)

    assert transport.news_calls.count(BANKING) >= 3


async def test_auto_refresh_disabled_for_zero_interval(controller, transport):
    await controller.run_auto_refresh(0)
    assert transport.news_calls == []


# ── Notifications ─────────────────────────────────────────────────────────────

async def test_listeners_notified_on_category_load(controller, transport):
    transport.news[ALL] = [{"title": "Hello"}]
    snapshots = []
    controller.on_change(lambda c: snapshots.append((c.mode, c.loading, len(c.items))))

    await controller.start()

    assert snapshots[-1] == (Browsing("ALL"), False, 1)
    assert (Browsing("ALL"), True, 0) in snapshots
