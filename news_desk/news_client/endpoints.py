"""
News Service Endpoint Definitions

Maps category keys to service paths and builds the company/search paths.

Path scheme:
  /news/all                  - unfiltered list (also the fallback)
  /news/results              - quarterly results
  /news/sector/{sector}      - e.g. /news/sector/fmcg, /news/sector/penny
  /news/indexes              - index and market-wide news
  /news/general              - general market news
  /news/company/{name}       - URL-encoded company name
  /companies/search?q=...    - company name suggestions
"""
from __future__ import annotations

from urllib.parse import quote

from ..models.news import Category

# ── Well-known paths ──────────────────────────────────────────────────────────

ALL = "/news/all"
RESULTS = "/news/results"
INDEXES = "/news/indexes"
GENERAL = "/news/general"
COMPANY_SEARCH = "/companies/search"

SECTOR_PREFIX = "/news/sector/"
COMPANY_PREFIX = "/news/company/"

_SPECIAL_PATHS: dict[Category, str] = {
    Category.ALL: ALL,
    Category.RESULTS: RESULTS,
    Category.INDEXES: INDEXES,
    Category.GENERAL: GENERAL,
}


# ── Helpers ───────────────────────────────────────────────────────────────────

def category_key(value: str | Category) -> str:
    """
    Canonical cache key for a tab label.

    Known categories resolve to their enum value ("largecap" -> "LARGE CAP");
    anything else is upper-cased and whitespace-collapsed.
    """
    if isinstance(value, Category):
        return value.value
    category = Category.from_string(value)
    if category is not None:
        return category.value
    return " ".join(value.strip().upper().split())


def sector_path(sector: str) -> str:
    return f"{SECTOR_PREFIX}{sector.lower().replace(' ', '')}"


def endpoint_for(key: str | Category) -> str:
    """
    Resolve a category key to its service path.

    Unrecognized keys fall back to the unfiltered list.
    """
    category = key if isinstance(key, Category) else Category.from_string(key)
    if category is None:
        return ALL
    special = _SPECIAL_PATHS.get(category)
    if special is not None:
        return special
    return sector_path(category.value)


def company_path(name: str) -> str:
    """Path for a company's news; the name is fully percent-encoded."""
    return f"{COMPANY_PREFIX}{quote(name.strip(), safe='')}"
