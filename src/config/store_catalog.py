"""Static store catalog tables: storefronts, genres, and chart enumerations.

# ─── PURPOSE ───────────────────────────────────────────────────────────
#
# The ranking providers accept opaque numeric codes.  This module holds the
# known values so requests can be validated before any network call:
#
#   - STOREFRONTS       country code  → storefront id (legacy header)
#   - GENRES            genre name    → genre id
#   - LEGACY_CHARTS     chart key     → pop id (legacy viewTop)
#   - CHART_TYPES       chart key     → chart name (charts v2 service)
#
# All functions are pure; tables are built once at import time.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import re

# ═════════════════════════════════════════════════════════════════════════
# 1. STOREFRONTS
# ═════════════════════════════════════════════════════════════════════════

STOREFRONTS: dict[str, int] = {
    "US": 143441,
    "DE": 143443,
    "GB": 143444,
    "VN": 143471,
    "JP": 143462,
    "KR": 143466,
    "CN": 143465,
}

_COUNTRY_BY_STOREFRONT: dict[int, str] = {v: k for k, v in STOREFRONTS.items()}


# ═════════════════════════════════════════════════════════════════════════
# 2. GENRES
# ═════════════════════════════════════════════════════════════════════════
# 36 is the "all apps" root genre.

GENRES: dict[str, int] = {
    "all": 36,
    "Games": 6014,
    "Education": 6017,
    "Utilities": 6002,
    "Health & Fitness": 6013,
    "Photo & Video": 6008,
    "Entertainment": 6016,
    "Finance": 6015,
    "Productivity": 6007,
}

ALL_GENRES_ID = GENRES["all"]


# ═════════════════════════════════════════════════════════════════════════
# 3. LEGACY CHARTS (pop ids for MZStore viewTop)
# ═════════════════════════════════════════════════════════════════════════

LEGACY_CHARTS: dict[str, int] = {
    "topFreeIphone": 27,
    "topPaidIphone": 30,
    "topGrossingIphone": 38,
    "topFreeIpad": 44,
    "topPaidIpad": 45,
    "topGrossingIpad": 46,
}

IPAD_CHART_IDS: frozenset[int] = frozenset({44, 45, 46})

# Platform component of the X-Apple-Store-Front header.
IPHONE_PLATFORM = 29
IPAD_PLATFORM = 30


# ═════════════════════════════════════════════════════════════════════════
# 4. CHART TYPES (charts v2 service)
# ═════════════════════════════════════════════════════════════════════════

CHART_TYPES: dict[str, str] = {
    "appsByRevenue": "AppsByRevenue",
    "freeApplications": "FreeApplications",
    "freeAppleTVApps": "FreeAppleTVApps",
    "paidAppleTVApps": "PaidAppleTVApps",
    "freeAppsV2": "FreeAppsV2",
    "paidIpadApplications": "PaidIpadApplications",
    "ipadAppsByRevenue": "IpadAppsByRevenue",
    "freeIpadApplications": "FreeIpadApplications",
    "paidApplications": "PaidApplications",
    "appleTVAppsByRevenue": "AppleTVAppsByRevenue",
    "applications": "Applications",
    "freeMacAppsV2": "FreeMacAppsV2",
}

_CHART_TYPE_NAMES: frozenset[str] = frozenset(CHART_TYPES.values())

_CAPITAL_RE = re.compile(r"([A-Z])")


# ═════════════════════════════════════════════════════════════════════════
# 5. LOOKUP HELPERS
# ═════════════════════════════════════════════════════════════════════════


def is_chart_type(name: str) -> bool:
    """Return ``True`` if *name* is a known charts-v2 chart name."""
    return name in _CHART_TYPE_NAMES


def is_legacy_chart(pop_id: int) -> bool:
    """Return ``True`` if *pop_id* is a known legacy chart id."""
    return pop_id in LEGACY_CHARTS.values()


def platform_for_chart(pop_id: int) -> int:
    """Return the store-front platform code for a legacy chart."""
    return IPAD_PLATFORM if pop_id in IPAD_CHART_IDS else IPHONE_PLATFORM


def storefront_for(country: str | int) -> int | None:
    """Resolve a country code (``"us"``) or a numeric storefront id.

    Returns ``None`` when the value is not a known storefront.
    """
    if isinstance(country, int):
        return country if country in _COUNTRY_BY_STOREFRONT else None
    text = country.strip()
    if text.isdigit():
        return storefront_for(int(text))
    return STOREFRONTS.get(text.upper())


def country_for_storefront(storefront: int) -> str | None:
    """Return the two-letter country code for a storefront id."""
    return _COUNTRY_BY_STOREFRONT.get(storefront)


def display_label(chart_name: str) -> str:
    """Split a camel-case chart name into words: ``FreeAppsV2`` → ``Free Apps V2``."""
    return _CAPITAL_RE.sub(r" \1", chart_name).strip()


def genre_id(value: str | int) -> int | None:
    """Resolve a genre name (``"Games"``) or a numeric genre id.

    Numeric ids are passed through unchecked; the store accepts genres this
    table does not list.
    """
    if isinstance(value, int):
        return value
    text = value.strip()
    if text.isdigit():
        return int(text)
    return GENRES.get(text)


def legacy_pop_id(value: str | int) -> int | None:
    """Resolve a legacy chart key (``"topFreeIphone"``) or pop id (``27``)."""
    if isinstance(value, int):
        return value if is_legacy_chart(value) else None
    text = value.strip()
    if text.isdigit():
        return legacy_pop_id(int(text))
    return LEGACY_CHARTS.get(text)
