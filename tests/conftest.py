"""Shared pytest fixtures for the chart aggregation test suite."""

from __future__ import annotations

from typing import Any
from unittest.mock import AsyncMock

import pytest

from src.config.loader import EngineConfig
from src.interfaces.identifier_source import ChartQuery, IIdentifierSource
from src.interfaces.lookup_provider import ILookupProvider
from src.interfaces.overlay_provider import IOverlayProvider
from src.models.store import OverlayData
from src.utils.errors import InvalidCategoryError, OverlayFailure


# ---------------------------------------------------------------------------
# Raw upstream payloads
# ---------------------------------------------------------------------------


def make_lookup_raw(track_id: int, **overrides: Any) -> dict[str, Any]:
    """Return a lookup result shaped like the iTunes API answer."""
    raw: dict[str, Any] = {
        "trackId": track_id,
        "trackName": f"App {track_id}",
        "artistName": f"Studio {track_id}",
        "artistId": 900000 + track_id,
        "primaryGenreName": "Games",
        "averageUserRating": 4.5,
        "userRatingCount": 1200,
        "price": 0.0,
        "artworkUrl100": f"https://img.example/{track_id}/100.png",
        "trackViewUrl": f"https://apps.example/app/id{track_id}",
    }
    raw.update(overrides)
    return raw


# ---------------------------------------------------------------------------
# Fake providers
# ---------------------------------------------------------------------------


class FakeIdentifierSource(IIdentifierSource):
    """Identifier source returning a fixed id list and recording queries."""

    def __init__(self, ids: list[int], valid_rankings: set[Any] | None = None) -> None:
        self.ids = ids
        self.valid_rankings = valid_rankings
        self.queries: list[ChartQuery] = []

    async def fetch_identifiers(self, query: ChartQuery) -> list[int]:
        if self.valid_rankings is not None and query.ranking not in self.valid_rankings:
            raise InvalidCategoryError(f"Invalid chart type: {query.ranking}")
        self.queries.append(query)
        return list(self.ids)

    def get_provider_name(self) -> str:
        return "fake_charts"


class FakeLookupProvider(ILookupProvider):
    """Lookup provider that knows a fixed set of ids and records every batch."""

    def __init__(self, known_ids: set[int] | None = None, search_results: list[dict] | None = None) -> None:
        self.known_ids = known_ids
        self.search_results = search_results or []
        self.batches: list[list[int]] = []
        self.countries: list[str] = []
        self.searches: list[tuple[str, str, str | None]] = []

    async def lookup(self, app_ids: list[int], country: str) -> list[dict[str, Any]]:
        self.batches.append(list(app_ids))
        self.countries.append(country)
        found = [i for i in app_ids if self.known_ids is None or i in self.known_ids]
        # Upstream answers in its own order, not the request order.
        return [make_lookup_raw(i) for i in reversed(found)]

    async def search(self, term: str, country: str, language: str | None = None) -> list[dict[str, Any]]:
        self.searches.append((term, country, language))
        return list(self.search_results)

    def get_provider_name(self) -> str:
        return "fake_lookup"


class FakeOverlayProvider(IOverlayProvider):
    """Overlay provider that fails for selected ids."""

    def __init__(self, failing_ids: set[int] | None = None) -> None:
        self.failing_ids = failing_ids or set()
        self.calls: list[tuple[int, str]] = []

    async def fetch_overlay(self, app_id: int, country: str) -> OverlayData:
        self.calls.append((app_id, country))
        if app_id in self.failing_ids:
            raise OverlayFailure("HTTP error! status: 503", provider_name="fake_overlay")
        return OverlayData(app_id=app_id, downloads=1000.0 + app_id, revenue=50.0, revenue_unit="USD")

    def get_provider_name(self) -> str:
        return "fake_overlay"


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def no_sleep() -> AsyncMock:
    """Injected delay function that returns immediately and records calls."""
    return AsyncMock(return_value=None)


@pytest.fixture
def engine_config() -> EngineConfig:
    """Engine tunables matching config/config.yaml defaults."""
    return EngineConfig(
        batch_size=50,
        batch_delay_seconds=0.1,
        max_ids=200,
        lookup_country="US",
        overlay_window_start=195,
        overlay_window_end=200,
        overlay_max_concurrency=8,
        overlay_country="US",
        charts_default_limit=20,
        charts_v2_default_limit=25,
        charts_v2_default_max_fetch=100,
        search_default_limit=25,
    )
