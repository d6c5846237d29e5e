"""Unit tests for the ChartService facade."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from src.models.pagination import PageCursor
from src.services.bulk_resolver import BulkResolver
from src.services.chart_service import ChartService
from src.services.overlay_enricher import OverlayEnricher
from src.utils.errors import InvalidCategoryError, NotFoundError, UpstreamError
from tests.conftest import (
    FakeIdentifierSource,
    FakeLookupProvider,
    FakeOverlayProvider,
    make_lookup_raw,
)


def _service(
    ids: list[int],
    known_ids: set[int] | None = None,
    overlay: FakeOverlayProvider | None = None,
    search_results: list[dict] | None = None,
) -> tuple[ChartService, FakeIdentifierSource, FakeIdentifierSource, FakeLookupProvider]:
    legacy = FakeIdentifierSource(ids)
    v2 = FakeIdentifierSource(ids, valid_rankings={"FreeAppsV2", "PaidApplications"})
    lookup = FakeLookupProvider(known_ids=known_ids, search_results=search_results)
    resolver = BulkResolver(lookup, sleep=AsyncMock(return_value=None))
    enricher = OverlayEnricher(overlay or FakeOverlayProvider())
    service = ChartService(
        legacy_source=legacy,
        charts_v2_source=v2,
        lookup_provider=lookup,
        resolver=resolver,
        enricher=enricher,
    )
    return service, legacy, v2, lookup


class TestTopCharts:
    @pytest.mark.asyncio
    async def test_reconciled_page(self) -> None:
        service, legacy, _, _ = _service([10, 20, 30, 40], known_ids={10, 30, 40})
        page = await service.top_charts(27, PageCursor(limit=20))

        assert [(r.id, r.rank) for r in page.items] == [(10, 1), (30, 3), (40, 4)]
        assert page.pagination.total == 3
        assert page.pagination.total_available == 4
        # 3 returned of 4 listed: one unresolved id still counts toward the horizon.
        assert page.pagination.has_more is True
        assert page.pagination.next_offset == 3
        assert legacy.queries[0].ranking == 27
        assert legacy.queries[0].genre == 36

    @pytest.mark.asyncio
    async def test_chart_key_and_genre_name(self) -> None:
        service, legacy, _, _ = _service([1, 2])
        await service.top_charts("topPaidIpad", PageCursor(), category="Games", country="GB")
        query = legacy.queries[0]
        assert query.ranking == 45
        assert query.genre == 6014
        assert query.country == "GB"

    @pytest.mark.asyncio
    async def test_storefront_country_maps_to_lookup_code(self) -> None:
        service, _, _, lookup = _service([1])
        await service.top_charts(27, PageCursor(), country=143444)
        assert lookup.countries == ["GB"]

    @pytest.mark.asyncio
    async def test_missing_ranking_type(self) -> None:
        service, legacy, _, _ = _service([1])
        with pytest.raises(InvalidCategoryError, match="rankingType is required"):
            await service.top_charts(None, PageCursor())
        assert legacy.queries == []

    @pytest.mark.asyncio
    async def test_unknown_ranking_type(self) -> None:
        service, legacy, _, _ = _service([1])
        with pytest.raises(InvalidCategoryError):
            await service.top_charts(999, PageCursor())
        assert legacy.queries == []

    @pytest.mark.asyncio
    async def test_unknown_genre(self) -> None:
        service, _, _, _ = _service([1])
        with pytest.raises(InvalidCategoryError, match="Unknown genre"):
            await service.top_charts(27, PageCursor(), category="Knitting")

    @pytest.mark.asyncio
    async def test_overlay_attached_in_window(self) -> None:
        ids = list(range(1, 201))
        overlay = FakeOverlayProvider(failing_ids={198})
        service, _, _, _ = _service(ids, overlay=overlay)

        page = await service.top_charts(27, PageCursor(offset=180, limit=20))

        assert [r.rank for r in page.items] == list(range(181, 201))
        with_overlay = [r for r in page.items if r.overlay is not None]
        assert [r.rank for r in with_overlay] == [195, 196, 197, 198, 199, 200]
        assert with_overlay[3].overlay.error is not None
        assert page.pagination.has_more is False

    @pytest.mark.asyncio
    async def test_identifiers_beyond_cap_not_resolved(self) -> None:
        service, _, _, lookup = _service(list(range(1, 251)))
        page = await service.top_charts(27, PageCursor(offset=0, limit=20))
        assert sum(len(b) for b in lookup.batches) == 200
        assert page.pagination.total == 200
        assert page.pagination.total_available == 250
        assert page.pagination.next_offset == 20

    @pytest.mark.asyncio
    async def test_source_failure_aborts(self) -> None:
        service, legacy, _, lookup = _service([1])
        legacy.fetch_identifiers = AsyncMock(side_effect=UpstreamError("HTTP error! status: 502"))
        with pytest.raises(UpstreamError):
            await service.top_charts(27, PageCursor())
        assert lookup.batches == []


class TestChartsV2:
    @pytest.mark.asyncio
    async def test_query_shape(self) -> None:
        service, _, v2, _ = _service([5, 6, 7])
        page = await service.charts_v2("FreeAppsV2", PageCursor(limit=2), genre=6014, country="GB", max_fetch=50)

        query = v2.queries[0]
        assert query.ranking == "FreeAppsV2"
        assert query.genre == 6014
        assert query.country == "gb"
        assert query.limit == 50
        assert [r.id for r in page.items] == [5, 6]
        assert page.pagination.next_offset == 2

    @pytest.mark.asyncio
    async def test_missing_chart_type(self) -> None:
        service, _, v2, _ = _service([1])
        with pytest.raises(InvalidCategoryError, match="chartType is required"):
            await service.charts_v2(None, PageCursor())
        assert v2.queries == []

    @pytest.mark.asyncio
    async def test_invalid_chart_type_makes_no_lookup(self) -> None:
        service, _, _, lookup = _service([1])
        with pytest.raises(InvalidCategoryError):
            await service.charts_v2("Bogus", PageCursor())
        assert lookup.batches == []

    @pytest.mark.asyncio
    async def test_empty_chart(self) -> None:
        service, _, _, lookup = _service([])
        page = await service.charts_v2("FreeAppsV2", PageCursor(limit=25))
        assert page.items == []
        assert page.pagination.total == 0
        assert page.pagination.total_available == 0
        assert page.pagination.has_more is False
        assert lookup.batches == []


class TestSearch:
    @pytest.mark.asyncio
    async def test_paginates_in_provider_order(self) -> None:
        results = [make_lookup_raw(i) for i in (30, 10, 20)] + [{"trackName": "broken"}]
        service, _, _, lookup = _service([], search_results=results)

        page = await service.search("chess", PageCursor(offset=1, limit=1), country="DE", language="de-DE")

        assert [r.id for r in page.items] == [10]
        assert page.pagination.total == 3
        assert page.pagination.has_more is True
        assert page.pagination.next_offset == 2
        assert lookup.searches == [("chess", "DE", "de-DE")]

    @pytest.mark.asyncio
    async def test_default_country(self) -> None:
        service, _, _, lookup = _service([], search_results=[])
        page = await service.search("x", PageCursor())
        assert page.items == []
        assert lookup.searches[0][1] == "US"


class TestAppDetailsAndOverlay:
    @pytest.mark.asyncio
    async def test_app_details(self) -> None:
        service, _, _, lookup = _service([])
        record = await service.app_details(42)
        assert record.id == 42
        assert lookup.batches == [[42]]

    @pytest.mark.asyncio
    async def test_app_details_not_found(self) -> None:
        service, _, _, _ = _service([], known_ids=set())
        with pytest.raises(NotFoundError):
            await service.app_details(42)

    @pytest.mark.asyncio
    async def test_overlay_data(self) -> None:
        service, _, _, _ = _service([], overlay=FakeOverlayProvider(failing_ids={2}))
        data = await service.overlay_data([1, 2])
        assert data[1].downloads == 1001.0
        assert data[2].error is not None


class TestCatalog:
    def test_chart_types(self) -> None:
        types = ChartService.chart_types()
        assert len(types) == 12
        free = next(t for t in types if t.name == "FreeAppsV2")
        assert free.id == "freeAppsV2"
        assert free.display_name == "Free Apps V2"

    def test_legacy_charts(self) -> None:
        charts = {c.id: c.chart_id for c in ChartService.legacy_charts()}
        assert charts["topFreeIphone"] == 27
        assert charts["topGrossingIpad"] == 46

    def test_resolve_genre(self) -> None:
        assert ChartService.resolve_genre(None) == 36
        assert ChartService.resolve_genre("Finance") == 6015
        assert ChartService.resolve_genre("6014") == 6014
        assert ChartService.resolve_genre(7000) == 7000
