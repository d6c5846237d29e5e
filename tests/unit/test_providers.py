"""Unit tests for the upstream provider adapters.

Each provider is exercised against ``httpx.MockTransport`` so the real
request building (URL, query string, headers) is checked end to end.
"""

from __future__ import annotations

from typing import Callable
from unittest.mock import MagicMock

import httpx
import pytest

from src.interfaces.identifier_source import ChartQuery
from src.providers.charts.charts_v2_provider import ChartsV2Provider
from src.providers.charts.legacy_chart_provider import LegacyChartProvider
from src.providers.lookup.itunes_lookup_provider import ITunesLookupProvider
from src.providers.overlay.sensor_tower_provider import SensorTowerProvider
from src.utils.errors import InvalidCategoryError, OverlayFailure, UpstreamError
from tests.conftest import make_lookup_raw

Handler = Callable[[httpx.Request], httpx.Response]


def _client(handler: Handler, requests: list[httpx.Request] | None = None) -> httpx.AsyncClient:
    def _record(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        return handler(request)

    return httpx.AsyncClient(transport=httpx.MockTransport(_record))


def _legacy_payload(ids: list[int]) -> dict:
    return {
        "pageData": {
            "segmentedControl": {
                "segments": [{"pageData": {"selectedChart": {"adamIds": [str(i) for i in ids]}}}]
            }
        }
    }


# ======================================================================
# Legacy chart provider
# ======================================================================


class TestLegacyChartProvider:
    @pytest.mark.asyncio
    async def test_fetch_identifiers_request_shape(self) -> None:
        requests: list[httpx.Request] = []
        async with _client(lambda r: httpx.Response(200, json=_legacy_payload([3, 1, 2])), requests) as http:
            provider = LegacyChartProvider(http)
            ids = await provider.fetch_identifiers(ChartQuery(ranking=27, genre=6014, country="US"))

        assert ids == [3, 1, 2]
        request = requests[0]
        assert request.url.path == "/WebObjects/MZStore.woa/wa/viewTop"
        assert request.url.params["genreId"] == "6014"
        assert request.url.params["popId"] == "27"
        assert request.headers["X-Apple-Store-Front"] == "143441,29"

    @pytest.mark.asyncio
    async def test_ipad_chart_uses_ipad_platform(self) -> None:
        requests: list[httpx.Request] = []
        async with _client(lambda r: httpx.Response(200, json=_legacy_payload([1])), requests) as http:
            await LegacyChartProvider(http).fetch_identifiers(ChartQuery(ranking=44, country=143444))
        assert requests[0].headers["X-Apple-Store-Front"] == "143444,30"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("ranking", [99, "bogus", ""])
    async def test_invalid_ranking_makes_no_request(self, ranking) -> None:
        requests: list[httpx.Request] = []
        async with _client(lambda r: httpx.Response(200, json={}), requests) as http:
            with pytest.raises(InvalidCategoryError):
                await LegacyChartProvider(http).fetch_identifiers(ChartQuery(ranking=ranking))
        assert requests == []

    @pytest.mark.asyncio
    async def test_unknown_country_makes_no_request(self) -> None:
        requests: list[httpx.Request] = []
        async with _client(lambda r: httpx.Response(200, json={}), requests) as http:
            with pytest.raises(InvalidCategoryError, match="Unknown country"):
                await LegacyChartProvider(http).fetch_identifiers(ChartQuery(ranking=27, country="ZZ"))
        assert requests == []

    @pytest.mark.asyncio
    async def test_http_error(self) -> None:
        async with _client(lambda r: httpx.Response(503)) as http:
            with pytest.raises(UpstreamError, match="HTTP error! status: 503"):
                await LegacyChartProvider(http).fetch_identifiers(ChartQuery(ranking=27))

    @pytest.mark.asyncio
    async def test_malformed_payload(self) -> None:
        async with _client(lambda r: httpx.Response(200, json={"pageData": {}})) as http:
            with pytest.raises(UpstreamError, match="Unexpected chart payload"):
                await LegacyChartProvider(http).fetch_identifiers(ChartQuery(ranking=27))

    def test_provider_name(self) -> None:
        assert LegacyChartProvider(MagicMock(spec=httpx.AsyncClient)).get_provider_name() == "legacy_charts"


# ======================================================================
# Charts v2 provider
# ======================================================================


class TestChartsV2Provider:
    @pytest.mark.asyncio
    async def test_fetch_identifiers_request_shape(self) -> None:
        requests: list[httpx.Request] = []
        handler = lambda r: httpx.Response(200, json={"resultIds": [11, "12", 13]})  # noqa: E731
        async with _client(handler, requests) as http:
            provider = ChartsV2Provider(http)
            ids = await provider.fetch_identifiers(
                ChartQuery(ranking="FreeAppsV2", genre=36, country="GB", limit=150)
            )

        assert ids == [11, 12, 13]
        params = requests[0].url.params
        assert requests[0].url.path == "/WebObjects/MZStoreServices.woa/ws/charts"
        assert params["cc"] == "gb"
        assert params["g"] == "36"
        assert params["name"] == "FreeAppsV2"
        assert params["limit"] == "150"

    @pytest.mark.asyncio
    async def test_default_limit(self) -> None:
        requests: list[httpx.Request] = []
        async with _client(lambda r: httpx.Response(200, json={"resultIds": []}), requests) as http:
            await ChartsV2Provider(http).fetch_identifiers(ChartQuery(ranking="Applications"))
        assert requests[0].url.params["limit"] == "100"

    @pytest.mark.asyncio
    async def test_missing_result_ids_is_empty(self) -> None:
        async with _client(lambda r: httpx.Response(200, json={})) as http:
            ids = await ChartsV2Provider(http).fetch_identifiers(ChartQuery(ranking="FreeAppsV2"))
        assert ids == []

    @pytest.mark.asyncio
    async def test_bogus_chart_type_makes_no_request(self) -> None:
        requests: list[httpx.Request] = []
        async with _client(lambda r: httpx.Response(200, json={}), requests) as http:
            with pytest.raises(InvalidCategoryError, match="Invalid chart type: Bogus"):
                await ChartsV2Provider(http).fetch_identifiers(ChartQuery(ranking="Bogus"))
        assert requests == []

    @pytest.mark.asyncio
    async def test_transport_error(self) -> None:
        def _raise(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with _client(_raise) as http:
            with pytest.raises(UpstreamError, match="connection refused"):
                await ChartsV2Provider(http).fetch_identifiers(ChartQuery(ranking="FreeAppsV2"))

    @pytest.mark.asyncio
    async def test_timeout(self) -> None:
        def _raise(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("too slow", request=request)

        async with _client(_raise) as http:
            with pytest.raises(UpstreamError, match="timed out"):
                await ChartsV2Provider(http, timeout=0.5).fetch_identifiers(ChartQuery(ranking="FreeAppsV2"))

    @pytest.mark.asyncio
    async def test_invalid_json(self) -> None:
        async with _client(lambda r: httpx.Response(200, text="<html>")) as http:
            with pytest.raises(UpstreamError, match="Invalid JSON"):
                await ChartsV2Provider(http).fetch_identifiers(ChartQuery(ranking="FreeAppsV2"))


# ======================================================================
# iTunes lookup provider
# ======================================================================


class TestITunesLookupProvider:
    @pytest.mark.asyncio
    async def test_lookup_request_shape(self) -> None:
        requests: list[httpx.Request] = []
        body = {"resultCount": 2, "results": [make_lookup_raw(2), make_lookup_raw(1)]}
        async with _client(lambda r: httpx.Response(200, json=body), requests) as http:
            results = await ITunesLookupProvider(http).lookup([1, 2], "US")

        assert [r["trackId"] for r in results] == [2, 1]
        params = requests[0].url.params
        assert requests[0].url.path == "/lookup"
        assert params["id"] == "1,2"
        assert params["country"] == "US"
        assert params["entity"] == "software"

    @pytest.mark.asyncio
    async def test_lookup_empty_ids_makes_no_request(self) -> None:
        requests: list[httpx.Request] = []
        async with _client(lambda r: httpx.Response(200, json={}), requests) as http:
            assert await ITunesLookupProvider(http).lookup([], "US") == []
        assert requests == []

    @pytest.mark.asyncio
    async def test_partial_body_is_not_an_error(self) -> None:
        async with _client(lambda r: httpx.Response(200, json={"resultCount": 0})) as http:
            assert await ITunesLookupProvider(http).lookup([1], "US") == []

    @pytest.mark.asyncio
    async def test_lookup_http_error(self) -> None:
        async with _client(lambda r: httpx.Response(500)) as http:
            with pytest.raises(UpstreamError) as exc_info:
                await ITunesLookupProvider(http).lookup([1], "US")
        assert exc_info.value.provider_name == "itunes_lookup"

    @pytest.mark.asyncio
    async def test_search_request_shape(self) -> None:
        requests: list[httpx.Request] = []
        body = {"results": [make_lookup_raw(5)]}
        async with _client(lambda r: httpx.Response(200, json=body), requests) as http:
            results = await ITunesLookupProvider(http).search("photo editor", "DE", language="en-US")

        assert results[0]["trackId"] == 5
        params = requests[0].url.params
        assert requests[0].url.path == "/search"
        assert params["term"] == "photo editor"
        assert params["country"] == "DE"
        assert params["entity"] == "software"
        assert params["limit"] == "200"
        assert params["lang"] == "en_us"

    @pytest.mark.asyncio
    async def test_search_without_language(self) -> None:
        requests: list[httpx.Request] = []
        async with _client(lambda r: httpx.Response(200, json={"results": []}), requests) as http:
            await ITunesLookupProvider(http).search("chess", "US")
        assert "lang" not in requests[0].url.params


# ======================================================================
# Sensor Tower overlay provider
# ======================================================================


class TestSensorTowerProvider:
    @pytest.mark.asyncio
    async def test_fetch_overlay(self) -> None:
        requests: list[httpx.Request] = []
        body = {
            "worldwide_last_month_downloads": {"value": 120000},
            "worldwide_last_month_revenue": {"value": 54000.5, "currency": "EUR"},
        }
        async with _client(lambda r: httpx.Response(200, json=body), requests) as http:
            overlay = await SensorTowerProvider(http).fetch_overlay(284882215, "US")

        assert requests[0].url.path == "/api/ios/apps/284882215"
        assert requests[0].url.params["country"] == "US"
        assert overlay.app_id == 284882215
        assert overlay.downloads == 120000.0
        assert overlay.revenue == 54000.5
        assert overlay.revenue_unit == "EUR"
        assert overlay.error is None

    @pytest.mark.asyncio
    async def test_missing_metrics_are_null(self) -> None:
        body = {"worldwide_last_month_downloads": {"value": 0}}
        async with _client(lambda r: httpx.Response(200, json=body)) as http:
            overlay = await SensorTowerProvider(http).fetch_overlay(1, "US")
        assert overlay.downloads is None
        assert overlay.revenue is None
        assert overlay.revenue_unit == "USD"

    @pytest.mark.asyncio
    async def test_http_error_raises_overlay_failure(self) -> None:
        async with _client(lambda r: httpx.Response(403)) as http:
            with pytest.raises(OverlayFailure, match="status: 403"):
                await SensorTowerProvider(http).fetch_overlay(1, "US")

    @pytest.mark.asyncio
    async def test_non_object_payload(self) -> None:
        async with _client(lambda r: httpx.Response(200, json=[1, 2])) as http:
            with pytest.raises(OverlayFailure):
                await SensorTowerProvider(http).fetch_overlay(1, "US")
