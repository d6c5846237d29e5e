"""Charts-v2 provider (MZStoreServices ``charts`` web service).

Implements IIdentifierSource against the newer charts service, which offers
a richer set of named charts (revenue, Apple TV, Mac, ...) and answers with
a flat ``resultIds`` list.  Chart names are checked against the catalog
before any request goes out.
"""

from __future__ import annotations

import httpx

from src.config.store_catalog import is_chart_type
from src.interfaces.identifier_source import ChartQuery, IIdentifierSource
from src.providers.http_json import get_json
from src.utils.errors import InvalidCategoryError, UpstreamError
from src.utils.logging import get_logger

_CHARTS_PATH = "/WebObjects/MZStoreServices.woa/ws/charts"
_DEFAULT_LIMIT = 100


class ChartsV2Provider(IIdentifierSource):
    """Ranking source backed by the MZStoreServices charts endpoint."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        base_url: str = "https://itunes.apple.com",
        timeout: float | None = None,
    ) -> None:
        self._http = http_client
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._logger = get_logger(__name__)

    async def fetch_identifiers(self, query: ChartQuery) -> list[int]:
        chart_type = str(query.ranking)
        if not is_chart_type(chart_type):
            raise InvalidCategoryError(f"Invalid chart type: {chart_type}")

        country = str(query.country).lower()
        limit = query.limit or _DEFAULT_LIMIT

        data = await get_json(
            self._http,
            f"{self._base_url}{_CHARTS_PATH}",
            provider_name=self.get_provider_name(),
            params={"cc": country, "g": query.genre, "name": chart_type, "limit": limit},
            timeout=self._timeout,
        )

        if not isinstance(data, dict):
            raise UpstreamError(
                message="Unexpected charts payload",
                provider_name=self.get_provider_name(),
            )

        try:
            ids = [int(result_id) for result_id in data.get("resultIds") or []]
        except (TypeError, ValueError) as exc:
            raise UpstreamError(
                message=f"Unexpected chart id in payload: {exc}",
                provider_name=self.get_provider_name(),
            ) from exc

        self._logger.info(
            "chart_ids_fetched",
            provider=self.get_provider_name(),
            chart_type=chart_type,
            genre=query.genre,
            country=country,
            count=len(ids),
        )
        return ids

    def get_provider_name(self) -> str:
        return "charts_v2"
