"""Legacy top-chart provider (MZStore ``viewTop`` pages).

Implements IIdentifierSource against the older store page that backs the
classic "Top Free / Top Paid / Top Grossing" charts.  The chart is chosen by
a numeric pop id and the country by the ``X-Apple-Store-Front`` header,
whose platform component switches between iPhone (29) and iPad (30).
"""

from __future__ import annotations

from typing import Any

import httpx

from src.config.store_catalog import is_legacy_chart, platform_for_chart, storefront_for
from src.interfaces.identifier_source import ChartQuery, IIdentifierSource
from src.providers.http_json import get_json
from src.utils.errors import InvalidCategoryError, UpstreamError
from src.utils.logging import get_logger

_VIEW_TOP_PATH = "/WebObjects/MZStore.woa/wa/viewTop"


class LegacyChartProvider(IIdentifierSource):
    """Ranking source backed by the legacy ``viewTop`` chart pages."""

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

    # -- Validation ------------------------------------------------------------

    @staticmethod
    def _pop_id(ranking: str | int) -> int:
        try:
            pop_id = int(ranking)
        except (TypeError, ValueError):
            raise InvalidCategoryError(f"Invalid ranking type: {ranking}") from None
        if not is_legacy_chart(pop_id):
            raise InvalidCategoryError(f"Invalid ranking type: {ranking}")
        return pop_id

    @staticmethod
    def _storefront(country: str | int) -> int:
        storefront = storefront_for(country)
        if storefront is None:
            raise InvalidCategoryError(f"Unknown country: {country}")
        return storefront

    # -- IIdentifierSource implementation --------------------------------------

    async def fetch_identifiers(self, query: ChartQuery) -> list[int]:
        pop_id = self._pop_id(query.ranking)
        storefront = self._storefront(query.country)
        platform = platform_for_chart(pop_id)

        data = await get_json(
            self._http,
            f"{self._base_url}{_VIEW_TOP_PATH}",
            provider_name=self.get_provider_name(),
            params={"genreId": query.genre, "popId": pop_id},
            headers={"X-Apple-Store-Front": f"{storefront},{platform}"},
            timeout=self._timeout,
        )

        ids = self._extract_ids(data)
        self._logger.info(
            "chart_ids_fetched",
            provider=self.get_provider_name(),
            pop_id=pop_id,
            genre=query.genre,
            storefront=storefront,
            count=len(ids),
        )
        return ids

    def _extract_ids(self, data: Any) -> list[int]:
        """Dig the ordered adam ids out of the page payload."""
        try:
            segment = data["pageData"]["segmentedControl"]["segments"][0]
            adam_ids = segment["pageData"]["selectedChart"]["adamIds"]
            return [int(adam_id) for adam_id in adam_ids]
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            raise UpstreamError(
                message=f"Unexpected chart payload: {exc!r}",
                provider_name=self.get_provider_name(),
            ) from exc

    def get_provider_name(self) -> str:
        return "legacy_charts"
