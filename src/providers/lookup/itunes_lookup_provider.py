"""iTunes lookup/search provider.

Implements ILookupProvider with the public ``/lookup`` and ``/search``
endpoints.  Lookup accepts a comma-separated id list; the bulk resolver is
responsible for keeping each call to one batch.  Search is capped at 200
results by the provider.
"""

from __future__ import annotations

from typing import Any

import httpx

from src.interfaces.lookup_provider import ILookupProvider
from src.providers.http_json import get_json
from src.utils.logging import get_logger

_SEARCH_LIMIT = 200


class ITunesLookupProvider(ILookupProvider):
    """Bulk lookup and free-text search over the iTunes public API."""

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

    @staticmethod
    def _results(data: Any) -> list[dict[str, Any]]:
        # A body without "results" is a partial answer, not an error.
        if not isinstance(data, dict):
            return []
        results = data.get("results") or []
        return [r for r in results if isinstance(r, dict)]

    @staticmethod
    def _lang_param(language: str) -> str:
        """Convert a BCP-47 tag (``en-US``) to the store's ``en_us`` form."""
        return language.replace("-", "_").lower()

    async def lookup(self, app_ids: list[int], country: str) -> list[dict[str, Any]]:
        if not app_ids:
            return []
        data = await get_json(
            self._http,
            f"{self._base_url}/lookup",
            provider_name=self.get_provider_name(),
            params={
                "id": ",".join(str(app_id) for app_id in app_ids),
                "country": country,
                "entity": "software",
            },
            timeout=self._timeout,
        )
        results = self._results(data)
        self._logger.debug(
            "lookup_batch_complete",
            requested=len(app_ids),
            returned=len(results),
        )
        return results

    async def search(
        self, term: str, country: str, language: str | None = None
    ) -> list[dict[str, Any]]:
        params: dict[str, Any] = {
            "term": term,
            "country": country,
            "entity": "software",
            "limit": _SEARCH_LIMIT,
        }
        if language:
            params["lang"] = self._lang_param(language)

        data = await get_json(
            self._http,
            f"{self._base_url}/search",
            provider_name=self.get_provider_name(),
            params=params,
            timeout=self._timeout,
        )
        results = self._results(data)
        self._logger.info("search_complete", term=term, country=country, count=len(results))
        return results

    def get_provider_name(self) -> str:
        return "itunes_lookup"
