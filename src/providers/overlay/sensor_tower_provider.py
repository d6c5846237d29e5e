"""Sensor Tower overlay provider.

Implements IOverlayProvider with the public app page API, reading the
last-month worldwide download and revenue estimates.  Any failure is raised
as :class:`OverlayFailure`; the overlay enricher decides how to degrade.
"""

from __future__ import annotations

from typing import Any

import httpx

from src.interfaces.overlay_provider import IOverlayProvider
from src.models.store import OverlayData
from src.providers.http_json import get_json
from src.utils.errors import OverlayFailure

_DEFAULT_CURRENCY = "USD"


class SensorTowerProvider(IOverlayProvider):
    """Download and revenue estimates per app."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        base_url: str = "https://app.sensortower.com",
        timeout: float | None = None,
    ) -> None:
        self._http = http_client
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    @staticmethod
    def _metric(data: dict[str, Any], key: str) -> dict[str, Any]:
        value = data.get(key)
        return value if isinstance(value, dict) else {}

    @staticmethod
    def _number(value: Any) -> float | None:
        # Zero and missing both mean "no estimate".
        if isinstance(value, bool) or not isinstance(value, (int, float)) or not value:
            return None
        return float(value)

    async def fetch_overlay(self, app_id: int, country: str) -> OverlayData:
        data = await get_json(
            self._http,
            f"{self._base_url}/api/ios/apps/{app_id}",
            provider_name=self.get_provider_name(),
            params={"country": country},
            timeout=self._timeout,
            error_cls=OverlayFailure,
        )
        if not isinstance(data, dict):
            raise OverlayFailure(
                message="Unexpected overlay payload",
                provider_name=self.get_provider_name(),
            )

        downloads = self._metric(data, "worldwide_last_month_downloads")
        revenue = self._metric(data, "worldwide_last_month_revenue")
        return OverlayData(
            app_id=app_id,
            downloads=self._number(downloads.get("value")),
            revenue=self._number(revenue.get("value")),
            revenue_unit=revenue.get("currency") or _DEFAULT_CURRENCY,
        )

    def get_provider_name(self) -> str:
        return "sensor_tower"
