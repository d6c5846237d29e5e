"""Overlay enricher: attach analytics estimates to a narrow rank window.

Only records whose rank falls inside :class:`OverlayWindow` are enriched.
One overlay request is issued per id, concurrently, and each failure is
turned into an :class:`OverlayData` carrying the error text.  The page
itself never fails because of the overlay, and pagination is untouched.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Iterable, Sequence

from src.interfaces.overlay_provider import IOverlayProvider
from src.models.store import EnrichedRecord, OverlayData
from src.utils.concurrency import throttled_gather
from src.utils.logging import get_logger


@dataclass(frozen=True)
class OverlayWindow:
    """Inclusive rank range that receives overlay data."""

    start: int = 195
    end: int = 200

    def __post_init__(self) -> None:
        if self.start < 1 or self.end < self.start:
            raise ValueError(f"Invalid overlay window [{self.start}, {self.end}]")

    def __contains__(self, rank: object) -> bool:
        return isinstance(rank, int) and self.start <= rank <= self.end


class OverlayEnricher:
    """Fetch overlay analytics per app and merge them into chart pages."""

    def __init__(
        self,
        overlay_provider: IOverlayProvider,
        window: OverlayWindow | None = None,
        max_concurrency: int = 8,
        default_country: str = "US",
    ) -> None:
        if max_concurrency <= 0:
            raise ValueError("max_concurrency must be positive")
        self._provider = overlay_provider
        self._window = window or OverlayWindow()
        self._max_concurrency = max_concurrency
        self._default_country = default_country
        self._logger = get_logger(__name__)

    @property
    def window(self) -> OverlayWindow:
        return self._window

    async def enrich(
        self,
        records: Sequence[EnrichedRecord],
        country: str | None = None,
    ) -> list[EnrichedRecord]:
        """Return *records* with ``overlay`` set on those inside the window.

        Order and length are preserved.  When no record is in the window the
        input is returned as a new list without any network call.
        """
        targets = [r.id for r in records if r.rank in self._window]
        if not targets:
            return list(records)

        overlays = await self.fetch_many(targets, country)
        return [
            record.with_overlay(overlays[record.id]) if record.rank in self._window else record
            for record in records
        ]

    async def fetch_many(
        self,
        app_ids: Iterable[int],
        country: str | None = None,
    ) -> dict[int, OverlayData]:
        """Fetch overlay data for every unique id in *app_ids*.

        Every id gets an entry.  Failed fetches map to
        :meth:`OverlayData.failed` instead of raising.
        """
        unique_ids = list(dict.fromkeys(app_ids))
        if not unique_ids:
            return {}

        overlay_country = country or self._default_country
        semaphore = asyncio.Semaphore(self._max_concurrency)
        results = await throttled_gather(
            [self._provider.fetch_overlay(app_id, overlay_country) for app_id in unique_ids],
            semaphore=semaphore,
            return_exceptions=True,
        )

        overlays: dict[int, OverlayData] = {}
        failures = 0
        for app_id, result in zip(unique_ids, results):
            if isinstance(result, OverlayData):
                overlays[app_id] = result
                continue
            if not isinstance(result, Exception):
                raise result
            failures += 1
            self._logger.warning(
                "overlay_fetch_failed",
                app_id=app_id,
                provider=self._provider.get_provider_name(),
                error=str(result),
            )
            overlays[app_id] = OverlayData.failed(app_id, _error_text(result))

        self._logger.info(
            "overlay_enrichment_complete",
            requested=len(unique_ids),
            failed=failures,
            country=overlay_country,
        )
        return overlays


def _error_text(exc: Exception) -> str:
    # Domain errors carry a clean message without the provider prefix.
    message = getattr(exc, "message", None)
    return message if isinstance(message, str) else (str(exc) or type(exc).__name__)
