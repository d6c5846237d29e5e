"""Abstract base class for analytics overlay providers.

An overlay provider supplies third-party estimates (downloads, revenue) for
a single app.  It is independent of the ranking and lookup providers and is
only consulted for a narrow rank window, so its failures must never take a
chart page down with them.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from src.models.store import OverlayData


class IOverlayProvider(ABC):
    """Contract for analytics overlay services."""

    @abstractmethod
    async def fetch_overlay(self, app_id: int, country: str) -> OverlayData:
        """Fetch overlay analytics for one app.

        Raises
        ------
        src.utils.errors.OverlayFailure
            If the provider cannot be reached or answers non-2xx.  Callers
            convert this into a per-record error, never a request failure.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier for logs, e.g. ``"sensor_tower"``."""
