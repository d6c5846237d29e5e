"""Abstract base class for bulk app lookup / search providers.

The lookup provider turns a batch of app ids into raw JSON records.  Its
results come back in arbitrary order and may silently omit ids (removed
listings, region restrictions), so callers must key results by id rather
than by position.  The same provider answers free-text search.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class ILookupProvider(ABC):
    """Contract for the bulk lookup service."""

    @abstractmethod
    async def lookup(self, app_ids: list[int], country: str) -> list[dict[str, Any]]:
        """Fetch raw records for one batch of *app_ids*.

        Parameters
        ----------
        app_ids:
            One batch of ids.  The caller keeps batches within the
            provider's URL limit.
        country:
            Two-letter store country used for pricing and availability.

        Returns
        -------
        list[dict]
            Raw result objects, unordered, possibly fewer than requested.

        Raises
        ------
        src.utils.errors.UpstreamError
            If the request fails at the transport level or returns non-2xx.
        """

    @abstractmethod
    async def search(
        self, term: str, country: str, language: str | None = None
    ) -> list[dict[str, Any]]:
        """Run a free-text software search and return raw results in provider order."""

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier for logs, e.g. ``"itunes_lookup"``."""
