"""Abstract base class for chart ranking sources.

A ranking source answers one question: "which app ids, in what order, sit
on this chart?"  The legacy top-chart pages and the newer charts service
return very different payloads, but both reduce to an ordered id list, so
the chart service can swap one for the other behind this contract.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class ChartQuery:
    """A ranking query.

    Attributes
    ----------
    ranking:
        The chart to read.  Legacy sources expect a numeric pop id
        (``27`` = top free iPhone); the charts-v2 source expects a chart
        name (``"FreeAppsV2"``).
    genre:
        Store genre id; ``36`` is the all-apps root genre.
    country:
        Two-letter country code, or a numeric storefront id for legacy
        sources.
    limit:
        Upper bound on ids requested from sources that accept one.
        ``None`` lets the source use its own default.
    """

    ranking: str | int
    genre: int = 36
    country: str | int = "US"
    limit: int | None = None


class IIdentifierSource(ABC):
    """Contract for chart ranking sources."""

    @abstractmethod
    async def fetch_identifiers(self, query: ChartQuery) -> list[int]:
        """Return the chart's app ids in rank order.

        The full provider list is returned (typically at most 200 ids);
        truncation is the caller's job.

        Raises
        ------
        src.utils.errors.InvalidCategoryError
            If ``query.ranking`` (or the country) is not a known value.
            Raised before any network call.
        src.utils.errors.UpstreamError
            If the provider request fails or its payload is malformed.
        """

    @abstractmethod
    def get_provider_name(self) -> str:
        """Return a short identifier for logs, e.g. ``"legacy_charts"``."""
