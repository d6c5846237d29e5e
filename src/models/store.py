"""Store record models for the chart aggregation pipeline.

Defines Pydantic v2 models for the records that flow through a chart
request:

    RankedIdentifier  → position of an app id in the ranking source's order
    ResolvedRecord    → one app as returned by the lookup provider
    EnrichedRecord    → ResolvedRecord + rank + optional overlay analytics
    OverlayData       → third-party download / revenue estimates for one app

All models are frozen.  JSON output uses camelCase keys (``creatorId``,
``ratingAverage``, ``revenueUnit``) via the alias generator; Python code
uses the snake_case attribute names.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _StoreModel(BaseModel):
    """Shared config: frozen, camelCase aliases, population by field name."""

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)


class RankedIdentifier(_StoreModel):
    """An app id paired with its 1-based position in the ranking source's list.

    The rank is positional: it is assigned from the order the identifier
    source returned, never read from the app record itself.
    """

    id: int
    rank: int = Field(ge=1)


class OverlayData(_StoreModel):
    """Analytics overlay for a single app (last-month worldwide estimates).

    When the overlay fetch fails, ``downloads`` and ``revenue`` are ``None``
    and ``error`` carries the failure message.
    """

    app_id: int
    downloads: float | None = None
    revenue: float | None = None
    revenue_unit: str = "USD"
    error: str | None = None

    @classmethod
    def failed(cls, app_id: int, message: str) -> OverlayData:
        """Build the placeholder attached when an overlay fetch fails."""
        return cls(app_id=app_id, downloads=None, revenue=None, error=message)


class ResolvedRecord(_StoreModel):
    """One app as resolved by the bulk lookup provider.

    Only ``id`` and ``name`` are guaranteed.  Every other field is
    explicitly nullable because the lookup provider omits keys freely
    (paid-only fields on free apps, missing ratings on new listings, ...).
    Records are validated once at the resolver boundary with
    :meth:`from_lookup`; nothing downstream re-checks field presence.
    """

    id: int
    name: str
    creator: str | None = None
    creator_id: int | None = None
    category: str | None = None
    rating_average: float | None = None
    rating_count: int | None = None
    price: float | None = None
    artwork_url: str | None = None
    store_url: str | None = None

    # Detail fields - only used by the app-details endpoint and search.
    description: str | None = None
    release_notes: str | None = None
    version: str | None = None
    release_date: str | None = None
    file_size_bytes: int | None = None
    content_rating: str | None = None
    languages: list[str] = Field(default_factory=list)
    screenshots: list[str] = Field(default_factory=list)
    ipad_screenshots: list[str] = Field(default_factory=list)
    supported_devices: list[str] = Field(default_factory=list)
    minimum_os_version: str | None = None
    bundle_id: str | None = None
    large_artwork_url: str | None = None

    @classmethod
    def from_lookup(cls, raw: dict[str, Any]) -> ResolvedRecord:
        """Map a raw lookup/search result onto a validated record.

        Raises
        ------
        pydantic.ValidationError
            If ``trackId`` or ``trackName`` is missing or malformed.
        """
        return cls(
            id=raw.get("trackId"),
            name=raw.get("trackName"),
            creator=raw.get("artistName"),
            creator_id=raw.get("artistId"),
            category=raw.get("primaryGenreName"),
            rating_average=raw.get("averageUserRating"),
            rating_count=raw.get("userRatingCount"),
            price=raw.get("price"),
            artwork_url=raw.get("artworkUrl100"),
            store_url=raw.get("trackViewUrl"),
            description=raw.get("description"),
            release_notes=raw.get("releaseNotes"),
            version=raw.get("version"),
            release_date=raw.get("currentVersionReleaseDate"),
            file_size_bytes=raw.get("fileSizeBytes"),
            content_rating=raw.get("contentAdvisoryRating"),
            languages=raw.get("languageCodesISO2A") or [],
            screenshots=raw.get("screenshotUrls") or [],
            ipad_screenshots=raw.get("ipadScreenshotUrls") or [],
            supported_devices=raw.get("supportedDevices") or [],
            minimum_os_version=raw.get("minimumOsVersion"),
            bundle_id=raw.get("bundleId"),
            large_artwork_url=raw.get("artworkUrl512"),
        )


class EnrichedRecord(ResolvedRecord):
    """A resolved record placed in chart order, optionally carrying overlay data.

    ``rank`` is the app's position in the ORIGINAL identifier list, so two
    neighbouring records may show a gap in rank when an id between them
    failed to resolve.
    """

    rank: int = Field(ge=1)
    overlay: OverlayData | None = None

    @classmethod
    def from_resolved(cls, record: ResolvedRecord, rank: int) -> EnrichedRecord:
        return cls(**record.model_dump(), rank=rank)

    def with_overlay(self, overlay: OverlayData) -> EnrichedRecord:
        return self.model_copy(update={"overlay": overlay})


class ChartTypeInfo(_StoreModel):
    """One charts-v2 chart name with its human-readable label."""

    id: str
    name: str
    display_name: str


class LegacyChartInfo(_StoreModel):
    """One legacy chart key with its numeric pop id."""

    id: str
    chart_id: int
