"""Pydantic request/response schemas for the chart aggregation API.

Defines the public contract for every REST endpoint: charts (legacy and
v2), chart-type catalog, search, app details, overlay data, and health.

# ─── WIRE FORMAT ───────────────────────────────────────────────────────
#
# JSON keys are camelCase (``rankingType``, ``maxFetch``, ``hasMore``).
# Python attributes are snake_case; the ``to_camel`` alias generator maps
# between them and ``populate_by_name`` lets tests and the CLI build
# models with either spelling.
#
# Every successful response carries ``success: true``; every error body is
# ``{"success": false, "error": "<message>"}`` (see ErrorResponse).
#
# Request limits default to ``None`` so the route can fill in the
# per-endpoint default from config/config.yaml.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.models.pagination import Pagination
from src.models.store import (
    ChartTypeInfo,
    EnrichedRecord,
    LegacyChartInfo,
    OverlayData,
    ResolvedRecord,
)


class _ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------


class ChartsRequest(_ApiModel):
    """Legacy top chart request.

    ``rankingType`` is a pop id (``27``) or chart key (``"topFreeIphone"``);
    ``category`` is a genre id or genre name; ``country`` is a two-letter
    code or a numeric storefront id.
    """

    country: str | int | None = None
    category: str | int | None = None
    ranking_type: str | int | None = None
    limit: int | None = Field(default=None, gt=0)
    offset: int = Field(default=0, ge=0)


class ChartsV2Request(_ApiModel):
    """Charts-v2 request.  ``chartType`` is checked before any upstream call."""

    chart_type: str | None = None
    genre: str | int | None = None
    country: str | None = None
    limit: int | None = Field(default=None, gt=0)
    offset: int = Field(default=0, ge=0)
    max_fetch: int | None = Field(default=None, gt=0)


class SearchRequest(_ApiModel):
    search_term: str = Field(..., min_length=1)
    country: str | None = None
    language: str | None = None
    limit: int | None = Field(default=None, gt=0)
    offset: int = Field(default=0, ge=0)


class AppDetailsRequest(_ApiModel):
    app_id: int


class OverlayDataRequest(_ApiModel):
    app_ids: list[int]
    country: str | None = None


# ---------------------------------------------------------------------------
# Responses
# ---------------------------------------------------------------------------


class ChartsResponse(_ApiModel):
    """Legacy chart page.  ``total`` repeats the identifier count."""

    success: bool = True
    apps: list[EnrichedRecord]
    total: int
    pagination: Pagination


class ChartInfo(_ApiModel):
    chart_type: str
    genre: int
    country: str


class ChartsV2Response(_ApiModel):
    success: bool = True
    apps: list[EnrichedRecord]
    chart_info: ChartInfo
    pagination: Pagination


class LegacyCatalog(_ApiModel):
    description: str
    charts: list[LegacyChartInfo]


class ChartTypesResponse(_ApiModel):
    success: bool = True
    chart_types: list[ChartTypeInfo]
    legacy: LegacyCatalog


class SearchResponse(_ApiModel):
    success: bool = True
    apps: list[ResolvedRecord]
    pagination: Pagination


class AppDetailsResponse(_ApiModel):
    success: bool = True
    app: ResolvedRecord


class OverlayDataResponse(_ApiModel):
    """Overlay analytics keyed by app id; failed ids carry ``error``."""

    success: bool = True
    data: dict[int, OverlayData]
    total: int


class HealthResponse(_ApiModel):
    success: bool = True
    message: str
    timestamp: str
    version: str


class ErrorResponse(_ApiModel):
    """Standard error response body."""

    success: bool = False
    error: str
