"""FastAPI routes for the chart aggregation API.

Thin handlers: each one fills request defaults from the engine config,
builds a :class:`PageCursor`, calls :class:`ChartService`, and wraps the
result in its response schema.  Domain errors propagate to
``ErrorHandlingMiddleware``.

# ─── API ROUTE MAP ─────────────────────────────────────────────────────
#
# Endpoint                 Method  Description
# ─────────────────────────────────────────────────────────────────────
# /api/charts              POST    Legacy top chart, paginated + overlay
# /api/charts-v2           POST    Charts-v2 listing, paginated + overlay
# /api/chart-types         GET     Known chart names with display labels
# /api/search              POST    Free-text search, paginated
# /api/app-details         POST    Full detail record for one app
# /api/overlay-data        POST    Overlay analytics for arbitrary ids
# /api/health              GET     Liveness payload
#
# /api/top-charts and /api/sensortower-data are kept as aliases of
# /api/charts and /api/overlay-data for older clients.
#
# Services are resolved from app.state (populated in main.py's lifespan)
# via Depends helpers and Annotated aliases.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Request

from src.api.schemas import (
    AppDetailsRequest,
    AppDetailsResponse,
    ChartInfo,
    ChartsRequest,
    ChartsResponse,
    ChartsV2Request,
    ChartsV2Response,
    ChartTypesResponse,
    HealthResponse,
    LegacyCatalog,
    OverlayDataRequest,
    OverlayDataResponse,
    SearchRequest,
    SearchResponse,
)
from src.config.loader import EngineConfig
from src.models.pagination import PageCursor
from src.services.chart_service import ChartService
from src.utils.logging import get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

API_VERSION = "1.0.0"

router = APIRouter(prefix="/api")


# ---------------------------------------------------------------------------
# Dependency injection helpers
# ---------------------------------------------------------------------------


def _get_chart_service(request: Request) -> ChartService:
    """Return the chart service from application state."""
    return request.app.state.chart_service


def _get_engine_config(request: Request) -> EngineConfig:
    """Return the engine tunables from application state."""
    return request.app.state.engine_config


ChartServiceDep = Annotated[ChartService, Depends(_get_chart_service)]
EngineConfigDep = Annotated[EngineConfig, Depends(_get_engine_config)]


# ---------------------------------------------------------------------------
# Charts
# ---------------------------------------------------------------------------


@router.post("/charts", response_model=ChartsResponse)
@router.post("/top-charts", response_model=ChartsResponse, include_in_schema=False)
async def top_charts(
    body: ChartsRequest,
    service: ChartServiceDep,
    engine: EngineConfigDep,
) -> ChartsResponse:
    cursor = PageCursor(offset=body.offset, limit=body.limit or engine.charts_default_limit)
    page = await service.top_charts(
        body.ranking_type,
        cursor,
        category=body.category,
        country=body.country,
    )
    return ChartsResponse(
        apps=page.items,
        total=page.pagination.total_available,
        pagination=page.pagination,
    )


@router.post("/charts-v2", response_model=ChartsV2Response)
async def charts_v2(
    body: ChartsV2Request,
    service: ChartServiceDep,
    engine: EngineConfigDep,
) -> ChartsV2Response:
    cursor = PageCursor(offset=body.offset, limit=body.limit or engine.charts_v2_default_limit)
    page = await service.charts_v2(
        body.chart_type,
        cursor,
        genre=body.genre,
        country=body.country,
        max_fetch=body.max_fetch or engine.charts_v2_default_max_fetch,
    )
    return ChartsV2Response(
        apps=page.items,
        chart_info=ChartInfo(
            chart_type=body.chart_type,
            genre=service.resolve_genre(body.genre),
            country=(body.country or engine.lookup_country).lower(),
        ),
        pagination=page.pagination,
    )


@router.get("/chart-types", response_model=ChartTypesResponse)
async def chart_types(service: ChartServiceDep) -> ChartTypesResponse:
    return ChartTypesResponse(
        chart_types=service.chart_types(),
        legacy=LegacyCatalog(
            description="Legacy chart IDs for /api/charts endpoint",
            charts=service.legacy_charts(),
        ),
    )


# ---------------------------------------------------------------------------
# Search and details
# ---------------------------------------------------------------------------


@router.post("/search", response_model=SearchResponse)
async def search(
    body: SearchRequest,
    service: ChartServiceDep,
    engine: EngineConfigDep,
) -> SearchResponse:
    cursor = PageCursor(offset=body.offset, limit=body.limit or engine.search_default_limit)
    page = await service.search(
        body.search_term,
        cursor,
        country=body.country,
        language=body.language,
    )
    return SearchResponse(apps=page.items, pagination=page.pagination)


@router.post("/app-details", response_model=AppDetailsResponse)
async def app_details(body: AppDetailsRequest, service: ChartServiceDep) -> AppDetailsResponse:
    record = await service.app_details(body.app_id)
    _logger.info("app_details_served", app_id=record.id, name=record.name)
    # Detail view shows the large artwork when the store has one.
    if record.large_artwork_url:
        record = record.model_copy(update={"artwork_url": record.large_artwork_url})
    return AppDetailsResponse(app=record)


@router.post("/overlay-data", response_model=OverlayDataResponse)
@router.post("/sensortower-data", response_model=OverlayDataResponse, include_in_schema=False)
async def overlay_data(body: OverlayDataRequest, service: ChartServiceDep) -> OverlayDataResponse:
    data = await service.overlay_data(body.app_ids, country=body.country)
    return OverlayDataResponse(data=data, total=len(body.app_ids))


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


@router.get("/health", response_model=HealthResponse)
async def health() -> HealthResponse:
    return HealthResponse(
        message="Chart aggregation API is running",
        timestamp=datetime.now(timezone.utc).isoformat(),
        version=API_VERSION,
    )
