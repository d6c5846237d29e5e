"""Chart aggregation API: FastAPI application entry point.

Wires together the providers, services, and routes via dependency
injection.  Loads settings from ``.env`` and engine tunables from
``config/config.yaml``, configures structured logging, and exposes
``app`` for uvicorn.

``build_components`` is also used by the CLI, which runs the same chart
service outside the web server.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import httpx
import structlog
import uvicorn
from fastapi import FastAPI

from src.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
    register_exception_handlers,
)
from src.api.routes import API_VERSION
from src.api.routes import router as api_router
from src.config.loader import EngineConfig, build_engine_config, load_config
from src.config.settings import Settings
from src.providers.charts.charts_v2_provider import ChartsV2Provider
from src.providers.charts.legacy_chart_provider import LegacyChartProvider
from src.providers.lookup.itunes_lookup_provider import ITunesLookupProvider
from src.providers.overlay.sensor_tower_provider import SensorTowerProvider
from src.services.bulk_resolver import BulkResolver
from src.services.chart_service import ChartService
from src.services.overlay_enricher import OverlayEnricher, OverlayWindow
from src.services.paginator import Paginator
from src.utils.logging import configure_logging, get_logger

# ---------------------------------------------------------------------------
# Module-level settings & logging
# ---------------------------------------------------------------------------

settings = Settings()
config = load_config(settings=settings)
engine_config = build_engine_config(config)

configure_logging(
    log_level=settings.log_level,
    json_output=(settings.app_env == "production"),
)
_logger: structlog.BoundLogger = get_logger(__name__)


# ---------------------------------------------------------------------------
# Component construction
# ---------------------------------------------------------------------------


def build_components(
    app_settings: Settings | None = None,
    engine: EngineConfig | None = None,
    http_client: httpx.AsyncClient | None = None,
) -> dict[str, Any]:
    """Construct every provider and service instance for the application.

    Returns a flat dict of named components to be stored on ``app.state``.
    The caller owns ``components["http_client"]`` and must close it.
    """
    s = app_settings or settings
    e = engine or engine_config

    # -- Shared resources --
    http_client = http_client or httpx.AsyncClient(
        timeout=s.http_timeout,
        follow_redirects=True,
    )

    # -- Providers --
    legacy_source = LegacyChartProvider(
        http_client=http_client,
        base_url=s.legacy_charts_base_url,
        timeout=s.http_timeout,
    )
    charts_v2_source = ChartsV2Provider(
        http_client=http_client,
        base_url=s.charts_v2_base_url,
        timeout=s.http_timeout,
    )
    lookup_provider = ITunesLookupProvider(
        http_client=http_client,
        base_url=s.lookup_base_url,
        timeout=s.http_timeout,
    )
    overlay_provider = SensorTowerProvider(
        http_client=http_client,
        base_url=s.overlay_base_url,
        timeout=s.overlay_timeout,
    )

    # -- Services --
    resolver = BulkResolver(
        lookup_provider=lookup_provider,
        batch_size=e.batch_size,
        batch_delay=e.batch_delay_seconds,
        max_ids=e.max_ids,
        default_country=e.lookup_country,
    )
    enricher = OverlayEnricher(
        overlay_provider=overlay_provider,
        window=OverlayWindow(start=e.overlay_window_start, end=e.overlay_window_end),
        max_concurrency=e.overlay_max_concurrency,
        default_country=e.overlay_country,
    )
    chart_service = ChartService(
        legacy_source=legacy_source,
        charts_v2_source=charts_v2_source,
        lookup_provider=lookup_provider,
        resolver=resolver,
        enricher=enricher,
        paginator=Paginator(ceiling=e.max_ids),
        default_country=e.lookup_country,
    )

    return {
        "http_client": http_client,
        "engine_config": e,
        "chart_service": chart_service,
        "provider_list": [
            legacy_source.get_provider_name(),
            charts_v2_source.get_provider_name(),
            lookup_provider.get_provider_name(),
            overlay_provider.get_provider_name(),
        ],
    }


# ---------------------------------------------------------------------------
# Application lifespan (startup / shutdown)
# ---------------------------------------------------------------------------


@asynccontextmanager
async def _lifespan(application: FastAPI):  # noqa: ANN201
    """Initialise providers and services on startup, clean up on shutdown."""
    components = build_components(settings, engine_config)

    for key, value in components.items():
        setattr(application.state, key, value)

    _logger.info(
        "app_startup",
        version=API_VERSION,
        environment=settings.app_env,
        providers=components["provider_list"],
        overlay_window=[engine_config.overlay_window_start, engine_config.overlay_window_end],
        max_ids=engine_config.max_ids,
    )

    yield

    # -- Shutdown: close shared httpx client --
    http_client: httpx.AsyncClient = components["http_client"]
    await http_client.aclose()
    _logger.info("app_shutdown", message="HTTP client closed")


# ---------------------------------------------------------------------------
# FastAPI application factory
# ---------------------------------------------------------------------------


def create_app() -> FastAPI:
    """Build and configure the FastAPI application."""
    application = FastAPI(
        title="Chart Stack API",
        version=API_VERSION,
        description=(
            "Top charts, search, app details and download/revenue overlays "
            "for the App Store, in rank order with offset/limit pagination."
        ),
        lifespan=_lifespan,
    )

    # -- Middleware (order matters: last added = first executed) --
    application.add_middleware(ErrorHandlingMiddleware)
    application.add_middleware(RequestLoggingMiddleware)
    configure_cors(application, allowed_origins=settings.get_cors_origins())
    register_exception_handlers(application)

    # -- API routes --
    application.include_router(api_router)

    return application


app = create_app()

# ---------------------------------------------------------------------------
# CLI entry point
# ---------------------------------------------------------------------------

if __name__ == "__main__":
    uvicorn.run(
        "src.main:app",
        host=settings.app_host,
        port=settings.app_port,
        reload=(settings.app_env == "development"),
    )
