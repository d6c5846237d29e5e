"""Chart aggregation API layer: routes, schemas, and middleware."""

from src.api.middleware import (
    ErrorHandlingMiddleware,
    RequestLoggingMiddleware,
    configure_cors,
    register_exception_handlers,
)
from src.api.routes import router
from src.api.schemas import (
    ChartsResponse,
    ChartsV2Response,
    ErrorResponse,
    HealthResponse,
    OverlayDataResponse,
    SearchResponse,
)

__all__ = [
    "ErrorHandlingMiddleware",
    "RequestLoggingMiddleware",
    "configure_cors",
    "register_exception_handlers",
    "router",
    "ChartsResponse",
    "ChartsV2Response",
    "ErrorResponse",
    "HealthResponse",
    "OverlayDataResponse",
    "SearchResponse",
]
