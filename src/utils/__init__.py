"""Utility modules for the chart aggregation API.

Available utility modules (all re-exported here for convenience):

- **errors** -- Exception hierarchy rooted at ChartStackError; each subclass
  declares the HTTP status the API layer answers with.
- **concurrency** -- Semaphore-throttled fan-out for overlay fetches and the
  sequential batch fold used by the bulk resolver.
- **logging** -- structlog setup with a dual-renderer pattern: coloured
  console output in development, structured JSON in production.
"""

# -- Exception hierarchy -----------------------------------------------------
from src.utils.errors import (
    ChartStackError,
    ConfigurationError,
    InvalidCategoryError,
    NotFoundError,
    OverlayFailure,
    UpstreamError,
)

# -- Async concurrency helpers -----------------------------------------------
from src.utils.concurrency import chunked, fold_batches, throttled_gather

# -- Structured logging setup ------------------------------------------------
from src.utils.logging import configure_logging, get_logger

__all__ = [
    "ChartStackError",
    "ConfigurationError",
    "InvalidCategoryError",
    "NotFoundError",
    "OverlayFailure",
    "UpstreamError",
    "chunked",
    "configure_logging",
    "fold_batches",
    "get_logger",
    "throttled_gather",
]
