"""API middleware: CORS, request logging, and error handling.

Provides helper functions and middleware classes to configure cross-origin
resource sharing, structured request logging (via structlog), and the
conversion of every failure into the ``{"success": false, "error": ...}``
body clients expect.

# ─── MIDDLEWARE EXECUTION ORDER ────────────────────────────────────────
#
# Starlette middleware is a stack (last added, first executed):
#
#   In main.py:
#     app.add_middleware(ErrorHandlingMiddleware)   # added 1st → inner
#     app.add_middleware(RequestLoggingMiddleware)   # added 2nd → outer
#
#   Request flow:
#     Client → RequestLogging → ErrorHandling → route handler
#
# RequestLoggingMiddleware binds the request id before anything else runs,
# so the error log written by ErrorHandlingMiddleware carries it too, and
# it sees the final status code after errors were converted.
#
# Validation errors and unknown routes never reach these middlewares as
# exceptions; FastAPI's own exception handlers answer them.  Those
# handlers are replaced in register_exception_handlers() so they emit
# the same body shape.
# ──────────────────────────────────────────────────────────────────────
"""

from __future__ import annotations

import time
import uuid

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from src.api.schemas import ErrorResponse
from src.utils.errors import ChartStackError
from src.utils.logging import bind_request_context, clear_request_context, get_logger

_logger: structlog.BoundLogger = get_logger(__name__)

_REQUEST_ID_HEADER = "X-Request-ID"


def error_response(status_code: int, message: str) -> JSONResponse:
    """Build the standard error body with *status_code*."""
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(error=message).model_dump(),
    )


# ---------------------------------------------------------------------------
# CORS
# ---------------------------------------------------------------------------


def configure_cors(app: FastAPI, *, allowed_origins: list[str] | None = None) -> None:
    """Add CORS middleware to the FastAPI application.

    Parameters
    ----------
    app:
        The FastAPI application instance.
    allowed_origins:
        Explicit list of allowed origins.  Defaults to ``["*"]``.
    """
    origins = allowed_origins or ["*"]
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        # Credentials cannot be combined with a wildcard origin.
        allow_credentials="*" not in origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )


# ---------------------------------------------------------------------------
# Request Logging
# ---------------------------------------------------------------------------


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Bind per-request log context and log method, path, status and duration."""

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        request_id = request.headers.get(_REQUEST_ID_HEADER) or uuid.uuid4().hex
        bind_request_context(
            request_id=request_id,
            method=request.method,
            path=str(request.url.path),
        )
        start = time.perf_counter()
        response: Response | None = None

        try:
            response = await call_next(request)
            response.headers[_REQUEST_ID_HEADER] = request_id
            return response
        finally:
            duration_ms = round((time.perf_counter() - start) * 1000, 2)
            status_code = response.status_code if response else 500
            _logger.info(
                "http_request",
                status=status_code,
                duration_ms=duration_ms,
            )
            clear_request_context()


# ---------------------------------------------------------------------------
# Error Handling
# ---------------------------------------------------------------------------


class ErrorHandlingMiddleware(BaseHTTPMiddleware):
    """Convert application exceptions into structured JSON errors.

    ``ChartStackError`` subclasses answer with their own ``status_code``
    and message; the message is the raw upstream text, which is acceptable
    for an internal aggregation layer.  Anything else is logged with its
    traceback and answered with a generic 500 so internals never leak.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        try:
            return await call_next(request)
        except ChartStackError as exc:
            _logger.error(
                "application_error",
                error_type=type(exc).__name__,
                message=exc.message,
                provider=exc.provider_name,
                status=exc.status_code,
            )
            return error_response(exc.status_code, exc.message)
        except Exception:
            _logger.exception("unhandled_error")
            return error_response(500, "Internal server error")


# ---------------------------------------------------------------------------
# Framework exception handlers
# ---------------------------------------------------------------------------


async def _validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = exc.errors()
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{field}: {first.get('msg')}" if field else str(first.get("msg"))
    else:
        message = "Invalid request"
    _logger.warning("request_validation_failed", error=message, error_count=len(errors))
    return error_response(400, message)


async def _http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    message = "Endpoint not found" if exc.status_code == 404 else str(exc.detail)
    _logger.warning("http_error", status=exc.status_code, error=message)
    return error_response(exc.status_code, message)


def register_exception_handlers(app: FastAPI) -> None:
    """Answer validation errors with 400 and unknown routes with 404."""
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, _http_error_handler)
