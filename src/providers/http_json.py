"""Shared JSON-over-HTTP helper for upstream providers.

Every upstream in this service is "a remote procedure that returns JSON or
fails".  :func:`get_json` captures that contract once: transport errors,
non-2xx statuses and undecodable bodies all become the caller's domain
error type, carrying the provider name for log scanning.
"""

from __future__ import annotations

from typing import Any

import httpx

from src.utils.errors import ChartStackError, UpstreamError
from src.utils.logging import get_logger

_logger = get_logger(__name__)


async def get_json(
    http: httpx.AsyncClient,
    url: str,
    *,
    provider_name: str,
    params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
    timeout: float | None = None,
    error_cls: type[ChartStackError] = UpstreamError,
) -> Any:
    """GET *url* and return the decoded JSON body.

    Raises
    ------
    ChartStackError
        An instance of *error_cls* for transport failures, timeouts,
        non-2xx responses, and bodies that are not valid JSON.
    """
    request_kwargs: dict[str, Any] = {"params": params, "headers": headers}
    if timeout is not None:
        request_kwargs["timeout"] = timeout

    try:
        response = await http.get(url, **request_kwargs)
    except httpx.TimeoutException as exc:
        _logger.warning("upstream_timeout", provider=provider_name, url=url)
        raise error_cls(
            message=f"Request timed out: {exc}",
            provider_name=provider_name,
        ) from exc
    except httpx.HTTPError as exc:
        _logger.warning("upstream_transport_error", provider=provider_name, url=url, error=str(exc))
        raise error_cls(message=str(exc) or type(exc).__name__, provider_name=provider_name) from exc

    if not response.is_success:
        _logger.warning("upstream_http_error", provider=provider_name, url=url, status=response.status_code)
        raise error_cls(
            message=f"HTTP error! status: {response.status_code}",
            provider_name=provider_name,
        )

    try:
        return response.json()
    except ValueError as exc:
        raise error_cls(
            message=f"Invalid JSON in response: {exc}",
            provider_name=provider_name,
        ) from exc
