"""Custom exception hierarchy for the chart aggregation API.

All application exceptions inherit from :class:`ChartStackError`, which
carries an optional ``provider_name`` so error handlers can identify which
upstream source (e.g. "itunes_lookup", "charts_v2", "sensor_tower") caused
the failure.

The hierarchy mirrors how a request can go wrong:

    ChartStackError  (base -- catch-all for any application error)
    +-- InvalidCategoryError  (client input rejected before any network call)
    +-- UpstreamError         (transport failure / non-2xx from a provider)
    +-- NotFoundError         (single-id lookup resolved nothing)
    +-- OverlayFailure        (analytics overlay fetch failed for one id)
    +-- ConfigurationError    (startup / invalid tunables)

Each subclass declares the HTTP ``status_code`` the API layer answers with.
``OverlayFailure`` is never surfaced as a request failure: the overlay
enricher converts it into a per-record ``error`` field.
"""


class ChartStackError(Exception):
    """Base exception for all application errors.

    Every subclass carries a human-readable ``message`` and an optional
    ``provider_name`` identifying which upstream service triggered the
    error.  The ``__str__`` method prefixes the provider name in brackets
    for structured log output, e.g. ``[itunes_lookup] HTTP error! status: 503``.
    """

    status_code: int = 500

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        provider_name: str | None = None,
    ) -> None:
        self._message = message
        self._provider_name = provider_name
        super().__init__(self._message)

    @property
    def message(self) -> str:
        return self._message

    @property
    def provider_name(self) -> str | None:
        return self._provider_name

    def __str__(self) -> str:
        if self._provider_name:
            return f"[{self._provider_name}] {self._message}"
        return self._message


# ---------------------------------------------------------------------------
# Client input
# ---------------------------------------------------------------------------

class InvalidCategoryError(ChartStackError):
    """Raised when a chart type, ranking type or country is not in the known enumeration."""

    status_code = 400

    def __init__(
        self,
        message: str = "Invalid chart category",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class NotFoundError(ChartStackError):
    """Raised when a single-id lookup returns no record."""

    status_code = 404

    def __init__(
        self,
        message: str = "App not found",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Upstream providers
# ---------------------------------------------------------------------------

class UpstreamError(ChartStackError):
    """Raised when an upstream provider fails at the transport level or answers non-2xx.

    Failures in the identifier sources or the bulk resolver abort the whole
    request; the message is the raw upstream error text.
    """

    status_code = 500

    def __init__(
        self,
        message: str = "Upstream provider request failed",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


class OverlayFailure(ChartStackError):
    """Raised by the overlay provider when analytics for one app cannot be fetched."""

    status_code = 500

    def __init__(
        self,
        message: str = "Overlay data unavailable",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

class ConfigurationError(ChartStackError):
    """Raised when configuration is invalid or missing at startup."""

    def __init__(
        self,
        message: str = "Invalid or missing configuration",
        provider_name: str | None = None,
    ) -> None:
        super().__init__(message=message, provider_name=provider_name)
