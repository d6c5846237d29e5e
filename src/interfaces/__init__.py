"""Public interface definitions for all upstream providers.

Every upstream API is accessed exclusively through the abstract base classes
defined in this package.  Concrete adapters live in ``src/providers/`` and
are injected at startup in ``src/main.py``; tests inject mocks instead.

CONCRETE PROVIDER MAP:
    Interface             →  Concrete implementations (in src/providers/)
    ─────────────────────────────────────────────────────────────────
    IIdentifierSource     →  LegacyChartProvider, ChartsV2Provider
    ILookupProvider       →  ITunesLookupProvider
    IOverlayProvider      →  SensorTowerProvider
"""

from src.interfaces.identifier_source import ChartQuery, IIdentifierSource
from src.interfaces.lookup_provider import ILookupProvider
from src.interfaces.overlay_provider import IOverlayProvider

__all__ = [
    "ChartQuery",
    "IIdentifierSource",
    "ILookupProvider",
    "IOverlayProvider",
]
