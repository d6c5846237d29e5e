"""Domain models - re-exports all public model classes.

The models are organized across two submodules:
    - store.py      - App records as they move through the chart pipeline
    - pagination.py - Page cursor and page envelope
"""

from __future__ import annotations

from src.models.pagination import PageCursor, PageResult, Pagination
from src.models.store import (
    ChartTypeInfo,
    EnrichedRecord,
    LegacyChartInfo,
    OverlayData,
    RankedIdentifier,
    ResolvedRecord,
)

__all__ = [
    "ChartTypeInfo",
    "EnrichedRecord",
    "LegacyChartInfo",
    "OverlayData",
    "PageCursor",
    "PageResult",
    "Pagination",
    "RankedIdentifier",
    "ResolvedRecord",
]
