"""Identifier-source implementations.

Two concrete implementations of IIdentifierSource, selected by endpoint:

    1. LegacyChartProvider  -- MZStore ``viewTop`` pages keyed by numeric pop
       id and a storefront header.  Backs ``/api/charts``.
    2. ChartsV2Provider     -- MZStoreServices ``charts`` web service keyed by
       chart name.  Backs ``/api/charts-v2``.

Both return an ordered list of app ids; the list order is the ranking.
"""

from src.providers.charts.charts_v2_provider import ChartsV2Provider
from src.providers.charts.legacy_chart_provider import LegacyChartProvider

__all__ = ["ChartsV2Provider", "LegacyChartProvider"]
