"""Chart service: the facade between the API routes and the providers.

Every chart request follows the same pipeline:

    identifier source → bulk resolver → rank reconciler → paginator
        → overlay enricher

Search skips the identifier and reconciliation steps: the search provider
returns full records in its own order, which is paginated directly.

The service holds no per-request state.  Each method takes the caller's
:class:`PageCursor` and returns a page whose ``next_cursor`` the caller
hands back for the following page.
"""

from __future__ import annotations

from pydantic import ValidationError

from src.config.store_catalog import (
    ALL_GENRES_ID,
    CHART_TYPES,
    LEGACY_CHARTS,
    country_for_storefront,
    display_label,
    genre_id,
    legacy_pop_id,
    storefront_for,
)
from src.interfaces.identifier_source import ChartQuery, IIdentifierSource
from src.interfaces.lookup_provider import ILookupProvider
from src.models.pagination import PageCursor, PageResult
from src.models.store import ChartTypeInfo, LegacyChartInfo, OverlayData, ResolvedRecord
from src.services.bulk_resolver import BulkResolver
from src.services.overlay_enricher import OverlayEnricher
from src.services.paginator import Paginator
from src.services.rank_reconciler import reconcile
from src.utils.errors import InvalidCategoryError, NotFoundError
from src.utils.logging import get_logger


class ChartService:
    """Serve paginated, rank-ordered chart and search results."""

    def __init__(
        self,
        legacy_source: IIdentifierSource,
        charts_v2_source: IIdentifierSource,
        lookup_provider: ILookupProvider,
        resolver: BulkResolver,
        enricher: OverlayEnricher,
        paginator: Paginator | None = None,
        default_country: str = "US",
    ) -> None:
        self._legacy_source = legacy_source
        self._charts_v2_source = charts_v2_source
        self._lookup = lookup_provider
        self._resolver = resolver
        self._enricher = enricher
        self._paginator = paginator or Paginator(ceiling=resolver.max_ids)
        self._default_country = default_country
        self._logger = get_logger(__name__)

    @property
    def resolver(self) -> BulkResolver:
        return self._resolver

    @property
    def enricher(self) -> OverlayEnricher:
        return self._enricher

    # -- Charts ----------------------------------------------------------------

    async def top_charts(
        self,
        ranking_type: str | int | None,
        cursor: PageCursor,
        category: str | int | None = None,
        country: str | int | None = None,
    ) -> PageResult:
        """Legacy top chart (``viewTop``) for a pop id or chart key."""
        if ranking_type is None or ranking_type == "":
            raise InvalidCategoryError("rankingType is required")
        pop_id = legacy_pop_id(ranking_type)
        if pop_id is None:
            raise InvalidCategoryError(f"Invalid ranking type: {ranking_type}")

        query = ChartQuery(
            ranking=pop_id,
            genre=self.resolve_genre(category),
            country=self._default_country if country is None else country,
        )
        return await self._chart_page(self._legacy_source, query, cursor, self._country_code(query.country))

    async def charts_v2(
        self,
        chart_type: str | None,
        cursor: PageCursor,
        genre: str | int | None = None,
        country: str | None = None,
        max_fetch: int | None = None,
    ) -> PageResult:
        """Charts-v2 listing for a named chart (``FreeAppsV2``, ...)."""
        if not chart_type:
            raise InvalidCategoryError("chartType is required")

        query = ChartQuery(
            ranking=chart_type,
            genre=self.resolve_genre(genre),
            country=(country or self._default_country).lower(),
            limit=max_fetch,
        )
        return await self._chart_page(self._charts_v2_source, query, cursor, query.country)

    async def _chart_page(
        self,
        source: IIdentifierSource,
        query: ChartQuery,
        cursor: PageCursor,
        country: str,
    ) -> PageResult:
        ordered_ids = await source.fetch_identifiers(query)
        prefix = ordered_ids[: self._resolver.max_ids]

        resolved = await self._resolver.resolve(prefix, cap=len(prefix), country=country)
        records = reconcile(prefix, resolved)
        page = self._paginator.paginate(records, cursor, total_available=len(ordered_ids))
        items = await self._enricher.enrich(page.items, country=country.upper())

        self._logger.info(
            "chart_page_served",
            source=source.get_provider_name(),
            ranking=query.ranking,
            genre=query.genre,
            offset=cursor.offset,
            limit=cursor.limit,
            returned=len(items),
            total=page.pagination.total,
            total_available=page.pagination.total_available,
        )
        return page.model_copy(update={"items": items})

    # -- Search and details ----------------------------------------------------

    async def search(
        self,
        term: str,
        cursor: PageCursor,
        country: str | None = None,
        language: str | None = None,
    ) -> PageResult:
        """Free-text search, paginated in the provider's own order."""
        raw_results = await self._lookup.search(term, country or self._default_country, language)
        records: list[ResolvedRecord] = []
        for raw in raw_results:
            try:
                records.append(ResolvedRecord.from_lookup(raw))
            except ValidationError:
                self._logger.warning("search_record_invalid", track_id=raw.get("trackId"))
        return self._paginator.paginate(records, cursor)

    async def app_details(self, app_id: int, country: str | None = None) -> ResolvedRecord:
        """Resolve a single app with its detail fields.

        Raises
        ------
        NotFoundError
            If the lookup returns no record for *app_id*.
        """
        resolved = await self._resolver.resolve([app_id], cap=1, country=country)
        record = resolved.get(app_id)
        if record is None:
            raise NotFoundError("App not found")
        return record

    async def overlay_data(self, app_ids: list[int], country: str | None = None) -> dict[int, OverlayData]:
        """Overlay analytics for arbitrary ids, outside any chart window."""
        return await self._enricher.fetch_many(app_ids, country)

    # -- Catalog -----------------------------------------------------------------

    @staticmethod
    def chart_types() -> list[ChartTypeInfo]:
        return [
            ChartTypeInfo(id=key, name=name, display_name=display_label(name))
            for key, name in CHART_TYPES.items()
        ]

    @staticmethod
    def legacy_charts() -> list[LegacyChartInfo]:
        return [LegacyChartInfo(id=key, chart_id=pop_id) for key, pop_id in LEGACY_CHARTS.items()]

    # -- Helpers -------------------------------------------------------------------

    @staticmethod
    def resolve_genre(value: str | int | None) -> int:
        """Genre id for a name, a numeric id, or ``None`` (all apps)."""
        if value is None or value == "":
            return ALL_GENRES_ID
        resolved = genre_id(value)
        if resolved is None:
            raise InvalidCategoryError(f"Unknown genre: {value}")
        return resolved

    def _country_code(self, country: str | int) -> str:
        """Two-letter code for lookups, whether given a code or a storefront id."""
        storefront = storefront_for(country)
        if storefront is None:
            # Left for the identifier source to reject.
            return self._default_country
        return country_for_storefront(storefront) or self._default_country
