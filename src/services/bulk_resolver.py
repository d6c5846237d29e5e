"""Bulk resolver: turns app ids into validated records, one batch at a time.

The lookup provider accepts a comma-separated id list but the upstream
rejects long URLs and caps each answer at a couple of hundred records.  The
resolver therefore:

1. truncates the id list to ``min(cap, max_ids)``,
2. splits it into ``batch_size`` chunks,
3. folds over the chunks strictly sequentially, pausing ``batch_delay``
   seconds between requests,
4. validates each raw result into a :class:`ResolvedRecord`.

The answer is keyed by id and may be missing entries for any submitted id.
A missing id is "unresolved", never an error; only a failed batch request
(transport error or non-2xx) aborts the whole call.
"""

from __future__ import annotations

import asyncio
from typing import Any, Sequence

from pydantic import ValidationError

from src.interfaces.lookup_provider import ILookupProvider
from src.models.store import ResolvedRecord
from src.utils.concurrency import DelayFn, chunked, fold_batches
from src.utils.logging import get_logger

_UPSTREAM_MAX_IDS = 200
_DEFAULT_BATCH_SIZE = 50
_DEFAULT_BATCH_DELAY = 0.1


class BulkResolver:
    """Resolve ordered id lists into an unordered ``id -> record`` mapping."""

    def __init__(
        self,
        lookup_provider: ILookupProvider,
        batch_size: int = _DEFAULT_BATCH_SIZE,
        batch_delay: float = _DEFAULT_BATCH_DELAY,
        max_ids: int = _UPSTREAM_MAX_IDS,
        default_country: str = "US",
        sleep: DelayFn = asyncio.sleep,
    ) -> None:
        if batch_size <= 0:
            raise ValueError("batch_size must be positive")
        if max_ids <= 0:
            raise ValueError("max_ids must be positive")
        self._lookup = lookup_provider
        self._batch_size = batch_size
        self._batch_delay = batch_delay
        self._max_ids = max_ids
        self._default_country = default_country
        self._sleep = sleep
        self._logger = get_logger(__name__)

    @property
    def max_ids(self) -> int:
        return self._max_ids

    def plan_batches(self, ids: Sequence[int], cap: int | None = None) -> list[list[int]]:
        """Return the batches :meth:`resolve` would issue for *ids*."""
        limit = self._max_ids if cap is None else min(max(cap, 0), self._max_ids)
        return chunked(list(ids[:limit]), self._batch_size)

    async def resolve(
        self,
        ids: Sequence[int],
        cap: int | None = None,
        country: str | None = None,
    ) -> dict[int, ResolvedRecord]:
        """Resolve up to ``min(cap, max_ids)`` ids from the front of *ids*.

        Raises
        ------
        src.utils.errors.UpstreamError
            If any batch request fails.  Earlier batches are discarded.
        """
        batches = self.plan_batches(ids, cap)
        if not batches:
            return {}

        lookup_country = country or self._default_country

        async def _step(acc: dict[int, ResolvedRecord], batch: Sequence[int]) -> dict[int, ResolvedRecord]:
            raw_results = await self._lookup.lookup(list(batch), lookup_country)
            acc.update(self._validate(raw_results))
            return acc

        resolved = await fold_batches(
            batches,
            _step,
            {},
            delay=self._batch_delay,
            sleep=self._sleep,
        )

        requested = sum(len(b) for b in batches)
        self._logger.info(
            "bulk_resolve_complete",
            requested=requested,
            resolved=len(resolved),
            unresolved=requested - len(resolved),
            batches=len(batches),
        )
        return resolved

    def _validate(self, raw_results: list[dict[str, Any]]) -> dict[int, ResolvedRecord]:
        records: dict[int, ResolvedRecord] = {}
        for raw in raw_results:
            try:
                record = ResolvedRecord.from_lookup(raw)
            except ValidationError as exc:
                self._logger.warning(
                    "lookup_record_invalid",
                    track_id=raw.get("trackId"),
                    errors=exc.error_count(),
                )
                continue
            records[record.id] = record
        return records
