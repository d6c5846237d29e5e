"""Restore chart order after an unordered bulk lookup."""

from __future__ import annotations

from typing import Mapping, Sequence

from src.models.store import EnrichedRecord, RankedIdentifier, ResolvedRecord


def rank_identifiers(ordered_ids: Sequence[int]) -> list[RankedIdentifier]:
    """Pair each id with its 1-based position in *ordered_ids*."""
    return [RankedIdentifier(id=app_id, rank=index) for index, app_id in enumerate(ordered_ids, start=1)]


def reconcile(
    ordered_ids: Sequence[int],
    resolved: Mapping[int, ResolvedRecord],
) -> list[EnrichedRecord]:
    """Merge *ordered_ids* with the *resolved* mapping in a single stable pass.

    Ids missing from *resolved* are skipped, not replaced with placeholders.
    The rank of every emitted record is its position in *ordered_ids*, so
    a dropped id leaves a visible gap between its neighbours' ranks.
    """
    records: list[EnrichedRecord] = []
    for ranked in rank_identifiers(ordered_ids):
        record = resolved.get(ranked.id)
        if record is None:
            continue
        records.append(EnrichedRecord.from_resolved(record, ranked.rank))
    return records
