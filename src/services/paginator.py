"""Offset/limit pagination over a reconciled record list.

The paginator is a pure function of its inputs: the same sequence and
cursor always yield the same page.  ``has_more`` is computed against the
identifier count reported by the ranking source, clipped to the resolver
ceiling, so a client never asks for a page the resolver cannot fill.
"""

from __future__ import annotations

from typing import Sequence, TypeVar

from src.models.pagination import PageCursor, PageResult, Pagination

RecordT = TypeVar("RecordT")

_DEFAULT_CEILING = 200


class Paginator:
    """Slice record lists and compute continuation state."""

    def __init__(self, ceiling: int | None = _DEFAULT_CEILING) -> None:
        if ceiling is not None and ceiling <= 0:
            raise ValueError("ceiling must be positive")
        self._ceiling = ceiling

    def paginate(
        self,
        sequence: Sequence[RecordT],
        cursor: PageCursor,
        total_available: int | None = None,
    ) -> PageResult[RecordT]:
        """Return the page of *sequence* selected by *cursor*.

        Parameters
        ----------
        sequence:
            The reconciled (post-drop) records.
        cursor:
            Requested offset and limit.
        total_available:
            Length of the identifier list before resolution.  Defaults to
            ``len(sequence)`` for lists with no resolution step (search).
        """
        if total_available is None:
            total_available = len(sequence)

        start = max(0, cursor.offset)
        end = min(len(sequence), start + cursor.limit)
        items = list(sequence[start:end])

        horizon = total_available if self._ceiling is None else min(total_available, self._ceiling)
        current_end = cursor.offset + len(items)
        has_more = current_end < horizon

        pagination = Pagination(
            total=len(sequence),
            total_available=total_available,
            limit=cursor.limit,
            offset=cursor.offset,
            has_more=has_more,
            next_offset=current_end if has_more else None,
        )
        return PageResult(items=items, pagination=pagination)
