"""Pagination models: the continuation cursor and the page envelope.

A client holds one :class:`PageCursor` per logical list (charts, charts-v2,
search).  Each fetch takes the cursor in and hands the next one back through
:attr:`PageResult.next_cursor`; the server keeps no per-client state.
"""

from __future__ import annotations

from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

RecordT = TypeVar("RecordT")


class PageCursor(BaseModel):
    """Offset/limit position within a reconciled list."""

    model_config = ConfigDict(frozen=True)

    offset: int = Field(default=0, ge=0)
    limit: int = Field(default=20, gt=0)


class Pagination(BaseModel):
    """Continuation state reported alongside every page.

    ``total`` counts records that survived resolution; ``total_available``
    counts identifiers the ranking source returned.  The gap between them
    is the number of ids the lookup provider could not resolve.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    total: int
    total_available: int
    limit: int
    offset: int
    has_more: bool
    next_offset: int | None = None


class PageResult(BaseModel, Generic[RecordT]):
    """One page of records plus its continuation state."""

    model_config = ConfigDict(frozen=True)

    items: list[RecordT]
    pagination: Pagination

    @property
    def next_cursor(self) -> PageCursor | None:
        """Cursor for the following page, or ``None`` when the list is exhausted."""
        if not self.pagination.has_more or self.pagination.next_offset is None:
            return None
        return PageCursor(offset=self.pagination.next_offset, limit=self.pagination.limit)
