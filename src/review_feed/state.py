"""Pagination state for the reviews screen.

// [LAW:one-source-of-truth] ReviewsState is the single owned instance; only
//   ReviewsViewModel mutates it. Observers get ReviewsSnapshot values.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field

from review_feed.height_cache import HeightCache
from review_feed.reviews import RowNotFoundError
from review_feed.rows import ReviewRow, Row, RowKind, SummaryRow


DEFAULT_PAGE_SIZE = 20


@dataclass(frozen=True)
class ReviewsSnapshot:
    """Immutable view of the state handed to observers."""

    rows: tuple[Row, ...]
    offset: int
    limit: int
    should_load: bool
    is_initial_loading: bool
    is_refreshing: bool
    total_count: int | None

    @property
    def review_count(self) -> int:
        return sum(1 for row in self.rows if row.kind is RowKind.REVIEW)


@dataclass
class ReviewsState:
    rows: list[Row] = field(default_factory=list)
    limit: int = DEFAULT_PAGE_SIZE
    offset: int = 0
    should_load: bool = True
    is_initial_loading: bool = False
    is_refreshing: bool = False
    total_count: int | None = None
    height_cache: HeightCache = field(default_factory=HeightCache)
    # id -> position in rows; rebuilt whenever rows is replaced or extended
    _index: dict[uuid.UUID, int] = field(default_factory=dict, repr=False)

    def __post_init__(self):
        if self.limit <= 0:
            raise ValueError(f"page size must be positive, got {self.limit}")
        self._reindex()

    def _reindex(self, start: int = 0) -> None:
        if start == 0:
            self._index.clear()
        for position in range(start, len(self.rows)):
            row = self.rows[position]
            if row.kind is RowKind.REVIEW:
                self._index[row.id] = position

    def replace_rows(self, review_rows: list[ReviewRow], total: int) -> None:
        """Drop everything and start over with one page plus a summary row."""
        self.rows = [*review_rows, SummaryRow(total)]
        self.total_count = total
        self._reindex()

    def append_rows(self, review_rows: list[ReviewRow], total: int) -> None:
        """Append a page, keeping exactly one trailing summary row."""
        self.rows = [row for row in self.rows if row.kind is not RowKind.SUMMARY]
        start = len(self.rows)
        self.rows.extend(review_rows)
        self.rows.append(SummaryRow(total))
        self.total_count = total
        self._reindex(start)

    def index_of(self, row_id: uuid.UUID) -> int:
        """Position of a review row. Raises RowNotFoundError for stale ids."""
        try:
            return self._index[row_id]
        except KeyError:
            raise RowNotFoundError(f"no row with id {row_id}") from None

    def review_row(self, row_id: uuid.UUID) -> ReviewRow:
        return self.rows[self.index_of(row_id)]

    def snapshot(self) -> ReviewsSnapshot:
        return ReviewsSnapshot(
            rows=tuple(self.rows),
            offset=self.offset,
            limit=self.limit,
            should_load=self.should_load,
            is_initial_loading=self.is_initial_loading,
            is_refreshing=self.is_refreshing,
            total_count=self.total_count,
        )
