"""Row height memoization.

Pure key-value store keyed by row id. No eviction; growth is bounded by the
number of reviews loaded. Entries are dropped explicitly when a row's
measurable content changes (expand) or wholesale when the width changes.
"""

from collections.abc import Hashable


class HeightCache:
    def __init__(self):
        self._heights: dict[Hashable, int] = {}

    def get(self, row_id: Hashable) -> int | None:
        return self._heights.get(row_id)

    def put(self, row_id: Hashable, height: int) -> None:
        self._heights[row_id] = height

    def invalidate(self, row_id: Hashable) -> None:
        """Drop one entry. Missing ids are ignored."""
        self._heights.pop(row_id, None)

    def clear(self) -> None:
        self._heights.clear()

    def __contains__(self, row_id: object) -> bool:
        return row_id in self._heights

    def __len__(self) -> int:
        return len(self._heights)
