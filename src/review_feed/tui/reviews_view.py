"""Virtualized review list widget.

ReviewsView renders rows through Textual's Line API: render_line(y) maps a
virtual line to its row and returns one pre-rendered Strip. Only visible
lines are rendered per frame. Row heights come from the list controller
(height cache, measured on a miss); row strips are cached per
(row id, max_lines, width).
"""

from __future__ import annotations

import bisect
import logging
import uuid

from textual.cache import LRUCache
from textual.geometry import Size
from textual.scroll_view import ScrollView
from textual.strip import Strip

import review_feed.tui.rendering
from review_feed.list_controller import ReviewsListController
from review_feed.rows import Row, RowKind
from review_feed.state import ReviewsSnapshot


logger = logging.getLogger(__name__)

LOADING_MESSAGE = "Loading reviews…"
ERROR_MESSAGE = "Could not load reviews (press r to retry)"


def _row_cache_key(row: Row, width: int) -> tuple:
    if row.kind is RowKind.REVIEW:
        return (row.id, row.max_lines, width)
    return (row.REUSE_ID, row.total_count, width)


class ReviewsView(ScrollView):
    """Scrollable, virtualized list of review rows."""

    DEFAULT_CSS = """
    ReviewsView {
        color: $foreground;
        overflow-y: scroll;
        overflow-x: hidden;
        border: solid $accent;
        &:focus {
            background-tint: $foreground 5%;
        }
    }
    """

    def __init__(self, controller: ReviewsListController, *, id: str | None = None):
        super().__init__(id=id)
        self._controller = controller
        self._row_offsets: list[int] = []
        self._row_heights: list[int] = []
        self._total_lines: int = 0
        self._last_width: int = 78
        self._status: str | None = None
        # Row count at the last fill-the-viewport prefetch; a failed page adds no
        # rows, so it cannot re-trigger itself.
        self._filled_rows: int = 0
        self._strip_cache: LRUCache = LRUCache(512)
        self._line_cache: LRUCache = LRUCache(1024)

    @property
    def total_lines(self) -> int:
        return self._total_lines

    @property
    def _content_width(self) -> int:
        """Render width, with a one-cell margin so no horizontal scrollbar appears."""
        return max(1, self.scrollable_content_region.width - 1)

    @property
    def _size_known(self) -> bool:
        return self.size.width > 0

    def _width(self) -> int:
        return self._content_width if self._size_known else self._last_width

    # ─── Row bookkeeping ──────────────────────────────────────────────

    def on_mount(self) -> None:
        self._controller.set_console(self.app.console)

    def show_snapshot(self, snapshot: ReviewsSnapshot) -> None:
        """Re-layout after a state change from the view model."""
        if snapshot.rows:
            self._status = None
        elif snapshot.is_initial_loading or snapshot.is_refreshing:
            self._status = LOADING_MESSAGE
        elif snapshot.total_count is None:
            self._status = ERROR_MESSAGE
        else:
            self._status = None
        self.update_rows()

    def update_rows(self) -> None:
        """Rebuild row offsets and virtual size from the controller."""
        width = self._width()
        heights = [
            self._controller.row_height(index, width)
            for index in range(self._controller.row_count())
        ]
        offsets = []
        offset = 0
        for height in heights:
            offsets.append(offset)
            offset += height

        self._row_heights = heights
        self._row_offsets = offsets
        self._total_lines = offset
        self.virtual_size = Size(width, self._total_lines)
        self._line_cache.clear()
        self.refresh()

        # Nothing to scroll means no scroll event will ever ask for more.
        viewport = self.scrollable_content_region.height
        row_count = len(heights)
        if row_count < self._filled_rows:
            self._filled_rows = 0
        if self._size_known and 0 < self._total_lines <= viewport and row_count > self._filled_rows:
            self._filled_rows = row_count
            self._controller.near_end(viewport, self._total_lines, 0)

    def _find_row_for_line(self, line_y: int) -> int | None:
        index = bisect.bisect_right(self._row_offsets, line_y) - 1
        if index < 0 or index >= len(self._row_heights):
            return None
        if line_y >= self._row_offsets[index] + self._row_heights[index]:
            return None
        return index

    def _row_strips(self, index: int, width: int) -> list[Strip]:
        row = self._controller.view_model.row_at(index)
        key = _row_cache_key(row, width)
        strips = self._strip_cache.get(key)
        if strips is None:
            strips = self._controller.render_row(index, width)
            self._strip_cache[key] = strips
        return strips

    # ─── Line API ─────────────────────────────────────────────────────

    def render_line(self, y: int) -> Strip:
        scroll_x, scroll_y = self.scroll_offset
        actual_y = scroll_y + y
        width = self._content_width

        if self._total_lines == 0:
            if self._status and y == self.scrollable_content_region.height // 2:
                return review_feed.tui.rendering.render_status_line(
                    self._status, width, self.app.console
                ).apply_style(self.rich_style)
            return Strip.blank(width, self.rich_style)

        try:
            if actual_y >= self._total_lines:
                return Strip.blank(width, self.rich_style)

            key = (actual_y, scroll_x, width)
            cached = self._line_cache.get(key)
            if cached is not None:
                return cached

            index = self._find_row_for_line(actual_y)
            if index is None:
                return Strip.blank(width, self.rich_style)

            strips = self._row_strips(index, width)
            local_y = actual_y - self._row_offsets[index]
            if local_y < len(strips):
                strip = strips[local_y].crop_extend(scroll_x, scroll_x + width, self.rich_style)
            else:
                strip = Strip.blank(width, self.rich_style)
            strip = strip.apply_style(self.rich_style)
            self._line_cache[key] = strip
            return strip
        except Exception:
            logger.exception("Failed to render review list line %d", actual_y)
            return Strip.blank(width, self.rich_style)

    # ─── Events ───────────────────────────────────────────────────────

    def on_resize(self, event) -> None:
        """Re-measure every row at the new width."""
        width = self._content_width
        if width != self._last_width and width > 0:
            self._last_width = width
            self._controller.set_width(width)
            self._strip_cache.clear()
        self.update_rows()

    def watch_scroll_y(self, old_value: float, new_value: float) -> None:
        """Forward every scroll position change to the prefetch trigger.

        Must call super() to keep scrollbar sync and refresh.
        """
        super().watch_scroll_y(old_value, new_value)
        self._controller.near_end(
            self.scrollable_content_region.height, self._total_lines, new_value
        )

    def on_click(self, event) -> None:
        """Expand rows / open photos from segment metadata set by rendering.py."""
        meta = event.style.meta
        expand_id = meta.get(review_feed.tui.rendering.META_EXPAND_ROW)
        if expand_id is not None:
            self._controller.tap_expand(uuid.UUID(expand_id))
            return
        photo = meta.get(review_feed.tui.rendering.META_OPEN_PHOTO)
        if photo is not None:
            row_id, photo_index = photo
            self._controller.tap_photo(uuid.UUID(row_id), photo_index)

    def action_refresh(self) -> None:
        self._controller.pull_to_refresh()
