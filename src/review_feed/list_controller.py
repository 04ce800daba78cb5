"""List controller: adapts the view model's rows to a virtualized-list contract.

row_count / row_height / render_row for the view, plus the gesture
forwarders. Holds no row state of its own; heights live in the state's
HeightCache and are measured through the layout engine on a miss.
"""

from __future__ import annotations

import uuid

from rich.console import Console
from textual.strip import Strip

from review_feed.rows import RowEvent, RowEventKind, RowKind
from review_feed.view_model import ReviewsViewModel


class ReviewsListController:
    def __init__(self, view_model: ReviewsViewModel, console: Console | None = None):
        self._view_model = view_model
        self._console = console
        self._width: int | None = None

    @property
    def view_model(self) -> ReviewsViewModel:
        return self._view_model

    def set_console(self, console: Console) -> None:
        self._console = console

    def set_width(self, width: int) -> bool:
        """Record the list width. Cached heights are dropped when it changes."""
        if width == self._width:
            return False
        self._width = width
        self._view_model.state.height_cache.clear()
        return True

    # ─── Data source ──────────────────────────────────────────────────

    def row_count(self) -> int:
        return self._view_model.row_count

    def row_height(self, index: int, width: int) -> int:
        row = self._view_model.row_at(index)
        if row.kind is not RowKind.REVIEW:
            return row.height(width, self._console)

        self.set_width(width)
        cache = self._view_model.state.height_cache
        cached = cache.get(row.id)
        if cached is not None:
            return cached
        height = row.height(width, self._console)
        cache.put(row.id, height)
        return height

    def render_row(self, index: int, width: int) -> list[Strip]:
        row = self._view_model.row_at(index)
        return row.render(width, self._console, self._view_model.rating_renderer)

    # ─── Gestures ─────────────────────────────────────────────────────

    def near_end(self, viewport_height: float, content_height: float, offset: float) -> bool:
        return self._view_model.scroll_position_changed(viewport_height, content_height, offset)

    def tap_expand(self, row_id: uuid.UUID) -> None:
        self._view_model.dispatch(RowEvent(RowEventKind.EXPAND, row_id))

    def tap_photo(self, row_id: uuid.UUID, photo_index: int) -> None:
        self._view_model.dispatch(RowEvent(RowEventKind.OPEN_PHOTO, row_id, photo_index))

    def pull_to_refresh(self) -> None:
        self._view_model.refresh()
