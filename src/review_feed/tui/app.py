"""Main TUI application using Textual.

// [LAW:locality-or-seam] Thin coordinator. Pagination lives in the view model,
//   measuring in the list controller, painting in rendering.py.
// [LAW:one-source-of-truth] ReviewsState (owned by the view model) is the sole
//   list state; widgets only receive snapshots of it.
"""

from __future__ import annotations

import logging

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.css.query import NoMatches
from textual.widgets import Header

import review_feed.settings
from review_feed.images import ImageLoader
from review_feed.list_controller import ReviewsListController
from review_feed.provider import ReviewsProvider
from review_feed.rows import ReviewRow
from review_feed.state import ReviewsSnapshot, ReviewsState
from review_feed.tui.photo_viewer import PhotoViewerScreen
from review_feed.tui.reviews_view import ReviewsView
from review_feed.tui.status_footer import StatusFooter
from review_feed.view_model import ReviewsViewModel


logger = logging.getLogger(__name__)


class ReviewsApp(App):
    """TUI application for review-feed."""

    TITLE = "Reviews"

    BINDINGS = [
        Binding("r", "refresh", "Refresh"),
        Binding("q", "quit", "Quit"),
    ]

    def __init__(
        self,
        provider: ReviewsProvider,
        *,
        settings: review_feed.settings.FeedSettings | None = None,
        image_loader: ImageLoader | None = None,
        session_name: str = "reviews",
    ):
        super().__init__()
        settings = settings or review_feed.settings.FeedSettings()
        self._image_loader = image_loader or ImageLoader()
        self._view_id = "reviews-view"

        # Fetches run on Textual thread workers and hop back via call_from_thread.
        self._view_model = ReviewsViewModel(
            provider,
            state=ReviewsState(limit=settings.page_size),
            run_in_worker=self._run_in_worker,
            call_on_owner=self.call_from_thread,
            prefetch_screens=settings.prefetch_screens,
            max_lines=settings.max_lines,
        )
        self._controller = ReviewsListController(self._view_model)

        self.sub_title = f"session: {session_name}"

    @property
    def view_model(self) -> ReviewsViewModel:
        return self._view_model

    def _run_in_worker(self, work) -> None:
        self.run_worker(work, thread=True, exclusive=False, group="reviews")

    def compose(self) -> ComposeResult:
        yield Header()
        yield ReviewsView(self._controller, id=self._view_id)
        yield StatusFooter()

    def on_mount(self) -> None:
        self._view_model.on_state_change = self._on_state_change
        self._view_model.on_open_photo = self._on_open_photo
        self._get_view().focus()
        self._view_model.request_page()
        self._update_footer(self._view_model.snapshot())

    # ─── Widget access ────────────────────────────────────────────────

    def _get_view(self) -> ReviewsView:
        return self.query_one(f"#{self._view_id}", ReviewsView)

    def _get_footer(self) -> StatusFooter | None:
        try:
            return self.query_one(StatusFooter)
        except NoMatches:
            return None

    # ─── View model observers ─────────────────────────────────────────

    def _on_state_change(self, snapshot: ReviewsSnapshot) -> None:
        self._get_view().show_snapshot(snapshot)
        self._update_footer(snapshot)

    def _update_footer(self, snapshot: ReviewsSnapshot) -> None:
        footer = self._get_footer()
        if footer is not None:
            footer.update_display(snapshot)

    def _on_open_photo(self, row: ReviewRow, photo_index: int) -> None:
        logger.debug("Opening photo %d of row %s", photo_index, row.id)
        self.push_screen(PhotoViewerScreen(row, photo_index, self._image_loader))

    # ─── Actions ──────────────────────────────────────────────────────

    def action_refresh(self) -> None:
        self._get_view().action_refresh()
        # refresh() does not notify; reflect the flag in the footer directly
        self._update_footer(self._view_model.snapshot())
