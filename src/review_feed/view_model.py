"""Pagination state machine for the reviews screen.

Owns ReviewsState and decides when to fetch the next page. Every mutation
happens on the owner thread (the Textual event loop); the provider runs on a
worker and its result is marshalled back through `call_on_owner`.

States:
    Idle(should_load=True) --request_page--> Loading
    Loading --success--> Idle(should_load = offset < total)
    Loading --failure--> Idle(should_load=True)
Refreshing is a flag overlaid on Loading when started by refresh().

// [LAW:single-enforcer] should_load is the only concurrency gate. It is
//   cleared before dispatch and restored only in on_page_result().
"""

from __future__ import annotations

import logging
import uuid
import weakref
from collections.abc import Callable

from review_feed.provider import FetchResult, ReviewsProvider, fetch_page
from review_feed.rating import RatingRenderer
from review_feed.reviews import ReviewFeedError, ReviewsPage, RowNotFoundError, decode_page
from review_feed.rows import DEFAULT_MAX_LINES, ReviewRow, Row, RowEvent, RowEventKind
from review_feed.state import ReviewsSnapshot, ReviewsState


logger = logging.getLogger(__name__)

DEFAULT_PREFETCH_SCREENS = 2.5


def _run_inline(work: Callable[[], None]) -> None:
    work()


def _call_directly(callback: Callable, *args) -> None:
    callback(*args)


class ReviewsViewModel:
    """Drives pagination, merging, expansion and prefetch for the review list.

    Args:
        provider: fetch collaborator, `get_reviews(offset, limit) -> bytes`.
        state: initial state; a fresh ReviewsState when omitted.
        run_in_worker: schedules a zero-arg callable off the owner thread.
            Defaults to running it inline on the calling thread.
        call_on_owner: runs `callback(*args)` on the owner thread. Defaults to a
            direct call, which only holds while work stays on that thread.
        decode: payload decoder; failures must raise ReviewFeedError.
    """

    def __init__(
        self,
        provider: ReviewsProvider,
        *,
        state: ReviewsState | None = None,
        rating_renderer: RatingRenderer | None = None,
        run_in_worker: Callable[[Callable[[], None]], None] | None = None,
        call_on_owner: Callable[..., None] | None = None,
        decode: Callable[[bytes], ReviewsPage] = decode_page,
        prefetch_screens: float = DEFAULT_PREFETCH_SCREENS,
        max_lines: int = DEFAULT_MAX_LINES,
    ):
        self._provider = provider
        self._state = state if state is not None else ReviewsState()
        self.rating_renderer = rating_renderer or RatingRenderer()
        self._run_in_worker = run_in_worker or _run_inline
        self._call_on_owner = call_on_owner or _call_directly
        self._decode = decode
        self._prefetch_screens = prefetch_screens
        self._max_lines = max_lines
        # Bumped by refresh(); results from older generations are dropped.
        self._generation = 0

        # Observers, registered by the view layer
        self.on_state_change: Callable[[ReviewsSnapshot], None] | None = None
        self.on_open_photo: Callable[[ReviewRow, int], None] | None = None

    # ─── Read access ──────────────────────────────────────────────────

    @property
    def state(self) -> ReviewsState:
        return self._state

    @property
    def row_count(self) -> int:
        return len(self._state.rows)

    def row_at(self, index: int) -> Row:
        return self._state.rows[index]

    def snapshot(self) -> ReviewsSnapshot:
        return self._state.snapshot()

    def _notify(self) -> None:
        if self.on_state_change is not None:
            self.on_state_change(self._state.snapshot())

    # ─── Pagination ───────────────────────────────────────────────────

    def request_page(self) -> bool:
        """Start fetching the page at the current offset. Returns False when gated."""
        state = self._state
        if not state.should_load:
            return False
        state.should_load = False

        if state.offset == 0 and not state.is_refreshing:
            state.is_initial_loading = True
            self._notify()

        offset, limit, generation = state.offset, state.limit, self._generation
        provider = self._provider
        call_on_owner = self._call_on_owner
        # The worker must not keep the view model alive past screen teardown.
        owner_ref = weakref.ref(self)

        def deliver(result: FetchResult) -> None:
            view_model = owner_ref()
            if view_model is None:
                logger.debug("Dropping page at offset %d: view model is gone", offset)
                return
            view_model._deliver(generation, result)

        def work() -> None:
            call_on_owner(deliver, fetch_page(provider, offset, limit))

        logger.debug("Requesting reviews offset=%d limit=%d", offset, limit)
        self._run_in_worker(work)
        return True

    def _deliver(self, generation: int, result: FetchResult) -> None:
        if generation != self._generation:
            logger.debug("Dropping result from superseded fetch generation %d", generation)
            return
        self.on_page_result(result)

    def on_page_result(self, result: FetchResult) -> None:
        """Merge a fetched page into the row list, or re-arm after a failure."""
        state = self._state
        try:
            page = self._decode(result.get())
        except ReviewFeedError as exc:
            logger.warning("Loading reviews at offset %d failed: %s", state.offset, exc)
            state.should_load = True
        else:
            rows = [ReviewRow.from_review(review, self._max_lines) for review in page.items]
            if state.offset == 0:
                state.replace_rows(rows, page.count)
                state.height_cache.clear()
            else:
                state.append_rows(rows, page.count)
            state.offset += state.limit
            state.should_load = state.offset < page.count
            logger.debug(
                "Loaded %d reviews (offset=%d total=%d more=%s)",
                len(rows), state.offset, page.count, state.should_load,
            )

        state.is_initial_loading = False
        state.is_refreshing = False
        self._notify()

    def refresh(self) -> None:
        """Restart from the first page; the next success replaces all rows."""
        state = self._state
        state.offset = 0
        state.should_load = True
        state.is_refreshing = True
        self._generation += 1
        self.request_page()

    def scroll_position_changed(
        self, viewport_height: float, content_height: float, projected_offset: float
    ) -> bool:
        """Prefetch when less than `prefetch_screens` viewports remain below."""
        remaining = content_height - viewport_height - projected_offset
        if remaining <= viewport_height * self._prefetch_screens:
            return self.request_page()
        return False

    # ─── Row events ───────────────────────────────────────────────────

    def expand_row(self, row_id: uuid.UUID) -> bool:
        """Remove the truncation limit of one review. Stale ids are ignored."""
        try:
            row = self._state.review_row(row_id)
        except RowNotFoundError:
            logger.debug("Ignoring expand for unknown row %s", row_id)
            return False
        if not row.expand():
            return False
        self._state.height_cache.invalidate(row_id)
        self._notify()
        return True

    def dispatch(self, event: RowEvent) -> None:
        """Single entry point for intents raised by rendered rows."""
        if event.kind is RowEventKind.EXPAND:
            self.expand_row(event.row_id)
        elif event.kind is RowEventKind.OPEN_PHOTO:
            self._open_photo(event.row_id, event.photo_index)

    def _open_photo(self, row_id: uuid.UUID, photo_index: int | None) -> None:
        try:
            row = self._state.review_row(row_id)
        except RowNotFoundError:
            logger.debug("Ignoring photo tap for unknown row %s", row_id)
            return
        if photo_index is None or not 0 <= photo_index < len(row.photo_urls):
            return
        if self.on_open_photo is not None:
            self.on_open_photo(row, photo_index)
