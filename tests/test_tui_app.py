"""In-process Textual tests for ReviewsApp."""

import pytest

from review_feed.rows import RowKind
from review_feed.settings import FeedSettings
from review_feed.tui.photo_viewer import PhotoViewerScreen
from review_feed.tui.reviews_view import ERROR_MESSAGE, ReviewsView
from tests.harness import (
    FakeProvider,
    click_and_settle,
    failing_provider,
    make_items,
    press_and_settle,
    run_app,
    wait_until,
    widget_text,
)

pytestmark = pytest.mark.textual

LONG_TEXT = "\n".join(f"line {i}" for i in range(10))


def get_view(app) -> ReviewsView:
    return app.query_one(ReviewsView)


def review_rows(app):
    return [row for row in app.view_model.state.rows if row.kind is RowKind.REVIEW]


def click_offset(view, rect):
    """Widget-relative offset of a row-0 frame, inside its first cell."""
    return (
        view.content_offset.x + rect.x + 1,
        view.content_offset.y + rect.y - int(view.scroll_offset.y),
    )


async def test_first_page_loads_on_mount():
    async with run_app(items=make_items(5)) as (pilot, app):
        view = get_view(app)

        assert len(app.view_model.state.rows) == 6
        assert view.total_lines > 0
        assert "5 of 5" in widget_text(app, "StatusFooter")


async def test_click_show_more_expands_row():
    async with run_app(items=make_items(3, text=LONG_TEXT)) as (pilot, app):
        view = get_view(app)
        row = app.view_model.row_at(0)
        before = view.total_lines
        show_more = row.layout(view._content_width).show_more
        assert not show_more.is_empty

        await click_and_settle(pilot, "#reviews-view", click_offset(view, show_more))

        assert row.is_expanded
        assert view.total_lines > before


async def test_click_photo_opens_viewer_and_escape_closes_it():
    items = make_items(2, photo_urls=["https://p/1.jpg", "https://p/2.jpg"])
    async with run_app(items=items) as (pilot, app):
        view = get_view(app)
        row = app.view_model.row_at(0)
        chip = row.layout(view._content_width).photos[1]

        await click_and_settle(pilot, "#reviews-view", click_offset(view, chip))

        screen = app.screen
        assert isinstance(screen, PhotoViewerScreen)
        assert screen.url == "https://p/2.jpg"
        assert await wait_until(pilot, lambda: screen.loaded)
        assert screen.image is not None

        await press_and_settle(pilot, "escape")
        assert not isinstance(app.screen, PhotoViewerScreen)


async def test_refresh_key_reloads_first_page():
    provider = FakeProvider(make_items(5))
    async with run_app(provider=provider) as (pilot, app):
        old_ids = {row.id for row in review_rows(app)}

        await press_and_settle(pilot, "r")
        assert await wait_until(
            pilot, lambda: len(provider.calls) == 2 and not app.view_model.state.is_refreshing
        )

        assert provider.calls == [(0, 20), (0, 20)]
        assert old_ids.isdisjoint(row.id for row in review_rows(app))


async def test_scrolling_near_the_end_loads_next_page():
    provider = FakeProvider(make_items(45))
    async with run_app(provider=provider, size=(100, 20)) as (pilot, app):
        assert provider.calls == [(0, 20)]

        get_view(app).scroll_end(animate=False)
        assert await wait_until(pilot, lambda: len(review_rows(app)) >= 40)
        assert provider.calls[1] == (20, 20)


async def test_page_size_setting_is_used():
    provider = FakeProvider(make_items(12))
    async with run_app(provider=provider, settings=FeedSettings(page_size=4)) as (pilot, app):
        assert provider.calls[0] == (0, 4)


async def test_failed_first_load_shows_retry_message():
    provider = failing_provider()
    async with run_app(provider=provider, wait_for_first_page=False) as (pilot, app):
        assert await wait_until(
            pilot, lambda: provider.calls and not app.view_model.state.is_initial_loading
        )
        await pilot.pause()

        assert app.view_model.state.rows == []
        assert get_view(app)._status == ERROR_MESSAGE
