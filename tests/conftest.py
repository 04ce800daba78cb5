"""Pytest configuration and shared fixtures for review-feed tests."""

import pytest

import review_feed.io.logging_setup
from review_feed.state import ReviewsState
from review_feed.view_model import ReviewsViewModel
from tests.harness.builders import DeferredExecutor, FakeProvider, make_items, run_inline


@pytest.fixture(autouse=True)
def _isolated_config(tmp_path, monkeypatch):
    """Never read or write the developer's real settings or log directory."""
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "config"))
    monkeypatch.setenv("REVIEW_FEED_LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.delenv("REVIEW_FEED_LOG_FILE", raising=False)
    monkeypatch.delenv("REVIEW_FEED_LOG_LEVEL", raising=False)
    yield
    review_feed.io.logging_setup.reset()


@pytest.fixture
def provider_45():
    """The canonical paging scenario: 45 reviews on the server."""
    return FakeProvider(make_items(45))


@pytest.fixture
def make_view_model():
    """Factory for a view model with synchronous (or deferred) executors.

    Returns (view_model, snapshots) where snapshots collects every notification.
    """

    def _make(provider, *, limit=20, executor=None, **kwargs):
        view_model = ReviewsViewModel(
            provider,
            state=ReviewsState(limit=limit),
            run_in_worker=executor or run_inline,
            **kwargs,
        )
        snapshots = []
        view_model.on_state_change = snapshots.append
        return view_model, snapshots

    return _make


@pytest.fixture
def deferred():
    return DeferredExecutor()
