"""Textual in-process test harness for review-feed.

Re-exports all public API for convenient imports:
    from tests.harness import run_app, press_and_settle, strips_to_text, ...
"""

from tests.harness.app_runner import run_app
from tests.harness.interactions import (
    press_and_settle,
    click_and_settle,
    resize_and_settle,
    wait_until,
)
from tests.harness.content import (
    strips_to_text,
    segments_with_meta,
    widget_text,
)
from tests.harness.builders import (
    DeferredExecutor,
    FakeProvider,
    failing_provider,
    make_items,
    make_payload,
    make_review_dict,
    run_inline,
)

__all__ = [
    "run_app",
    "press_and_settle",
    "click_and_settle",
    "resize_and_settle",
    "wait_until",
    "strips_to_text",
    "segments_with_meta",
    "widget_text",
    "DeferredExecutor",
    "FakeProvider",
    "failing_provider",
    "make_items",
    "make_payload",
    "make_review_dict",
    "run_inline",
]
