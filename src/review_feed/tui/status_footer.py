"""One-line footer: review count, loading/refreshing state and key hints."""

from rich.text import Text
from textual.widgets import Static

from review_feed.state import ReviewsSnapshot

REFRESHING_LABEL = "Refreshing…"
LOADING_LABEL = "Loading…"


def footer_text(snapshot: ReviewsSnapshot) -> Text:
    """Pure renderer so the footer content can be tested without an app."""
    text = Text()
    if snapshot.total_count is None:
        text.append("– reviews", style="dim")
    else:
        text.append(f"{snapshot.review_count} of {snapshot.total_count}", style="bold")
        text.append(" reviews loaded", style="dim")

    if snapshot.is_refreshing:
        text.append(f"  {REFRESHING_LABEL}", style="italic yellow")
    elif snapshot.is_initial_loading or (not snapshot.should_load and _in_flight(snapshot)):
        text.append(f"  {LOADING_LABEL}", style="italic")

    text.append("   r refresh · q quit", style="dim")
    return text


def _in_flight(snapshot: ReviewsSnapshot) -> bool:
    # should_load is cleared at dispatch; a page is outstanding while more remain
    return snapshot.total_count is not None and snapshot.offset < snapshot.total_count


class StatusFooter(Static):
    DEFAULT_CSS = """
    StatusFooter {
        dock: bottom;
        height: 1;
        padding: 0 1;
    }
    """

    ALLOW_SELECT = False

    def update_display(self, snapshot: ReviewsSnapshot) -> None:
        self.update(footer_text(snapshot))
