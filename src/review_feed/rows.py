"""Row model: the renderable units of the review list.

Closed variant set {ReviewRow, SummaryRow}, discriminated by `kind`.
Both expose the same capability set: REUSE_ID, height(width), render(width).

Rows never reference the view model. A user intent on a row is a RowEvent
value that the view layer hands to ReviewsViewModel.dispatch().
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Union

from rich.console import Console
from textual.strip import Strip

import review_feed.layout
import review_feed.tui.rendering
from review_feed.rating import RatingRenderer
from review_feed.reviews import Review


DEFAULT_MAX_LINES = 3
UNLIMITED_LINES = 0


class RowKind(Enum):
    REVIEW = "review"
    SUMMARY = "summary"


class RowEventKind(Enum):
    EXPAND = "expand"
    OPEN_PHOTO = "open_photo"


@dataclass(frozen=True)
class RowEvent:
    """Message emitted upward by a row's interactive element."""

    kind: RowEventKind
    row_id: uuid.UUID
    photo_index: int | None = None


@dataclass(eq=False)
class ReviewRow:
    """One review, pre-formatted for display.

    max_lines is the only field mutated after creation (by expand()).
    """

    REUSE_ID: ClassVar[str] = "review"
    kind: ClassVar[RowKind] = RowKind.REVIEW

    rating: int
    username: str
    text: str
    created: str
    max_lines: int = DEFAULT_MAX_LINES
    photo_urls: tuple[str, ...] = ()
    avatar_url: str | None = None
    id: uuid.UUID = field(default_factory=uuid.uuid4)

    @classmethod
    def from_review(cls, review: Review, max_lines: int = DEFAULT_MAX_LINES) -> ReviewRow:
        return cls(
            rating=review.rating,
            username=review.full_name,
            text=review.text,
            created=review.created,
            max_lines=max_lines,
            photo_urls=review.photo_urls,
            avatar_url=review.avatar_url,
        )

    @property
    def is_expanded(self) -> bool:
        return self.max_lines == UNLIMITED_LINES

    @property
    def initials(self) -> str:
        parts = [p for p in self.username.split() if p]
        return "".join(p[0].upper() for p in parts[:2]) or "?"

    def expand(self) -> bool:
        """Lift the truncation limit. Returns True if anything changed."""
        if self.is_expanded:
            return False
        self.max_lines = UNLIMITED_LINES
        return True

    def layout(self, width: int, console: Console | None = None) -> review_feed.layout.ReviewLayout:
        return review_feed.layout.measure_review(self, width, console)

    def height(self, width: int, console: Console | None = None) -> int:
        return self.layout(width, console).height

    def render(
        self,
        width: int,
        console: Console | None = None,
        rating_renderer: RatingRenderer | None = None,
    ) -> list[Strip]:
        return review_feed.tui.rendering.render_review_row(
            self, self.layout(width, console), console, rating_renderer
        )


@dataclass(frozen=True)
class SummaryRow:
    """Terminal row showing the server's total review count."""

    REUSE_ID: ClassVar[str] = "summary"
    kind: ClassVar[RowKind] = RowKind.SUMMARY
    HEIGHT: ClassVar[int] = 3

    total_count: int

    @property
    def label(self) -> str:
        noun = "review" if self.total_count == 1 else "reviews"
        return f"{self.total_count} {noun}"

    def height(self, width: int, console: Console | None = None) -> int:
        return self.HEIGHT

    def render(
        self,
        width: int,
        console: Console | None = None,
        rating_renderer: RatingRenderer | None = None,
    ) -> list[Strip]:
        return review_feed.tui.rendering.render_summary_row(self, width, console)


Row = Union[ReviewRow, SummaryRow]
