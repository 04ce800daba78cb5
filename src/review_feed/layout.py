"""Layout engine for review rows.

Computes sub-element frames and total row height for a review at a given
list width. Units are terminal cells (x/width) and lines (y/height).

The grid is fixed: a square-ish avatar box at the left margin, and a single
column to its right holding, top to bottom, the username, the rating row,
optional photo chips, the (possibly truncated) body text, the "show more"
affordance and the creation date.

// [LAW:one-source-of-truth] wrap_text() is the only place text is wrapped;
//   rendering.py paints exactly the lines measured here.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from io import StringIO
from typing import Protocol

from rich.cells import cell_len
from rich.console import Console
from rich.text import Text

from review_feed.rating import RATING_WIDTH


SHOW_MORE_TEXT = "Show more..."


@dataclass(frozen=True)
class Rect:
    x: int
    y: int
    width: int
    height: int

    @property
    def right(self) -> int:
        return self.x + self.width

    @property
    def bottom(self) -> int:
        return self.y + self.height

    @property
    def area(self) -> int:
        return self.width * self.height

    @property
    def is_empty(self) -> bool:
        return self.area == 0

    def contains(self, x: int, y: int) -> bool:
        return self.x <= x < self.right and self.y <= y < self.bottom


ZERO_RECT = Rect(0, 0, 0, 0)


@dataclass(frozen=True)
class Insets:
    top: int
    left: int
    bottom: int
    right: int


# ─── Grid ─────────────────────────────────────────────────────────────────────

INSETS = Insets(top=0, left=1, bottom=1, right=1)
LINE_HEIGHT = 1

AVATAR_WIDTH = 4
AVATAR_HEIGHT = 2
AVATAR_TO_USERNAME = 2

USERNAME_TO_RATING = 0
RATING_HEIGHT = 1
RATING_TO_TEXT = 0
RATING_TO_PHOTOS = 0

PHOTO_WIDTH = 9
PHOTO_HEIGHT = 1
PHOTOS_SPACING = 1
PHOTOS_TO_TEXT = 0

SHOW_MORE_WIDTH = cell_len(SHOW_MORE_TEXT)
SHOW_MORE_HEIGHT = 1
TEXT_TO_CREATED = 0
SHOW_MORE_TO_CREATED = 0


class LayoutContent(Protocol):
    """What the layout engine reads from a row."""

    username: str
    text: str
    created: str
    max_lines: int
    photo_urls: Sequence[str]


@dataclass(frozen=True)
class ReviewLayout:
    """Computed frames for one review row at one width."""

    width: int
    avatar: Rect
    username: Rect
    rating: Rect
    photos: tuple[Rect, ...]
    text: Rect
    show_more: Rect
    created: Rect
    show_more_required: bool
    height: int


# ─── Text measurement ─────────────────────────────────────────────────────────

_MEASURE_CONSOLE = Console(file=StringIO(), color_system=None, legacy_windows=False)


def measure_console() -> Console:
    """Console used when the caller has none (tests, off-screen measuring)."""
    return _MEASURE_CONSOLE


def wrap_text(text: str | Text, width: int, console: Console | None = None) -> list[Text]:
    """Wrap text to width, folding words longer than a line.

    Returns [] for blank text. Trailing whitespace/newlines are not lines.
    """
    rich_text = Text(text) if isinstance(text, str) else text.copy()
    rich_text.rstrip()
    if not rich_text.plain.strip():
        return []
    lines = rich_text.wrap(
        console or _MEASURE_CONSOLE, max(1, width), overflow="fold"
    )
    return list(lines)


def _widest(lines: Sequence[Text]) -> int:
    widest = 0
    for line in lines:
        w = cell_len(line.plain.rstrip())
        if w > widest:
            widest = w
    return widest


def column_width(max_width: int) -> int:
    """Width of the column right of the avatar. Never less than one cell."""
    content_width = max_width - INSETS.left - INSETS.right
    return max(1, content_width - AVATAR_WIDTH - AVATAR_TO_USERNAME)


def _layout_photos(count: int, x0: int, y0: int, column: int) -> tuple[Rect, ...]:
    """Flow photo chips left to right, wrapping when the column is full."""
    width = min(PHOTO_WIDTH, column)
    frames: list[Rect] = []
    x, y = x0, y0
    for _ in range(count):
        if x > x0 and x + width > x0 + column:
            x = x0
            y += PHOTO_HEIGHT
        frames.append(Rect(x, y, width, PHOTO_HEIGHT))
        x += width + PHOTOS_SPACING
    return tuple(frames)


# ─── Measurement ──────────────────────────────────────────────────────────────


def measure_review(
    content: LayoutContent, max_width: int, console: Console | None = None
) -> ReviewLayout:
    """Compute frames and total height for `content` at `max_width` cells."""
    console = console or _MEASURE_CONSOLE
    y = INSETS.top

    avatar = Rect(INSETS.left, y, AVATAR_WIDTH, AVATAR_HEIGHT)

    # Everything else hangs off a single column right of the avatar
    column_x = avatar.right + AVATAR_TO_USERNAME
    column = column_width(max_width)

    username_lines = wrap_text(content.username, column, console)
    username = Rect(
        column_x,
        y,
        min(_widest(username_lines), column),
        len(username_lines) * LINE_HEIGHT,
    )
    y = username.bottom + USERNAME_TO_RATING

    rating = Rect(column_x, y, min(RATING_WIDTH, column), RATING_HEIGHT)

    photos = _layout_photos(
        len(content.photo_urls), column_x, rating.bottom + RATING_TO_PHOTOS, column
    )
    if photos:
        y = max(p.bottom for p in photos) + PHOTOS_TO_TEXT
    else:
        y = rating.bottom + RATING_TO_TEXT

    text = ZERO_RECT
    show_more_required = False
    text_lines = wrap_text(content.text, column, console)
    if text_lines:
        capped_height = LINE_HEIGHT * content.max_lines
        actual_height = LINE_HEIGHT * len(text_lines)
        show_more_required = content.max_lines != 0 and actual_height > capped_height
        visible = text_lines if content.max_lines == 0 else text_lines[: content.max_lines]
        text = Rect(
            column_x,
            y,
            min(_widest(visible), column),
            len(visible) * LINE_HEIGHT,
        )
        y = text.bottom + TEXT_TO_CREATED

    if show_more_required:
        show_more = Rect(
            column_x, y, min(SHOW_MORE_WIDTH, column), SHOW_MORE_HEIGHT
        )
        y = show_more.bottom + SHOW_MORE_TO_CREATED
    else:
        show_more = ZERO_RECT

    created_lines = wrap_text(content.created, column, console)
    created = Rect(
        column_x,
        y,
        min(_widest(created_lines), column),
        len(created_lines) * LINE_HEIGHT,
    )
    y = created.bottom

    return ReviewLayout(
        width=max_width,
        avatar=avatar,
        username=username,
        rating=rating,
        photos=photos,
        text=text,
        show_more=show_more,
        created=created,
        show_more_required=show_more_required,
        height=max(avatar.bottom, y) + INSETS.bottom,
    )
