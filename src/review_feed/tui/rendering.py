"""Rich rendering for list rows.

Paints a ReviewLayout into a list of Strips, one per row line, for the
ConversationView-style Line API in reviews_view.py.

// [LAW:single-enforcer] Only this module sets click meta keys; the view reads
//   them from event.style.meta.
// [LAW:one-source-of-truth] Frame geometry comes from layout.measure_review();
//   nothing here decides sizes.
"""

from __future__ import annotations

from rich.cells import cell_len
from rich.console import Console
from rich.segment import Segment
from rich.style import Style
from rich.text import Text
from textual.strip import Strip

import review_feed.layout
from review_feed.rating import RatingRenderer

# Click-target meta keys. Values must be marshal-able (str/int/tuple).
META_EXPAND_ROW = "expand_row"
META_OPEN_PHOTO = "open_photo"

# Avatar placeholder backgrounds, picked by a stable hash of the username.
AVATAR_COLORS = (
    "#5E81AC",
    "#A3BE8C",
    "#B48EAD",
    "#D08770",
    "#88C0D0",
    "#EBCB8B",
)

USERNAME_STYLE = Style(bold=True)
TEXT_STYLE = Style()
CREATED_STYLE = Style(dim=True)
SHOW_MORE_STYLE = Style(color="#88C0D0", underline=True)
PHOTO_STYLE = Style(color="#81A1C1", bold=True)
SUMMARY_STYLE = Style(dim=True, italic=True)

_default_rating_renderer = RatingRenderer()


class _Canvas:
    """Line buffer that frames paint into at absolute (x, y)."""

    def __init__(self, height: int):
        self._fragments: list[list[tuple[int, Strip]]] = [[] for _ in range(height)]

    def paint(self, rect: review_feed.layout.Rect, strips: list[Strip]) -> None:
        if rect.is_empty:
            return
        for i, strip in enumerate(strips[: rect.height]):
            y = rect.y + i
            if 0 <= y < len(self._fragments):
                self._fragments[y].append((rect.x, strip.crop_extend(0, rect.width, None)))

    def to_strips(self, width: int) -> list[Strip]:
        result: list[Strip] = []
        for fragments in self._fragments:
            fragments.sort(key=lambda item: item[0])
            parts: list[Strip] = []
            cursor = 0
            for x, strip in fragments:
                if x < cursor:
                    continue
                if x > cursor:
                    parts.append(Strip.blank(x - cursor))
                parts.append(strip)
                cursor = x + strip.cell_length
            line = Strip.join(parts) if parts else Strip.blank(width)
            result.append(line.adjust_cell_length(width))
        return result


def _text_strip(text: Text, console: Console) -> Strip:
    return Strip(list(text.render(console, end="")))


def _label_strip(label: str, style: Style, console: Console) -> Strip:
    # Text.render ignores the base style when there are no spans
    text = Text(label)
    text.stylize(style)
    return _text_strip(text, console)


def _text_strips(lines: list[Text], style: Style, console: Console) -> list[Strip]:
    strips = []
    for line in lines:
        styled = line.copy()
        styled.stylize(style)
        strips.append(_text_strip(styled, console))
    return strips


def avatar_color(username: str) -> str:
    return AVATAR_COLORS[sum(map(ord, username)) % len(AVATAR_COLORS)]


def _avatar_strips(initials: str, rect: review_feed.layout.Rect, username: str) -> list[Strip]:
    style = Style(color="#2E3440", bgcolor=avatar_color(username), bold=True)
    label = initials[: rect.width].center(rect.width)
    blank = " " * rect.width
    lines = [label] + [blank] * (rect.height - 1)
    return [Strip([Segment(line, style)]) for line in lines]


def render_review_row(
    row,
    layout: review_feed.layout.ReviewLayout,
    console: Console | None = None,
    rating_renderer: RatingRenderer | None = None,
) -> list[Strip]:
    """Render a ReviewRow at layout.width. Returns exactly layout.height strips."""
    console = console or review_feed.layout.measure_console()
    rating_renderer = rating_renderer or _default_rating_renderer
    column = review_feed.layout.column_width(layout.width)
    canvas = _Canvas(layout.height)

    canvas.paint(layout.avatar, _avatar_strips(row.initials, layout.avatar, row.username))

    username_lines = review_feed.layout.wrap_text(row.username, column, console)
    canvas.paint(layout.username, _text_strips(username_lines, USERNAME_STYLE, console))

    canvas.paint(layout.rating, [_text_strip(rating_renderer.render(row.rating), console)])

    row_id = str(row.id)
    for index, frame in enumerate(layout.photos):
        chip_style = PHOTO_STYLE + Style(meta={META_OPEN_PHOTO: (row_id, index)})
        canvas.paint(frame, [_label_strip(f"[photo {index + 1}]", chip_style, console)])

    if not layout.text.is_empty:
        text_lines = review_feed.layout.wrap_text(row.text, column, console)
        canvas.paint(
            layout.text,
            _text_strips(text_lines[: layout.text.height], TEXT_STYLE, console),
        )

    if not layout.show_more.is_empty:
        affordance_style = SHOW_MORE_STYLE + Style(meta={META_EXPAND_ROW: row_id})
        canvas.paint(
            layout.show_more,
            [_label_strip(review_feed.layout.SHOW_MORE_TEXT, affordance_style, console)],
        )

    created_lines = review_feed.layout.wrap_text(row.created, column, console)
    canvas.paint(layout.created, _text_strips(created_lines, CREATED_STYLE, console))

    return canvas.to_strips(layout.width)


def render_summary_row(row, width: int, console: Console | None = None) -> list[Strip]:
    """Render the trailing count row: label centred on the middle line."""
    console = console or review_feed.layout.measure_console()
    label = row.label
    pad = max(0, (width - cell_len(label)) // 2)
    middle = Strip.join(
        [Strip.blank(pad), _label_strip(label, SUMMARY_STYLE, console)]
    ).adjust_cell_length(width)
    strips = [Strip.blank(width) for _ in range(row.HEIGHT)]
    strips[row.HEIGHT // 2] = middle
    return strips


def render_status_line(message: str, width: int, console: Console | None = None) -> Strip:
    """Single centred dim line (loading / empty states)."""
    console = console or review_feed.layout.measure_console()
    pad = max(0, (width - cell_len(message)) // 2)
    return Strip.join(
        [Strip.blank(pad), _label_strip(message, SUMMARY_STYLE, console)]
    ).adjust_cell_length(width)
