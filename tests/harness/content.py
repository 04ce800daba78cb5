"""Text extraction from Textual strips and widgets.

Uses strip._segments (private API) for plain text extraction.
Acceptable for test utilities; fragile across Textual major versions.
"""

from rich.text import Text
from textual.strip import Strip


def strips_to_text(strips: list[Strip]) -> str:
    """Extract plain text from a list of Strip objects, one line per strip.

    NOTE: Uses strip._segments (private Textual API).
    """
    return "\n".join("".join(seg.text for seg in strip._segments) for strip in strips)


def segments_with_meta(strips: list[Strip], key: str) -> list:
    """All (line_index, segment) pairs whose style meta carries `key`."""
    found = []
    for y, strip in enumerate(strips):
        for seg in strip:
            meta = (getattr(seg.style, "meta", {}) or {}) if seg.style is not None else {}
            if key in meta:
                found.append((y, seg))
    return found


def widget_text(app, selector: str) -> str:
    """Get plain text content from a Static widget by CSS selector."""
    widget = app.query_one(selector)
    renderable = widget.render()
    if isinstance(renderable, Text):
        return renderable.plain
    return str(renderable)
