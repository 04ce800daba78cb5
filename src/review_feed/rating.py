"""Rating renderer: integer rating -> row of star glyphs."""

from rich.text import Text

from review_feed.reviews import MAX_RATING, MIN_RATING

FILLED_STAR = "★"
EMPTY_STAR = "☆"

RATING_WIDTH = MAX_RATING


class RatingRenderer:
    """Renders ratings as Rich Text. Results are memoized per rating value."""

    def __init__(self, filled_style: str = "bold yellow", empty_style: str = "dim"):
        self._filled_style = filled_style
        self._empty_style = empty_style
        self._cache: dict[int, Text] = {}

    def render(self, rating: int) -> Text:
        clamped = max(MIN_RATING - 1, min(MAX_RATING, int(rating)))
        cached = self._cache.get(clamped)
        if cached is None:
            cached = Text()
            cached.append(FILLED_STAR * clamped, style=self._filled_style)
            cached.append(EMPTY_STAR * (MAX_RATING - clamped), style=self._empty_style)
            self._cache[clamped] = cached
        # Text is mutable; callers may stylize their copy
        return cached.copy()
