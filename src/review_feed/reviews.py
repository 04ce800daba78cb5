"""Review wire entity, page decoding and the error taxonomy.

// [LAW:single-enforcer] decode_page is the sole payload validation boundary.

This module is STABLE. Safe for `from` imports everywhere.
"""

import json
from dataclasses import dataclass, field


# ─── Errors ───────────────────────────────────────────────────────────────────


class ReviewFeedError(Exception):
    """Base class for review-feed errors."""


class TransportError(ReviewFeedError):
    """The fetch collaborator could not deliver a page (no connectivity, HTTP error)."""


class DecodeError(ReviewFeedError):
    """A page payload was malformed."""


class RowNotFoundError(ReviewFeedError, LookupError):
    """A row lookup was made with a stale or unknown id."""


# ─── Value types ──────────────────────────────────────────────────────────────

JsonDict = dict[str, object]

MIN_RATING = 1
MAX_RATING = 5


@dataclass(frozen=True)
class Review:
    """One review as sent by the server."""

    first_name: str
    last_name: str
    rating: int
    text: str
    created: str
    avatar_url: str | None = None
    photo_urls: tuple[str, ...] = ()

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)


@dataclass(frozen=True)
class ReviewsPage:
    """One decoded page: the items plus the server's total review count."""

    items: tuple[Review, ...] = field(default_factory=tuple)
    count: int = 0


# ─── Decoding ─────────────────────────────────────────────────────────────────


def _require(obj: JsonDict, key: str, kind: type, where: str):
    if key not in obj:
        raise DecodeError(f"{where}: missing field {key!r}")
    value = obj[key]
    # bool is an int subclass; a rating of `true` is still malformed
    if isinstance(value, bool) and kind is not bool:
        raise DecodeError(f"{where}: field {key!r} has wrong type bool")
    if not isinstance(value, kind):
        raise DecodeError(
            f"{where}: field {key!r} has wrong type {type(value).__name__}"
        )
    return value


def _optional_str(obj: JsonDict, key: str, where: str) -> str | None:
    value = obj.get(key)
    if value is None:
        return None
    if not isinstance(value, str):
        raise DecodeError(f"{where}: field {key!r} has wrong type {type(value).__name__}")
    return value or None


def decode_review(obj: object, index: int = 0) -> Review:
    """Decode a single review object. Raises DecodeError."""
    where = f"items[{index}]"
    if not isinstance(obj, dict):
        raise DecodeError(f"{where}: expected object, got {type(obj).__name__}")

    rating = _require(obj, "rating", int, where)
    if not MIN_RATING <= rating <= MAX_RATING:
        raise DecodeError(f"{where}: rating {rating} outside {MIN_RATING}..{MAX_RATING}")

    photos = obj.get("photo_urls") or []
    if not isinstance(photos, list) or not all(isinstance(p, str) for p in photos):
        raise DecodeError(f"{where}: field 'photo_urls' must be a list of strings")

    return Review(
        first_name=_require(obj, "first_name", str, where),
        last_name=_require(obj, "last_name", str, where),
        rating=rating,
        text=_require(obj, "text", str, where),
        created=_require(obj, "created", str, where),
        avatar_url=_optional_str(obj, "avatar_url", where),
        photo_urls=tuple(photos),
    )


def decode_page(payload: bytes | str) -> ReviewsPage:
    """Decode a raw page payload into a ReviewsPage.

    Expected shape: {"items": [review, ...], "count": int}.
    Any malformation raises DecodeError.
    """
    try:
        data = json.loads(payload)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise DecodeError(f"payload is not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise DecodeError(f"payload: expected object, got {type(data).__name__}")

    items = _require(data, "items", list, "payload")
    count = _require(data, "count", int, "payload")
    if count < 0:
        raise DecodeError(f"payload: negative count {count}")

    return ReviewsPage(
        items=tuple(decode_review(obj, i) for i, obj in enumerate(items)),
        count=count,
    )
