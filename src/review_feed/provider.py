"""Review page fetch collaborators.

A provider is anything with `get_reviews(offset, limit) -> bytes`. Calls are
blocking and run on a worker thread; failures raise TransportError.

fetch_page() wraps a provider call into a FetchResult so the owner thread
receives exactly one value per fetch, success or failure.
"""

from __future__ import annotations

import json
import logging
import time
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Protocol

from review_feed.reviews import TransportError


logger = logging.getLogger(__name__)

DEFAULT_HTTP_TIMEOUT = 30.0


class ReviewsProvider(Protocol):
    def get_reviews(self, offset: int, limit: int) -> bytes: ...


@dataclass(frozen=True)
class FetchResult:
    """Outcome of one provider call: raw payload or the error that replaced it."""

    payload: bytes | None = None
    error: Exception | None = None

    @classmethod
    def success(cls, payload: bytes) -> FetchResult:
        return cls(payload=payload)

    @classmethod
    def failure(cls, error: Exception) -> FetchResult:
        return cls(error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    def get(self) -> bytes:
        """Return the payload or raise the stored error."""
        if self.error is not None:
            raise self.error
        return self.payload or b""


def fetch_page(provider: ReviewsProvider, offset: int, limit: int) -> FetchResult:
    """Call the provider and fold any outcome into a FetchResult."""
    try:
        return FetchResult.success(provider.get_reviews(offset, limit))
    except TransportError as exc:
        return FetchResult.failure(exc)
    except Exception as exc:
        # Provider bugs still resolve the fetch; the list just stops growing.
        logger.exception("Provider %r failed at offset %d", provider, offset)
        return FetchResult.failure(TransportError(f"{type(exc).__name__}: {exc}"))


# ─── Local JSON file ──────────────────────────────────────────────────────────


def bundled_reviews_path() -> Path:
    return Path(str(resources.files("review_feed") / "data" / "reviews.json"))


class LocalReviewsProvider:
    """Serves pages from a JSON file holding {"items": [...]}.

    The file is read once, on first use. `delay` simulates network latency.
    """

    def __init__(self, path: str | Path | None = None, delay: float = 0.0):
        self._path = Path(path) if path is not None else bundled_reviews_path()
        self._delay = delay
        self._items: list | None = None

    def __repr__(self) -> str:
        return f"LocalReviewsProvider({str(self._path)!r})"

    def _load_items(self) -> list:
        if self._items is None:
            try:
                data = json.loads(self._path.read_text(encoding="utf-8"))
            except (OSError, json.JSONDecodeError) as exc:
                raise TransportError(f"cannot read {self._path}: {exc}") from exc
            items = data.get("items") if isinstance(data, dict) else data
            if not isinstance(items, list):
                raise TransportError(f"{self._path}: no 'items' list")
            self._items = items
        return self._items

    def get_reviews(self, offset: int, limit: int) -> bytes:
        if self._delay > 0:
            time.sleep(self._delay)
        items = self._load_items()
        page = {"items": items[offset : offset + limit], "count": len(items)}
        return json.dumps(page, ensure_ascii=False).encode("utf-8")


# ─── HTTP ─────────────────────────────────────────────────────────────────────


class HttpReviewsProvider:
    """GET {base_url}?offset=N&limit=M, returning the raw response body."""

    def __init__(self, base_url: str, timeout: float = DEFAULT_HTTP_TIMEOUT):
        self._base_url = base_url
        self._timeout = timeout

    def __repr__(self) -> str:
        return f"HttpReviewsProvider({self._base_url!r})"

    def page_url(self, offset: int, limit: int) -> str:
        parts = urllib.parse.urlsplit(self._base_url)
        query = urllib.parse.parse_qsl(parts.query, keep_blank_values=True)
        query = [(k, v) for k, v in query if k not in {"offset", "limit"}]
        query += [("offset", str(offset)), ("limit", str(limit))]
        return urllib.parse.urlunsplit(parts._replace(query=urllib.parse.urlencode(query)))

    def get_reviews(self, offset: int, limit: int) -> bytes:
        url = self.page_url(offset, limit)
        request = urllib.request.Request(
            url,
            headers={"accept": "application/json"},
            method="GET",
        )
        logger.debug("GET %s", url)
        try:
            with urllib.request.urlopen(request, timeout=self._timeout) as response:
                return response.read()
        except urllib.error.HTTPError as exc:
            raise TransportError(f"HTTP {exc.code} from {url}") from exc
        except urllib.error.URLError as exc:
            raise TransportError(f"cannot reach {url}: {exc.reason}") from exc
        except OSError as exc:
            raise TransportError(f"connection error for {url}: {exc}") from exc


def make_provider(source: str | None, *, delay: float = 0.0, timeout: float = DEFAULT_HTTP_TIMEOUT):
    """http(s) URLs get an HttpReviewsProvider; anything else is a file path."""
    if source and urllib.parse.urlsplit(source).scheme in {"http", "https"}:
        return HttpReviewsProvider(source, timeout=timeout)
    return LocalReviewsProvider(source or None, delay=delay)
