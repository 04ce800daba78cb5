"""Image loading for review photos.

Explicitly constructed and injected; the app owns one instance for its
lifetime. Loads never raise: a failed load yields None and the caller shows
its placeholder.
"""

from __future__ import annotations

import logging
import urllib.error
import urllib.request
from collections.abc import Callable
from dataclasses import dataclass

from textual.cache import LRUCache


logger = logging.getLogger(__name__)

DEFAULT_CACHE_SIZE = 64
DEFAULT_TIMEOUT = 15.0


def _run_inline(work: Callable[[], None]) -> None:
    work()


@dataclass(frozen=True)
class LoadedImage:
    url: str
    data: bytes
    content_type: str = "application/octet-stream"

    @property
    def size(self) -> int:
        return len(self.data)


def fetch_url(url: str, timeout: float = DEFAULT_TIMEOUT) -> LoadedImage:
    """Blocking download. Raises OSError (URLError is a subclass) on failure."""
    request = urllib.request.Request(url, headers={"accept": "image/*"}, method="GET")
    with urllib.request.urlopen(request, timeout=timeout) as response:
        content_type = response.headers.get_content_type() if response.headers else None
        return LoadedImage(url, response.read(), content_type or "application/octet-stream")


class ImageLoader:
    """URL-keyed image cache in front of a blocking fetch function."""

    def __init__(
        self,
        fetch: Callable[[str], LoadedImage] | None = None,
        cache_size: int = DEFAULT_CACHE_SIZE,
    ):
        self._fetch = fetch or fetch_url
        self._cache: LRUCache = LRUCache(cache_size)

    def cached(self, url: str) -> LoadedImage | None:
        return self._cache.get(url)

    def load_sync(self, url: str) -> LoadedImage | None:
        cached = self._cache.get(url)
        if cached is not None:
            return cached
        try:
            image = self._fetch(url)
        except (OSError, ValueError) as exc:
            # ValueError: malformed URL (urllib raises it for unknown url types)
            logger.warning("Image load failed for %s: %s", url, exc)
            return None
        except Exception:
            # Fetch bugs and protocol errors still resolve to the placeholder.
            logger.exception("Image fetch %r failed for %s", self._fetch, url)
            return None
        self._cache[url] = image
        return image

    def load(
        self,
        url: str,
        callback: Callable[[LoadedImage | None], None],
        *,
        run_in_worker: Callable[[Callable[[], None]], None] | None = None,
        call_on_owner: Callable[..., None] | None = None,
    ) -> None:
        """Load off the owner thread; `callback` runs on the owner thread.

        Cache hits call back immediately without touching the worker. Without
        a `run_in_worker` the load runs inline on the calling thread.
        """
        cached = self._cache.get(url)
        if cached is not None:
            callback(cached)
            return

        def deliver(image: LoadedImage | None) -> None:
            if call_on_owner is None:
                callback(image)
            else:
                call_on_owner(callback, image)

        def work() -> None:
            deliver(self.load_sync(url))

        (run_in_worker or _run_inline)(work)
