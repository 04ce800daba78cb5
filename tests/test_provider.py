"""Tests for the fetch collaborators."""

import io
import json
import urllib.error
from unittest import mock

import pytest

from review_feed.provider import (
    FetchResult,
    HttpReviewsProvider,
    LocalReviewsProvider,
    bundled_reviews_path,
    fetch_page,
    make_provider,
)
from review_feed.reviews import TransportError, decode_page
from tests.harness.builders import make_items


@pytest.fixture
def reviews_file(tmp_path):
    path = tmp_path / "reviews.json"
    path.write_text(json.dumps({"items": make_items(45)}), encoding="utf-8")
    return path


# ─── Local ────────────────────────────────────────────────────────────────────


def test_local_provider_slices_pages_and_reports_total(reviews_file):
    provider = LocalReviewsProvider(reviews_file)

    first = decode_page(provider.get_reviews(0, 20))
    last = decode_page(provider.get_reviews(40, 20))
    beyond = decode_page(provider.get_reviews(60, 20))

    assert len(first.items) == 20
    assert first.items[0].first_name == "User0"
    assert len(last.items) == 5
    assert last.count == first.count == 45
    assert beyond.items == ()


def test_local_provider_accepts_bare_list(tmp_path):
    path = tmp_path / "list.json"
    path.write_text(json.dumps(make_items(2)), encoding="utf-8")
    assert decode_page(LocalReviewsProvider(path).get_reviews(0, 20)).count == 2


def test_missing_file_is_a_transport_error(tmp_path):
    provider = LocalReviewsProvider(tmp_path / "missing.json")
    with pytest.raises(TransportError):
        provider.get_reviews(0, 20)


@pytest.mark.parametrize("content", ["{not json", '{"reviews": []}', '"text"'])
def test_unusable_file_is_a_transport_error(tmp_path, content):
    path = tmp_path / "bad.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(TransportError):
        LocalReviewsProvider(path).get_reviews(0, 20)


def test_bundled_sample_decodes():
    assert bundled_reviews_path().name == "reviews.json"
    page = decode_page(LocalReviewsProvider().get_reviews(0, 20))
    assert len(page.items) == 20
    assert page.count >= 20


def test_local_provider_delay(reviews_file):
    with mock.patch("review_feed.provider.time.sleep") as sleep:
        LocalReviewsProvider(reviews_file, delay=0.5).get_reviews(0, 1)
    sleep.assert_called_once_with(0.5)


# ─── HTTP ─────────────────────────────────────────────────────────────────────


def test_page_url_replaces_paging_params():
    provider = HttpReviewsProvider("https://api.example.com/reviews?lang=en&offset=3")
    url = provider.page_url(40, 20)
    assert url.startswith("https://api.example.com/reviews?")
    assert "lang=en" in url
    assert "offset=40" in url
    assert "limit=20" in url
    assert "offset=3" not in url


def test_http_provider_returns_body():
    body = json.dumps({"items": [], "count": 0}).encode()
    with mock.patch("review_feed.provider.urllib.request.urlopen") as urlopen:
        urlopen.return_value.__enter__.return_value.read.return_value = body
        result = HttpReviewsProvider("https://api.example.com/r", timeout=5).get_reviews(0, 20)

    assert result == body
    request = urlopen.call_args.args[0]
    assert request.full_url == "https://api.example.com/r?offset=0&limit=20"
    assert urlopen.call_args.kwargs["timeout"] == 5


@pytest.mark.parametrize(
    "error, message",
    [
        (
            urllib.error.HTTPError("https://x", 503, "Unavailable", {}, io.BytesIO()),
            "HTTP 503",
        ),
        (urllib.error.URLError("name resolution failed"), "cannot reach"),
        (ConnectionResetError("reset"), "connection error"),
    ],
)
def test_http_errors_become_transport_errors(error, message):
    with mock.patch("review_feed.provider.urllib.request.urlopen", side_effect=error):
        with pytest.raises(TransportError, match=message):
            HttpReviewsProvider("https://x").get_reviews(0, 20)


# ─── fetch_page / make_provider ───────────────────────────────────────────────


def test_fetch_page_wraps_outcomes(reviews_file):
    ok = fetch_page(LocalReviewsProvider(reviews_file), 0, 1)
    assert ok.ok
    assert decode_page(ok.get()).count == 45

    failed = fetch_page(LocalReviewsProvider(reviews_file.with_name("nope.json")), 0, 1)
    assert not failed.ok
    with pytest.raises(TransportError):
        failed.get()


def test_fetch_page_wraps_unexpected_errors():
    class Broken:
        def get_reviews(self, offset, limit):
            raise KeyError("items")

    result = fetch_page(Broken(), 0, 20)
    assert isinstance(result.error, TransportError)


def test_fetch_result_constructors():
    assert FetchResult.success(b"x").get() == b"x"
    assert FetchResult.failure(TransportError("y")).ok is False


def test_make_provider_picks_by_scheme(reviews_file):
    assert isinstance(make_provider("https://api.example.com/reviews"), HttpReviewsProvider)
    assert isinstance(make_provider(str(reviews_file)), LocalReviewsProvider)
    assert isinstance(make_provider(None), LocalReviewsProvider)
