"""Tests for HeightCache."""

import uuid

from review_feed.height_cache import HeightCache


def test_put_get_roundtrip_and_miss():
    cache = HeightCache()
    row_id = uuid.uuid4()
    assert cache.get(row_id) is None
    cache.put(row_id, 7)
    assert cache.get(row_id) == 7
    assert row_id in cache
    assert len(cache) == 1


def test_invalidate_drops_one_entry_and_tolerates_missing():
    cache = HeightCache()
    a, b = uuid.uuid4(), uuid.uuid4()
    cache.put(a, 3)
    cache.put(b, 4)

    cache.invalidate(a)
    cache.invalidate(uuid.uuid4())

    assert a not in cache
    assert cache.get(b) == 4


def test_clear_empties_cache():
    cache = HeightCache()
    cache.put("x", 1)
    cache.clear()
    assert len(cache) == 0
