"""Tests for settings file I/O and FeedSettings resolution.

XDG_CONFIG_HOME points at tmp_path for every test (see conftest).
"""

import json

import pytest

import review_feed.settings as settings


def write_file(data):
    path = settings.get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")


def test_config_path_under_xdg(tmp_path):
    assert settings.get_config_path() == tmp_path / "config" / "review-feed" / "settings.json"


def test_missing_file_loads_empty():
    assert settings.load_settings() == {}


def test_corrupt_file_loads_empty():
    path = settings.get_config_path()
    path.parent.mkdir(parents=True)
    path.write_text("{broken", encoding="utf-8")
    assert settings.load_settings() == {}


def test_non_object_file_loads_empty():
    write_file([1, 2, 3])
    assert settings.load_settings() == {}


def test_save_setting_merges_and_round_trips():
    settings.save_setting("page_size", 10)
    settings.save_setting("max_lines", 5)

    assert settings.load_settings() == {"page_size": 10, "max_lines": 5}
    leftovers = list(settings.get_config_path().parent.glob("*.tmp"))
    assert leftovers == []


def test_resolve_defaults():
    resolved = settings.resolve()
    assert resolved == settings.FeedSettings()
    assert resolved.page_size == 20
    assert resolved.prefetch_screens == 2.5
    assert resolved.max_lines == 3
    assert resolved.source is None


def test_file_values_apply():
    write_file({"page_size": 7, "source": "/tmp/r.json", "prefetch_screens": 1})
    resolved = settings.resolve()
    assert resolved.page_size == 7
    assert resolved.source == "/tmp/r.json"
    assert resolved.prefetch_screens == 1.0


def test_invalid_file_values_are_ignored(caplog):
    write_file({"page_size": 0, "max_lines": "many", "delay": True, "unknown": 1})
    with caplog.at_level("WARNING", logger="review_feed.settings"):
        resolved = settings.resolve()

    assert resolved == settings.FeedSettings()
    assert "page_size" in caplog.text


def test_overrides_beat_file_and_none_is_skipped():
    write_file({"page_size": 7, "max_lines": 4})
    resolved = settings.resolve({"page_size": 50, "max_lines": None})
    assert resolved.page_size == 50
    assert resolved.max_lines == 4


@pytest.mark.parametrize(
    "overrides",
    [{"page_size": 0}, {"page_size": -3}, {"delay": -1.0}, {"max_lines": "x"}, {"colour": "red"}],
)
def test_invalid_overrides_raise(overrides):
    with pytest.raises(ValueError):
        settings.resolve(overrides)
