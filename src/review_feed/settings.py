"""Settings file I/O for review-feed.

Manages a JSON settings file at XDG_CONFIG_HOME/review-feed/settings.json and
resolves the effective FeedSettings: defaults <- file <- explicit overrides.

This module is a STABLE BOUNDARY.
Import as: import review_feed.settings
"""

import json
import logging
import os
import tempfile
from dataclasses import dataclass, replace
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeedSettings:
    """Effective configuration for one screen instance."""

    page_size: int = 20
    prefetch_screens: float = 2.5
    max_lines: int = 3
    source: str | None = None  # file path or http(s) URL; None = bundled sample
    delay: float = 0.0
    http_timeout: float = 30.0


# [LAW:one-source-of-truth] Validation per key: (type coercion, predicate)
_VALIDATORS = {
    "page_size": (int, lambda v: v > 0),
    "prefetch_screens": (float, lambda v: v >= 0),
    "max_lines": (int, lambda v: v >= 0),
    "source": (str, lambda v: bool(v)),
    "delay": (float, lambda v: v >= 0),
    "http_timeout": (float, lambda v: v > 0),
}


def get_config_path() -> Path:
    """Return path to settings file.

    Uses XDG_CONFIG_HOME (default ~/.config) / review-feed / settings.json.
    """
    config_home = os.environ.get("XDG_CONFIG_HOME", os.path.expanduser("~/.config"))
    return Path(config_home) / "review-feed" / "settings.json"


def load_settings() -> dict:
    """Load settings from JSON file. Returns empty dict on missing/corrupt file."""
    path = get_config_path()
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (FileNotFoundError, json.JSONDecodeError, OSError):
        return {}
    return data if isinstance(data, dict) else {}


def save_settings(data: dict) -> None:
    """Atomic write of settings dict to JSON file.

    Creates parent directories if needed. Writes to temp file then renames
    to avoid partial writes on crash.
    """
    path = get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_path = tempfile.mkstemp(dir=path.parent, suffix=".tmp")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
            f.write("\n")
        os.replace(tmp_path, path)
    except Exception:
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


def save_setting(key: str, value) -> None:
    """Save a single setting by key (merge into existing settings)."""
    data = load_settings()
    data[key] = value
    save_settings(data)


def _coerce(key: str, value):
    """Return the validated value, or None when it is unusable."""
    kind, valid = _VALIDATORS[key]
    if isinstance(value, bool):
        return None
    try:
        coerced = kind(value)
    except (TypeError, ValueError):
        return None
    return coerced if valid(coerced) else None


def resolve(overrides: dict | None = None) -> FeedSettings:
    """Merge defaults, the settings file and non-None overrides.

    Invalid file values are logged and ignored; invalid overrides raise ValueError.
    """
    changes = {}
    for key, raw in load_settings().items():
        if key not in _VALIDATORS:
            continue
        value = _coerce(key, raw)
        if value is None:
            logger.warning("Ignoring invalid setting %s=%r in %s", key, raw, get_config_path())
            continue
        changes[key] = value

    for key, raw in (overrides or {}).items():
        if raw is None:
            continue
        if key not in _VALIDATORS:
            raise ValueError(f"unknown setting {key!r}")
        value = _coerce(key, raw)
        if value is None:
            raise ValueError(f"invalid value for {key}: {raw!r}")
        changes[key] = value

    return replace(FeedSettings(), **changes)

