"""File logging for the review-feed runtime.

The TUI owns the terminal, so the `review_feed` logger writes to a rotating
per-session file and nowhere else.

// [LAW:single-enforcer] Handler wiring for the review_feed logger happens here only.
"""

from __future__ import annotations

import logging
import os
import re
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path

ROOT_LOGGER = "review_feed"

LOG_DIR_ENV = "REVIEW_FEED_LOG_DIR"
LOG_FILE_ENV = "REVIEW_FEED_LOG_FILE"
LOG_LEVEL_ENV = "REVIEW_FEED_LOG_LEVEL"

MAX_BYTES = 20 * 1024 * 1024
BACKUP_COUNT = 5
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [%(threadName)s] %(message)s"

_log_file: Path | None = None


def resolve_level(raw: str | None) -> int:
    """Level number for a name like "debug"; unknown names mean INFO."""
    level = logging.getLevelName((raw or "INFO").strip().upper())
    return level if isinstance(level, int) else logging.INFO


def session_log_path(session_name: str) -> Path:
    slug = re.sub(r"[^A-Za-z0-9_-]+", "-", session_name).strip("-_") or "session"
    log_dir = os.environ.get(LOG_DIR_ENV) or Path.home() / ".local/share/review-feed/logs"
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d-%H%M%S")
    return Path(log_dir) / f"{slug}-{stamp}-{os.getpid()}.log"


def configure(session_name: str = "reviews") -> Path:
    """Attach the rotating file handler and return the log file path.

    Only the first call does any work; later calls return the same path.
    """
    global _log_file
    if _log_file is not None:
        return _log_file

    path = Path(os.environ.get(LOG_FILE_ENV) or session_log_path(session_name))
    path.parent.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(
        path, maxBytes=MAX_BYTES, backupCount=BACKUP_COUNT, encoding="utf-8"
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%Y-%m-%dT%H:%M:%S"))

    logger = logging.getLogger(ROOT_LOGGER)
    logger.handlers.clear()
    logger.addHandler(handler)
    logger.setLevel(resolve_level(os.environ.get(LOG_LEVEL_ENV)))
    logger.propagate = False

    _log_file = path
    return path


def log_file() -> Path | None:
    """Path chosen by configure(), or None before it has run."""
    return _log_file


def reset() -> None:
    """Detach and close handlers so configure() can run again."""
    global _log_file
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    _log_file = None
