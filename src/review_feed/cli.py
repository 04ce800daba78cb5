"""CLI entry point for review-feed."""

import argparse
import logging
import sys

import review_feed.io.logging_setup
import review_feed.settings
from review_feed.images import ImageLoader
from review_feed.provider import make_provider
from review_feed.tui.app import ReviewsApp

logger = logging.getLogger(__name__)

# CLI flag -> FeedSettings field
_OVERRIDE_FLAGS = {
    "source": "source",
    "page_size": "page_size",
    "max_lines": "max_lines",
    "delay": "delay",
}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="review-feed",
        description="Browse a paginated list of reviews in the terminal",
    )
    parser.add_argument(
        "--source",
        type=str,
        default=None,
        help="Reviews JSON file or http(s) endpoint (default: bundled sample data)",
    )
    parser.add_argument(
        "--page-size", type=int, default=None, help="Reviews per page (default: 20)"
    )
    parser.add_argument(
        "--max-lines",
        type=int,
        default=None,
        help="Lines of review text shown before 'Show more' (0 = unlimited, default: 3)",
    )
    parser.add_argument(
        "--delay",
        type=float,
        default=None,
        help="Artificial latency in seconds for the local source (default: 0)",
    )
    parser.add_argument(
        "--session",
        type=str,
        default="reviews",
        help="Session name used for the log file (default: reviews)",
    )
    parser.add_argument(
        "--save",
        action="store_true",
        help="Persist the given options to the settings file",
    )
    return parser


def collect_overrides(args: argparse.Namespace) -> dict:
    return {field: getattr(args, flag) for flag, field in _OVERRIDE_FLAGS.items()}


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    overrides = collect_overrides(args)
    try:
        settings = review_feed.settings.resolve(overrides)
    except ValueError as exc:
        parser.error(str(exc))

    log_path = review_feed.io.logging_setup.configure(args.session)
    logger.info("review-feed starting (log file %s)", log_path)

    if args.save:
        for key, value in overrides.items():
            if value is not None:
                review_feed.settings.save_setting(key, getattr(settings, key))
        logger.info("Saved settings to %s", review_feed.settings.get_config_path())

    provider = make_provider(
        settings.source, delay=settings.delay, timeout=settings.http_timeout
    )
    app = ReviewsApp(
        provider,
        settings=settings,
        image_loader=ImageLoader(),
        session_name=args.session,
    )
    app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
