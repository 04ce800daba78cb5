"""review-feed: paginated, infinitely scrolling review list for the terminal."""

__version__ = "0.1.0"
