"""Textual UI for review-feed."""
