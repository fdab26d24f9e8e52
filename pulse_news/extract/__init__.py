"""Tolerant feed item extraction."""

from .extractor import MAX_DESCRIPTION_CHARS, MAX_ITEMS_PER_FEED, clean_text, parse_feed_items

__all__ = ["MAX_DESCRIPTION_CHARS", "MAX_ITEMS_PER_FEED", "clean_text", "parse_feed_items"]
