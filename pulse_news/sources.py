"""Built-in feed catalog, grouped by topic."""

from __future__ import annotations

from typing import Any, Iterable

from .core.types import FeedSource


FEED_SOURCES: dict[str, tuple[FeedSource, ...]] = {
    "tech": (
        FeedSource("Hacker News", "https://hnrss.org/frontpage", "Tech"),
        FeedSource(
            "Ars Technica",
            "https://feeds.arstechnica.com/arstechnica/technology-lab",
            "Tech",
        ),
        FeedSource("TechCrunch", "https://techcrunch.com/feed/", "Tech"),
    ),
    "world": (
        FeedSource("Reuters World", "https://feeds.reuters.com/Reuters/worldNews", "World"),
        FeedSource("BBC News", "https://feeds.bbci.co.uk/news/world/rss.xml", "World"),
    ),
    "india": (
        FeedSource(
            "The Hindu",
            "https://www.thehindu.com/news/national/feeder/default.rss",
            "India",
        ),
        FeedSource(
            "Economic Times",
            "https://economictimes.indiatimes.com/rssfeedsdefault.cms",
            "India",
        ),
    ),
    "science": (
        FeedSource("Quanta Magazine", "https://www.quantamagazine.org/feed/", "Science"),
        FeedSource("Nature News", "https://www.nature.com/nature.rss", "Science"),
    ),
}


def default_sources() -> list[FeedSource]:
    """Return the built-in catalog flattened in group order."""
    return [source for group in FEED_SOURCES.values() for source in group]


def sources_from_config(entries: Iterable[dict[str, Any]]) -> list[FeedSource]:
    """Build feed sources from config entries.

    Each entry needs ``name``, ``url`` and ``category``.

    Raises:
        ValueError: If an entry is missing a required key
    """
    sources: list[FeedSource] = []
    for idx, entry in enumerate(entries):
        missing = [key for key in ("name", "url", "category") if not entry.get(key)]
        if missing:
            raise ValueError(f"Feed source #{idx} is missing: {', '.join(missing)}")
        sources.append(
            FeedSource(
                name=str(entry["name"]).strip(),
                url=str(entry["url"]).strip(),
                category=str(entry["category"]).strip(),
            )
        )
    return sources


def resolve_sources(entries: Iterable[dict[str, Any]] | None) -> list[FeedSource]:
    """Use configured sources when present, otherwise the built-in catalog."""
    entries = list(entries or [])
    if entries:
        return sources_from_config(entries)
    return default_sources()
