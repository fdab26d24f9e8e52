"""
Core data types for the news pipeline.

This module defines the records passed between pipeline stages:
- FeedSource: A named, categorized remote feed
- RawItem: One item parsed out of a feed body
- EnrichedArticle: A RawItem plus analytical metadata
- DailyBriefItem: Top-of-page projection of an EnrichedArticle
- Stream: A topic-partitioned, size-capped list of articles
- PipelineResult: Everything the presentation layer needs from one run

All records are frozen; each stage builds new records from its input.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


ENERGY_LEVELS = ("Low", "Medium", "High")


@dataclass(frozen=True)
class FeedSource:
    """A remote syndication feed.

    Attributes:
        name: Display name of the publication (e.g. "Hacker News")
        url: Feed URL
        category: Topic category tag attached to every item from this feed
    """
    name: str
    url: str
    category: str


@dataclass(frozen=True)
class RawItem:
    """An item extracted from a single feed body.

    ``title`` and ``link`` are always non-empty; ``pub_date`` is the raw
    string from the feed and may be empty or unparseable.
    """
    title: str
    link: str
    pub_date: str
    description: str
    source: str
    category: str


@dataclass(frozen=True)
class DeepContent:
    explanation: tuple[str, ...]
    bias_indicator: str
    hype_score: int
    credible_source_note: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "explanation": list(self.explanation),
            "biasIndicator": self.bias_indicator,
            "hypeScore": self.hype_score,
            "credibleSourceNote": self.credible_source_note,
        }


@dataclass(frozen=True)
class EnrichedArticle:
    """Article with display metadata, AI-provided or synthesized.

    Attributes:
        id: Per-run identifier, ``rss-<run epoch ms>-<index>``
        headline: Item title
        context: "Why it matters" text
        tags: Ordered, duplicate-free tags
        source: Feed name
        source_url: Link to the original story
        published_at: Publication date as YYYY-MM-DD
        energy_cost: Reading effort, one of Low/Medium/High
        impact_level: Optional significance, one of Low/Medium/High
        deep_content: Optional bias/hype analysis
        enrichment: "ai" when AI metadata was applied, "basic" otherwise.
            Internal only; not serialized.
    """
    id: str
    headline: str
    context: str
    tags: tuple[str, ...]
    source: str
    source_url: str
    published_at: str
    energy_cost: str = "Medium"
    impact_level: str | None = None
    deep_content: DeepContent | None = None
    enrichment: str = field(default="basic", compare=False)

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.id,
            "headline": self.headline,
            "context": self.context,
            "tags": list(self.tags),
            "source": self.source,
            "sourceUrl": self.source_url,
            "publishedAt": self.published_at,
            "energyCost": self.energy_cost,
        }
        if self.impact_level is not None:
            data["impactLevel"] = self.impact_level
        if self.deep_content is not None:
            data["deepContent"] = self.deep_content.to_dict()
        return data


@dataclass(frozen=True)
class DailyBriefItem:
    id: str
    headline: str
    context: str
    tags: tuple[str, ...]
    source: str
    source_url: str
    published_at: str

    @classmethod
    def from_article(cls, article: EnrichedArticle) -> "DailyBriefItem":
        return cls(
            id=article.id,
            headline=article.headline,
            context=article.context,
            tags=article.tags,
            source=article.source,
            source_url=article.source_url,
            published_at=article.published_at,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "headline": self.headline,
            "context": self.context,
            "tags": list(self.tags),
            "source": self.source,
            "sourceUrl": self.source_url,
            "publishedAt": self.published_at,
        }


@dataclass(frozen=True)
class Stream:
    id: str
    title: str
    articles: tuple[EnrichedArticle, ...]

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "articles": [article.to_dict() for article in self.articles],
        }


@dataclass(frozen=True)
class PipelineResult:
    """Output of one pipeline run, before serialization.

    Attributes:
        articles: Every enriched article, in aggregation order
        tech: Tech stream
        world: World stream
        long_read: Science / long-read stream
        daily_brief: At most three brief items
    """
    articles: tuple[EnrichedArticle, ...]
    tech: Stream
    world: Stream
    long_read: Stream
    daily_brief: tuple[DailyBriefItem, ...]
