"""Group enriched articles into topic streams and derive the daily brief."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from ..config import StreamLimits
from ..core.types import DailyBriefItem, EnrichedArticle, PipelineResult, Stream


DAILY_BRIEF_SIZE = 3


@dataclass(frozen=True)
class StreamSpec:
    id: str
    title: str
    tags: frozenset[str]


TECH_STREAM = StreamSpec(
    id="tech",
    title="Tech & Science",
    tags=frozenset({"Tech", "AI", "CS", "Frontend", "Security", "LLMs", "Infosec"}),
)
WORLD_STREAM = StreamSpec(
    id="world",
    title="World & India",
    tags=frozenset({"World", "India", "Policy", "Economy", "Fintech", "Business"}),
)
LONG_READ_STREAM = StreamSpec(
    id="long",
    title="Curiosity & Deep Dives",
    tags=frozenset({"Science", "Biology", "Physics", "History", "Research"}),
)


def build_stream(spec: StreamSpec, articles: Iterable[EnrichedArticle], limit: int) -> Stream:
    """Select articles carrying any of the stream's tags, keeping order."""
    selected = [article for article in articles if spec.tags.intersection(article.tags)]
    return Stream(id=spec.id, title=spec.title, articles=tuple(selected[: max(limit, 0)]))


def build_daily_brief(articles: Iterable[EnrichedArticle]) -> tuple[DailyBriefItem, ...]:
    brief = []
    for article in articles:
        if len(brief) >= DAILY_BRIEF_SIZE:
            break
        brief.append(DailyBriefItem.from_article(article))
    return tuple(brief)


def assemble(articles: list[EnrichedArticle], limits: StreamLimits) -> PipelineResult:
    """Build the streams and daily brief from the full enriched sequence.

    Stream membership is not exclusive: an article tagged both "AI" and
    "Policy" lands in the tech and world streams.
    """
    articles = tuple(articles)
    return PipelineResult(
        articles=articles,
        tech=build_stream(TECH_STREAM, articles, limits.tech),
        world=build_stream(WORLD_STREAM, articles, limits.world),
        long_read=build_stream(LONG_READ_STREAM, articles, limits.long_read),
        daily_brief=build_daily_brief(articles),
    )
