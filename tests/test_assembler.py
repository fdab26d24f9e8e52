"""Tests for stream grouping and the daily brief."""

from pulse_news.config import StreamLimits
from pulse_news.core.types import EnrichedArticle
from pulse_news.output.assembler import assemble


def _article(idx: int, *tags: str) -> EnrichedArticle:
    return EnrichedArticle(
        id=f"rss-1-{idx}",
        headline=f"Headline {idx}",
        context=f"Context {idx}",
        tags=tags,
        source="Source",
        source_url=f"https://example.com/{idx}",
        published_at="2024-01-01",
    )


def test_articles_are_partitioned_by_tag_allow_lists():
    articles = [
        _article(0, "AI", "Policy"),
        _article(1, "India"),
        _article(2, "Physics"),
        _article(3, "Sports"),
        _article(4, "Infosec"),
    ]

    result = assemble(articles, StreamLimits())

    assert [a.id for a in result.tech.articles] == ["rss-1-0", "rss-1-4"]
    assert [a.id for a in result.world.articles] == ["rss-1-0", "rss-1-1"]
    assert [a.id for a in result.long_read.articles] == ["rss-1-2"]
    assert (result.tech.id, result.world.id, result.long_read.id) == ("tech", "world", "long")
    assert result.tech.title == "Tech & Science"
    assert result.world.title == "World & India"
    assert result.long_read.title == "Curiosity & Deep Dives"


def test_streams_are_capped_independently():
    articles = [_article(i, "Tech", "World", "Science") for i in range(30)]

    result = assemble(articles, StreamLimits(tech=8, world=10, long_read=5))

    assert len(result.tech.articles) == 8
    assert len(result.world.articles) == 10
    assert len(result.long_read.articles) == 5
    assert result.tech.articles[0].id == "rss-1-0"


def test_daily_brief_is_first_three_of_full_sequence():
    articles = [_article(0, "Sports"), _article(1, "Tech"), _article(2, "World"), _article(3, "Tech")]

    result = assemble(articles, StreamLimits())

    assert [b.id for b in result.daily_brief] == ["rss-1-0", "rss-1-1", "rss-1-2"]
    assert result.daily_brief[0].to_dict() == {
        "id": "rss-1-0",
        "headline": "Headline 0",
        "context": "Context 0",
        "tags": ["Sports"],
        "source": "Source",
        "sourceUrl": "https://example.com/0",
        "publishedAt": "2024-01-01",
    }


def test_daily_brief_never_exceeds_three_entries():
    articles = [_article(i, "Tech") for i in range(30)]

    result = assemble(articles, StreamLimits())

    assert len(result.daily_brief) == 3
    assert len(result.articles) == 30


def test_empty_input_gives_empty_result():
    result = assemble([], StreamLimits())

    assert result.articles == ()
    assert result.tech.articles == ()
    assert result.daily_brief == ()
