import json
from datetime import datetime, timezone
from pathlib import Path

from pulse_news.config import StreamLimits
from pulse_news.core.types import DeepContent, EnrichedArticle
from pulse_news.output.assembler import assemble
from pulse_news.output.renderer import build_payload, iso_timestamp, render_artifact, write_artifact


GENERATED_AT = datetime(2024, 1, 2, 6, 0, tzinfo=timezone.utc)


def _sample_result():
    articles = [
        EnrichedArticle(
            id="rss-1-0",
            headline='Quotes "and" </script> survive',
            context="Why it matters",
            tags=("AI", "World"),
            source="Hacker News",
            source_url="https://example.com/0",
            published_at="2024-01-01",
            energy_cost="Low",
            impact_level="High",
            deep_content=DeepContent(("Why it matters",), "Neutral", 3, "Via Hacker News"),
        ),
        EnrichedArticle(
            id="rss-1-1",
            headline="Quanta piece",
            context="Long read",
            tags=("Science",),
            source="Quanta Magazine",
            source_url="https://example.com/1",
            published_at="2024-01-01",
        ),
    ]
    return assemble(articles, StreamLimits())


def test_iso_timestamp_uses_z_suffix():
    assert iso_timestamp(GENERATED_AT) == "2024-01-02T06:00:00.000Z"


def test_render_artifact_declares_streams_and_timestamp():
    text = render_artifact(_sample_result(), GENERATED_AT)

    assert text.startswith("// AUTO-GENERATED")
    assert "// Last updated: 2024-01-02T06:00:00.000Z" in text
    assert "import { Article, DailyBriefItem, Stream } from './types';" in text
    assert "export const dailyBriefData: DailyBriefItem[] = [" in text
    assert "export const techStream: Stream = {" in text
    assert "export const worldStream: Stream = {" in text
    assert "export const longReadStream: Stream = {" in text
    assert 'id: "long",' in text
    assert 'title: "Curiosity & Deep Dives",' in text
    assert '"biasIndicator": "Neutral"' in text
    assert '\\"and\\"' in text


def test_render_artifact_brief_is_valid_json():
    text = render_artifact(_sample_result(), GENERATED_AT)

    start = text.index("DailyBriefItem[] = ") + len("DailyBriefItem[] = ")
    end = text.index(";\n", start)
    brief = json.loads(text[start:end])

    assert [b["id"] for b in brief] == ["rss-1-0", "rss-1-1"]
    assert "energyCost" not in brief[0]


def test_write_artifact_overwrites_previous_content(tmp_path: Path):
    path = tmp_path / "news" / "data.ts"
    path.parent.mkdir()
    path.write_text("stale", encoding="utf-8")

    write_artifact(path, _sample_result(), GENERATED_AT)

    content = path.read_text(encoding="utf-8")
    assert "stale" not in content
    assert "techStream" in content


def test_build_payload_shape():
    payload = build_payload(_sample_result(), GENERATED_AT)

    assert payload["success"] is True
    assert payload["fetchedAt"] == "2024-01-02T06:00:00.000Z"
    assert payload["articleCount"] == 2
    assert set(payload["streams"]) == {"tech", "world", "longRead"}
    assert [a["id"] for a in payload["streams"]["tech"]] == ["rss-1-0"]
    assert [a["id"] for a in payload["streams"]["world"]] == ["rss-1-0"]
    assert [a["id"] for a in payload["streams"]["longRead"]] == ["rss-1-1"]
    assert len(payload["dailyBrief"]) == 2

    first = payload["streams"]["tech"][0]
    assert first["impactLevel"] == "High"
    assert first["deepContent"] == {
        "explanation": ["Why it matters"],
        "biasIndicator": "Neutral",
        "hypeScore": 3,
        "credibleSourceNote": "Via Hacker News",
    }
    second = payload["streams"]["longRead"][0]
    assert "impactLevel" not in second
    assert "deepContent" not in second
    assert second["energyCost"] == "Medium"


def test_payload_and_artifact_share_grouping():
    result = _sample_result()
    payload = build_payload(result, GENERATED_AT)
    text = render_artifact(result, GENERATED_AT)

    for stream in payload["streams"].values():
        for article in stream:
            assert article["id"] in text
