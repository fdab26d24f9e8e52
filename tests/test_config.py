import pytest

from pulse_news.config import AppConfig, ProviderConfig, get_api_key, load_config
from pulse_news.sources import default_sources, resolve_sources, sources_from_config


def test_defaults():
    cfg = load_config(None)

    assert cfg.provider.name == "gemini"
    assert cfg.provider.api_key_env == "GEMINI_API_KEY"
    assert cfg.fetch.user_agent == "PulseNewsBot/1.0"
    assert cfg.aggregate.max_items == 30
    assert (cfg.streams.batch.tech, cfg.streams.batch.world, cfg.streams.batch.long_read) == (8, 8, 5)
    assert (cfg.streams.live.tech, cfg.streams.live.world, cfg.streams.live.long_read) == (10, 10, 5)
    assert cfg.sources == []


def test_yaml_overrides_are_merged(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "\n".join(
            [
                "provider:",
                "  model: gemini-test",
                "fetch:",
                "  timeout_seconds: 3",
                "  deadline_seconds: 20",
                "streams:",
                "  live:",
                "    tech: 4",
                "sources:",
                "  - name: Example",
                "    url: https://example.com/rss",
                "    category: Tech",
                "unknown_section:",
                "  ignored: true",
            ]
        ),
        encoding="utf-8",
    )

    cfg = load_config(str(path))

    assert cfg.provider.model == "gemini-test"
    assert cfg.provider.temperature == 0.3
    assert cfg.fetch.timeout_seconds == 3
    assert cfg.fetch.deadline_seconds == 20
    assert cfg.fetch.user_agent == "PulseNewsBot/1.0"
    assert cfg.streams.live.tech == 4
    assert cfg.streams.live.world == 10
    assert cfg.streams.batch.tech == 8
    assert [s.name for s in resolve_sources(cfg.sources)] == ["Example"]


def test_empty_yaml_gives_defaults(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")

    assert load_config(str(path)) == AppConfig()


def test_non_mapping_yaml_is_rejected(tmp_path):
    path = tmp_path / "list.yaml"
    path.write_text("- a\n- b\n", encoding="utf-8")

    with pytest.raises(ValueError, match="expected a mapping"):
        load_config(str(path))


def test_get_api_key_prefers_inline_value(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "from-env")

    assert get_api_key(ProviderConfig(api_key="inline")) == "inline"
    assert get_api_key(ProviderConfig()) == "from-env"


def test_get_api_key_missing_returns_none(monkeypatch):
    monkeypatch.setenv("GEMINI_API_KEY", "")

    assert get_api_key(ProviderConfig()) is None


def test_default_catalog_covers_every_topic():
    sources = default_sources()

    assert {s.category for s in sources} == {"Tech", "World", "India", "Science"}
    assert resolve_sources(None) == sources
    assert len({s.url for s in sources}) == len(sources)


def test_sources_from_config_requires_all_fields():
    with pytest.raises(ValueError, match="url"):
        sources_from_config([{"name": "No URL", "category": "Tech"}])
