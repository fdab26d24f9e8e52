"""Tests for the on-demand HTTP endpoint."""

from __future__ import annotations

import httpx
import pytest
from fastapi.testclient import TestClient

from pulse_news.api.app import create_app
from pulse_news.config import AppConfig


FEED = (
    "<rss><channel>"
    "<item><title>Rust 2.0 announced</title><link>https://hn.example.com/1</link>"
    "<pubDate>Mon, 01 Jan 2024 10:00:00 GMT</pubDate></item>"
    "<item><title>Elections in review</title><link>https://hn.example.com/2</link>"
    "<pubDate>Mon, 01 Jan 2024 09:00:00 GMT</pubDate></item>"
    "</channel></rss>"
)


def _client() -> tuple[TestClient, list[str]]:
    calls: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(str(request.url))
        return httpx.Response(200, text=FEED)

    cfg = AppConfig(sources=[{"name": "HN", "url": "https://hn.example.com/rss", "category": "Tech"}])
    app = create_app(cfg, transport=httpx.MockTransport(handler))
    return TestClient(app), calls


def test_fetch_endpoint_returns_payload():
    client, _ = _client()

    resp = client.get("/api/news/fetch")

    assert resp.status_code == 200
    data = resp.json()
    assert data["success"] is True
    assert data["articleCount"] == 2
    assert set(data["streams"]) == {"tech", "world", "longRead"}
    assert [a["headline"] for a in data["streams"]["tech"]] == ["Rust 2.0 announced", "Elections in review"]
    assert data["streams"]["world"] == []
    assert len(data["dailyBrief"]) == 2
    assert data["fetchedAt"].endswith("Z")


def test_feed_bodies_are_cached_between_requests():
    client, calls = _client()

    first = client.get("/api/news/fetch").json()
    second = client.get("/api/news/fetch").json()

    assert len(calls) == 1
    assert second["articleCount"] == first["articleCount"]


def test_health_check():
    client, _ = _client()

    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "message": "Service is healthy"}


def test_unknown_provider_fails_at_startup():
    cfg = AppConfig()
    cfg.provider.name = "not-a-provider"

    with pytest.raises(ValueError, match="Unsupported provider"):
        create_app(cfg)
