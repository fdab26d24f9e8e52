"""On-demand HTTP surface for the news pipeline."""

from __future__ import annotations

import logging

import httpx
from fastapi import APIRouter, FastAPI, Request

from ..config import AppConfig
from ..fetch.cache import ResponseCache
from ..llm.providers.factory import resolve_provider
from ..llm.tracing import setup_langfuse
from ..runner import fetch_news_payload


logger = logging.getLogger("pulse_news.api")
router = APIRouter()


@router.get("/api/news/fetch")
async def fetch_news(request: Request):
    """Fetch, enrich and group the latest articles.

    Feed bodies are cached for ``fetch.cache_ttl_seconds``; the AI call runs
    on every request when a credential is configured.
    """
    state = request.app.state
    return await fetch_news_payload(state.config, cache=state.cache, transport=state.transport)


@router.get("/health")
async def health_check():
    return {"status": "ok", "message": "Service is healthy"}


def create_app(
    cfg: AppConfig | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        cfg: Application configuration (defaults when omitted)
        transport: Optional httpx transport, used by tests to stub upstream feeds

    Raises:
        ValueError: If the configured provider is not registered
    """
    cfg = cfg or AppConfig()
    resolve_provider(cfg.provider.name)
    setup_langfuse(cfg.langfuse)
    app = FastAPI(
        title="Pulse News",
        description="RSS news aggregation with optional AI enrichment",
        version="0.1.0",
    )
    app.state.config = cfg
    app.state.cache = ResponseCache(ttl_seconds=cfg.fetch.cache_ttl_seconds)
    app.state.transport = transport
    app.include_router(router)
    return app
