"""
Pipeline orchestration.

One pipeline, two adapters:
1. Fetch every feed concurrently (isolated failures)
2. Extract items from each body
3. Aggregate into a recency-ordered working set
4. Enrich the working set (single batched AI call, or basic synthesis)
5. Assemble streams and the daily brief

``run_pipeline`` does the work and returns a PipelineResult. ``run_batch``
writes it as the generated data module; ``fetch_news_payload`` returns it
as the JSON body for the on-demand endpoint.
"""

from __future__ import annotations

from datetime import datetime, timezone
import logging
from pathlib import Path
from typing import Callable

import httpx

from .analyzers.enricher import Enricher, build_enricher
from .config import AppConfig, StreamLimits
from .core.aggregate import aggregate
from .core.types import FeedSource, PipelineResult, RawItem
from .extract.extractor import parse_feed_items
from .fetch.cache import ResponseCache
from .fetch.fetcher import FetchResult, fetch_all
from .llm.providers.factory import resolve_provider
from .llm.tracing import set_span_output, setup_langfuse, start_span
from .output.assembler import assemble
from .output.renderer import build_payload, write_artifact
from .sources import resolve_sources
from .utils.logging import log_event, setup_llm_logger


logger = logging.getLogger("pulse_news.runner")

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


async def run_pipeline(
    sources: list[FeedSource],
    enricher: Enricher,
    client: httpx.AsyncClient,
    cfg: AppConfig,
    now: datetime,
    limits: StreamLimits,
    cache: ResponseCache | None = None,
) -> PipelineResult:
    """Run fetch → extract → aggregate → enrich → assemble once.

    Args:
        sources: Feeds to read
        enricher: Enrichment engine (with or without a provider)
        client: Shared async HTTP client for feed requests
        cfg: Application configuration
        now: Run timestamp; used for ids and undated items
        limits: Stream caps for the invocation surface
        cache: Optional response cache (on-demand form only)

    Returns:
        The assembled result. Never raises for feed or AI failures; the
        worst case is an empty result.
    """
    with start_span(
        "pulse_news.run",
        kind="chain",
        input_value={"sources": len(sources), "ai": enricher.uses_ai},
    ) as run_span:
        with start_span("pulse_news.fetch", kind="chain", input_value={"count": len(sources)}):
            results = await fetch_all(client, sources, cfg.fetch, cache)

        batches = [_extract(result, cfg) for result in results]
        working_set = aggregate(batches, cfg.aggregate.max_items)
        log_event(
            logger,
            f"Total items fetched: {sum(len(batch) for batch in batches)}",
            event="aggregate_done",
            fetched=sum(len(batch) for batch in batches),
            kept=len(working_set),
            sources_ok=sum(1 for result in results if result.ok),
            sources_failed=sum(1 for result in results if not result.ok),
        )

        with start_span("pulse_news.enrich", kind="chain", input_value={"count": len(working_set)}):
            articles = await enricher.enrich(working_set, now)

        result = assemble(articles, limits)
        set_span_output(
            run_span,
            {
                "articles": len(result.articles),
                "tech": len(result.tech.articles),
                "world": len(result.world.articles),
                "long_read": len(result.long_read.articles),
            },
        )
        return result


def _extract(result: FetchResult, cfg: AppConfig) -> list[RawItem]:
    if not result.ok:
        return []
    source = result.source
    items = parse_feed_items(result.text or "", source.name, source.category, cfg.fetch.items_per_feed)
    if not items:
        log_event(
            logger,
            f"{source.name}: no items found",
            level=logging.WARNING,
            event="feed_empty",
            source=source.name,
        )
    else:
        log_event(logger, f"{source.name}: {len(items)} items", event="feed_parsed", source=source.name, count=len(items))
    return items


def _client(cfg: AppConfig, transport: httpx.AsyncBaseTransport | None = None) -> httpx.AsyncClient:
    """Client for feed requests, built from the fetch settings."""
    return httpx.AsyncClient(
        timeout=cfg.fetch.timeout_seconds,
        trust_env=cfg.fetch.trust_env,
        transport=transport,
    )


def _provider_client(cfg: AppConfig, transport: httpx.AsyncBaseTransport | None = None) -> httpx.AsyncClient:
    """Client for the enrichment call, built from the provider settings."""
    return httpx.AsyncClient(
        timeout=cfg.provider.timeout_seconds,
        trust_env=cfg.provider.trust_env,
        transport=transport,
    )


async def run_batch(
    cfg: AppConfig,
    output_path: Path | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    clock: Clock = utc_now,
) -> Path:
    """Run the pipeline and overwrite the generated data module.

    Always fetches fresh (no response cache).

    Raises:
        ValueError: If the configured provider is not registered

    Returns:
        Path of the written artifact
    """
    resolve_provider(cfg.provider.name)
    setup_langfuse(cfg.langfuse)
    path = output_path or Path(cfg.output.artifact_path)
    sources = resolve_sources(cfg.sources)
    now = clock()

    async with _client(cfg, transport) as client, _provider_client(cfg, transport) as llm_client:
        enricher = build_enricher(cfg, setup_llm_logger(cfg.logging), llm_client)
        log_event(
            logger,
            f"Fetching {len(sources)} feeds",
            event="pipeline_start",
            mode="batch",
            sources=len(sources),
            ai=enricher.uses_ai,
        )
        result = await run_pipeline(sources, enricher, client, cfg, now, cfg.streams.batch)

    if path.exists():
        log_event(logger, f"Overwriting {path}", level=logging.DEBUG, event="artifact_overwrite", path=str(path))
    write_artifact(path, result, clock())
    log_event(
        logger,
        f"Updated {path}: {len(result.daily_brief)} daily brief items, {len(result.articles)} total articles",
        event="pipeline_complete",
        path=str(path),
        total=len(result.articles),
        brief=len(result.daily_brief),
    )
    return path


async def fetch_news_payload(
    cfg: AppConfig,
    cache: ResponseCache | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
    clock: Clock = utc_now,
) -> dict:
    """Run the pipeline for the on-demand endpoint and return its JSON body."""
    sources = resolve_sources(cfg.sources)
    now = clock()
    async with _client(cfg, transport) as client, _provider_client(cfg, transport) as llm_client:
        enricher = build_enricher(cfg, setup_llm_logger(cfg.logging), llm_client)
        result = await run_pipeline(sources, enricher, client, cfg, now, cfg.streams.live, cache)
    return build_payload(result, clock())
