"""
Enrichment of the aggregated working set.

The Enricher runs in one of two modes, decided once per run:

- without a provider (no credential configured) every item gets basic
  metadata synthesized from the item itself;
- with a provider, all headlines go out in a single batched request and
  the decoded array is matched to the items by position. A failed call or
  an undecodable response drops the whole batch back to basic metadata;
  a missing or malformed element only affects its own item.
"""

from __future__ import annotations

from datetime import datetime, timezone
import logging
from typing import Any

from ..config import AppConfig, get_api_key
from ..core.aggregate import parse_pub_date
from ..core.types import ENERGY_LEVELS, DeepContent, EnrichedArticle, RawItem
from ..llm.providers.base import BatchAnalysis, EnrichmentProvider
from ..llm.providers.factory import create_provider
from ..utils.logging import log_event


logger = logging.getLogger("pulse_news.enrich")

NO_SUMMARY = "No summary available."
DEFAULT_ENERGY = "Medium"
DEFAULT_HYPE_SCORE = 5


class Enricher:
    """Attach display metadata to RawItems.

    Args:
        provider: Enrichment backend, or None for the no-credential mode
    """

    def __init__(self, provider: EnrichmentProvider | None = None) -> None:
        self.provider = provider

    @property
    def uses_ai(self) -> bool:
        return self.provider is not None

    async def enrich(self, items: list[RawItem], now: datetime) -> list[EnrichedArticle]:
        """Return one EnrichedArticle per item, in the same order."""
        run_ms = int(now.timestamp() * 1000)
        if not items:
            return []

        if self.provider is None:
            log_event(
                logger,
                "No API key configured; using basic processing (no AI analysis)",
                event="enrich_no_credential",
                count=len(items),
            )
            return [synthesize_article(item, idx, run_ms, now) for idx, item in enumerate(items)]

        batch = await self._analyze(items)
        if not batch.ok:
            log_event(
                logger,
                f"AI enrichment unavailable ({batch.status}); falling back to basic processing",
                level=logging.WARNING,
                event="enrich_fallback",
                status=batch.status,
                error=batch.error,
                count=len(items),
            )
            return [synthesize_article(item, idx, run_ms, now) for idx, item in enumerate(items)]

        if len(batch.analyses) != len(items):
            log_event(
                logger,
                f"AI returned {len(batch.analyses)} analyses for {len(items)} headlines",
                level=logging.WARNING,
                event="enrich_length_mismatch",
                requested=len(items),
                received=len(batch.analyses),
            )

        articles = []
        for idx, item in enumerate(items):
            analysis = batch.analyses[idx] if idx < len(batch.analyses) else None
            if isinstance(analysis, dict):
                articles.append(merge_analysis(item, analysis, idx, run_ms, now))
            else:
                articles.append(synthesize_article(item, idx, run_ms, now))
        return articles

    async def _analyze(self, items: list[RawItem]) -> BatchAnalysis:
        try:
            return await self.provider.analyze_headlines(items)
        except Exception as exc:  # noqa: BLE001
            return BatchAnalysis(status="provider_error", error=f"{type(exc).__name__}: {exc}")


def build_enricher(
    cfg: AppConfig,
    llm_logger: logging.Logger | None = None,
    client=None,
) -> Enricher:
    """Resolve the credential and build an Enricher.

    A missing credential is a supported mode, not an error.
    """
    api_key = get_api_key(cfg.provider)
    if not api_key:
        return Enricher(None)
    provider = create_provider(cfg.provider, api_key, cfg.logging, llm_logger, client)
    return Enricher(provider)


def article_id(run_ms: int, index: int) -> str:
    return f"rss-{run_ms}-{index}"


def published_date(pub_date: str, now: datetime) -> str:
    """Format a feed date as YYYY-MM-DD (UTC), defaulting to the run date."""
    parsed = parse_pub_date(pub_date)
    if parsed is None:
        parsed = now
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc)
    return parsed.date().isoformat()


def synthesize_article(item: RawItem, index: int, run_ms: int, now: datetime) -> EnrichedArticle:
    """Build an article from the raw item alone."""
    return EnrichedArticle(
        id=article_id(run_ms, index),
        headline=item.title,
        context=item.description or NO_SUMMARY,
        tags=(item.category,),
        source=item.source,
        source_url=item.link,
        published_at=published_date(item.pub_date, now),
        energy_cost=DEFAULT_ENERGY,
        enrichment="basic",
    )


def merge_analysis(
    item: RawItem,
    analysis: dict[str, Any],
    index: int,
    run_ms: int,
    now: datetime,
) -> EnrichedArticle:
    """Build an article from the raw item plus one AI analysis object."""
    context = _text(analysis.get("context")) or item.description or NO_SUMMARY
    tags = _tags(analysis.get("tags")) or (item.category,)
    bias = _text(analysis.get("biasIndicator"))
    deep_content = None
    if bias:
        deep_content = DeepContent(
            explanation=(context,),
            bias_indicator=bias,
            hype_score=_hype_score(analysis.get("hypeScore")),
            credible_source_note=f"Via {item.source}",
        )
    return EnrichedArticle(
        id=article_id(run_ms, index),
        headline=item.title,
        context=context,
        tags=tags,
        source=item.source,
        source_url=item.link,
        published_at=published_date(item.pub_date, now),
        energy_cost=_level(analysis.get("energyCost")) or DEFAULT_ENERGY,
        impact_level=_level(analysis.get("impactLevel")),
        deep_content=deep_content,
        enrichment="ai",
    )


def _text(value: Any) -> str:
    if isinstance(value, str):
        return value.strip()
    return ""


def _tags(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    seen: dict[str, None] = {}
    for tag in value:
        if isinstance(tag, str) and tag.strip():
            seen.setdefault(tag.strip(), None)
    return tuple(seen)


def _level(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    normalized = value.strip().capitalize()
    return normalized if normalized in ENERGY_LEVELS else None


def _hype_score(value: Any) -> int:
    if isinstance(value, bool):
        return DEFAULT_HYPE_SCORE
    try:
        score = int(round(float(value)))
    except (TypeError, ValueError, OverflowError):
        return DEFAULT_HYPE_SCORE
    if score <= 0:
        return DEFAULT_HYPE_SCORE
    return min(score, 10)
