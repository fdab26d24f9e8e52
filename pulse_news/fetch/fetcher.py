"""
Concurrent feed fetching over httpx.

Every source is fetched in its own task and failures are isolated: a
source that times out, errors, or answers with a non-2xx status yields a
FetchResult with ``text=None`` and never raises to the caller.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging

import httpx

from ..config import FetchConfig
from ..core.types import FeedSource
from ..utils.logging import log_event
from .cache import ResponseCache


logger = logging.getLogger("pulse_news.fetch")


@dataclass(frozen=True)
class FetchResult:
    """Result of fetching one feed.

    Either text will be populated (success) or error will be populated (failure),
    but never both. status_code may be None for network-level failures.

    Attributes:
        source: The feed that was fetched
        status_code: HTTP status code, or None if no response was received
        text: The response body text, or None on error
        error: Error message if fetch failed, None on success
        from_cache: True when the body came from the response cache
    """
    source: FeedSource
    status_code: int | None
    text: str | None
    error: str | None
    from_cache: bool = False

    @property
    def ok(self) -> bool:
        return self.text is not None


async def fetch_feed(
    client: httpx.AsyncClient,
    source: FeedSource,
    cfg: FetchConfig,
    cache: ResponseCache | None = None,
) -> FetchResult:
    """Fetch a single feed body.

    Args:
        client: Shared async HTTP client
        source: Feed to fetch
        cfg: Fetch settings (timeout, user agent)
        cache: Optional response cache; only successful bodies are stored

    Returns:
        FetchResult with text on success or error message on failure
    """
    if cache is not None:
        cached = cache.get(source.url)
        if cached is not None:
            log_event(logger, f"Cache hit: {source.name}", level=logging.DEBUG, event="cache_hit", source=source.name)
            return FetchResult(source=source, status_code=None, text=cached, error=None, from_cache=True)

    try:
        resp = await client.get(
            source.url,
            headers={"User-Agent": cfg.user_agent},
            timeout=cfg.timeout_seconds,
            follow_redirects=True,
        )
    except Exception as exc:  # noqa: BLE001
        error = f"{type(exc).__name__}: {exc}"
        log_event(
            logger,
            f"Error fetching {source.name}: {error}",
            level=logging.WARNING,
            event="fetch_failed",
            source=source.name,
            url=source.url,
            error=error,
        )
        return FetchResult(source=source, status_code=None, text=None, error=error)

    if not resp.is_success:
        error = f"HTTP {resp.status_code}"
        log_event(
            logger,
            f"Failed to fetch {source.name}: {resp.status_code}",
            level=logging.WARNING,
            event="fetch_failed",
            source=source.name,
            url=source.url,
            status_code=resp.status_code,
            error=error,
        )
        return FetchResult(source=source, status_code=resp.status_code, text=None, error=error)

    text = resp.text
    if cache is not None:
        cache.put(source.url, text)
    return FetchResult(source=source, status_code=resp.status_code, text=text, error=None)


async def fetch_all(
    client: httpx.AsyncClient,
    sources: list[FeedSource],
    cfg: FetchConfig,
    cache: ResponseCache | None = None,
) -> list[FetchResult]:
    """Fetch every source concurrently and wait for all of them to settle.

    With ``cfg.deadline_seconds`` set, fetches still pending when the
    deadline trips are cancelled and left out of the result.

    Returns:
        Settled results in source order
    """
    tasks = [asyncio.create_task(fetch_feed(client, source, cfg, cache)) for source in sources]
    if not tasks:
        return []

    if cfg.deadline_seconds is None:
        return list(await asyncio.gather(*tasks))

    done, pending = await asyncio.wait(tasks, timeout=cfg.deadline_seconds)
    for task in pending:
        task.cancel()
    if pending:
        await asyncio.gather(*pending, return_exceptions=True)
        skipped = [source.name for source, task in zip(sources, tasks) if task in pending]
        log_event(
            logger,
            f"Fetch deadline reached; skipping {len(skipped)} source(s)",
            level=logging.WARNING,
            event="fetch_deadline",
            skipped=skipped,
        )
    return [task.result() for task in tasks if task in done]
