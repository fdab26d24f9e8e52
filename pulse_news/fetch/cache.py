"""
In-memory response cache for the on-demand handler.

Feed bodies are kept per URL for a fixed window so repeated requests to
the live endpoint don't hammer upstream feeds. The batch job never uses
this cache.
"""

from __future__ import annotations

from dataclasses import dataclass
import time
from typing import Callable


@dataclass
class _CacheEntry:
    text: str
    stored_at: float


class ResponseCache:
    """Tracks fetched feed bodies with a time-to-live.

    Attributes:
        ttl_seconds: How long a stored body stays valid
    """

    def __init__(self, ttl_seconds: float = 3600.0, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, _CacheEntry] = {}

    def get(self, url: str) -> str | None:
        """Return the cached body for ``url`` if it is still within the TTL."""
        entry = self._entries.get(url)
        if entry is None:
            return None
        age = max(0.0, self._clock() - entry.stored_at)
        if age > self.ttl_seconds:
            del self._entries[url]
            return None
        return entry.text

    def put(self, url: str, text: str) -> None:
        self._entries[url] = _CacheEntry(text=text, stored_at=self._clock())

    def __len__(self) -> int:
        return len(self._entries)
