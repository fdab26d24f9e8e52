"""Feed fetching and response caching."""

from .cache import ResponseCache
from .fetcher import FetchResult, fetch_all, fetch_feed

__all__ = ["ResponseCache", "FetchResult", "fetch_all", "fetch_feed"]
