"""
Pulse News - RSS ingestion and AI enrichment for the Pulse dashboard.

This package fetches a catalog of RSS feeds concurrently, extracts and
aggregates their items, optionally enriches the headlines with one batched
Gemini request, and groups the result into topic streams plus a daily
brief. The result is written as a generated data module (batch job) or
served as JSON (on-demand endpoint).

Example:
    $ pulse-news run -o src/app/pulse/news/data.ts
    $ pulse-news serve --port 8000
"""

__all__ = ["__version__", "AppConfig", "load_config", "run_pipeline", "run_batch", "fetch_news_payload"]
__version__ = "0.1.0"

from .config import AppConfig, load_config
from .runner import fetch_news_payload, run_batch, run_pipeline
