"""
Command-line interface for the Pulse news pipeline.

Uses Typer to expose the two invocation surfaces: a batch job that writes
the generated data module, and an HTTP server for on-demand fetching.
Loads a .env file first so GEMINI_API_KEY can live there.
"""

from __future__ import annotations

import asyncio
from pathlib import Path

from dotenv import load_dotenv
import typer
from rich.console import Console
import uvicorn

from .config import AppConfig, load_config
from .llm.tracing import flush
from .runner import run_batch
from .utils.logging import setup_logging

app = typer.Typer(add_completion=False)
console = Console()


def _load(
    config: Path | None,
    api_key: str | None,
    log_level: str | None,
    log_file: bool | None,
) -> AppConfig:
    load_dotenv()
    cfg = load_config(str(config) if config else None)
    if api_key:
        cfg.provider.api_key = api_key
    if log_level:
        cfg.logging.level = log_level
    if log_file is not None:
        cfg.logging.file = log_file
    setup_logging(cfg.logging)
    return cfg


@app.command()
def run(
    output: Path | None = typer.Option(
        None, "--output", "-o", help="Artifact path (defaults to output.artifact_path)."
    ),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, readable=True),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    log_file: bool | None = typer.Option(
        None, "--log-file/--no-log-file", help="Enable or disable file logging."
    ),
    api_key: str | None = typer.Option(
        None,
        "--api-key",
        envvar="GEMINI_API_KEY",
        help="Gemini API key (or set GEMINI_API_KEY / .env). Without it, no AI analysis runs.",
    ),
):
    """Fetch feeds, enrich headlines and overwrite the generated news data module."""
    cfg = _load(config, api_key, log_level, log_file)
    path = asyncio.run(run_batch(cfg, output))
    console.print(f"Updated: {path}")
    flush()


@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host"),
    port: int = typer.Option(8000, "--port", "-p"),
    config: Path | None = typer.Option(None, "--config", "-c", exists=True, readable=True),
    log_level: str | None = typer.Option(None, "--log-level", help="Logging level."),
    api_key: str | None = typer.Option(None, "--api-key", envvar="GEMINI_API_KEY"),
):
    """Serve GET /api/news/fetch for on-demand fetching."""
    from .api.app import create_app

    cfg = _load(config, api_key, log_level, None)
    uvicorn.run(create_app(cfg), host=host, port=port, log_level=cfg.logging.level.lower())


if __name__ == "__main__":
    app()
