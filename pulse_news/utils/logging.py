"""
Logging setup for the pipeline.

Console output goes through Rich; the optional file log is JSON Lines so
that structured fields passed to ``log_event`` survive as keys. Prompt and
response records for the enrichment call go to their own ``pulse_news.llm``
logger and file.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
import re
from typing import Any

from rich.logging import RichHandler

from ..config import LoggingConfig


_URL_RE = re.compile(r"https?://\S+")

# Attributes every LogRecord carries; anything else came in through ``extra``.
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {"message", "asctime"}


def setup_logging(cfg: LoggingConfig, log_dir: Path | None = None) -> logging.Logger:
    """Configure the ``pulse_news`` logger tree from the logging section."""
    level = _level_from_string(cfg.level)
    logger = _reset("pulse_news", level)

    if cfg.console:
        console_handler = RichHandler(rich_tracebacks=True, show_time=False, show_level=True)
        console_handler.setFormatter(logging.Formatter("%(message)s"))
        logger.addHandler(console_handler)

    if cfg.file:
        formatter = JsonlFormatter() if cfg.format == "jsonl" else logging.Formatter("%(asctime)s %(levelname)s %(message)s")
        logger.addHandler(_file_handler(log_dir or Path(cfg.log_dir), cfg.filename, formatter))

    for handler in logger.handlers:
        handler.setLevel(level)
    return logger


def setup_llm_logger(cfg: LoggingConfig, log_dir: Path | None = None) -> logging.Logger | None:
    """Return the enrichment prompt/response logger, or None when disabled."""
    if not cfg.llm_log_enabled:
        return None
    logger = _reset("pulse_news.llm", _level_from_string(cfg.level))
    logger.addHandler(_file_handler(log_dir or Path(cfg.log_dir), cfg.llm_log_file, JsonlFormatter()))
    return logger


def log_event(logger: logging.Logger | None, message: str, level: int = logging.INFO, **fields: Any) -> None:
    """Log ``message`` with ``fields`` attached as structured extras."""
    if logger is None:
        return
    logger.log(level, message, extra=fields)


def redact_text(text: str, mode: str) -> str:
    """Apply a redaction mode: "none", "redact_content" or "redact_urls"."""
    if mode == "redact_content":
        return ""
    if mode == "redact_urls":
        return _URL_RE.sub("[REDACTED_URL]", text)
    return text


def truncate_text(text: str, max_chars: int = 20000) -> str:
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + "...(truncated)"


class JsonlFormatter(logging.Formatter):
    """One JSON object per record: timestamp, level, logger, message and extras."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        payload.update({key: value for key, value in vars(record).items() if key not in _RECORD_ATTRS})
        return json.dumps(payload, ensure_ascii=True, default=str)


def _reset(name: str, level: int) -> logging.Logger:
    logger = logging.getLogger(name)
    for handler in logger.handlers:
        handler.close()
    logger.handlers = []
    logger.setLevel(level)
    logger.propagate = False
    return logger


def _file_handler(directory: Path, filename: str, formatter: logging.Formatter) -> logging.Handler:
    directory.mkdir(parents=True, exist_ok=True)
    handler = logging.FileHandler(directory / filename, encoding="utf-8")
    handler.setFormatter(formatter)
    return handler


def _level_from_string(level: str) -> int:
    return getattr(logging, level.upper(), logging.INFO)
