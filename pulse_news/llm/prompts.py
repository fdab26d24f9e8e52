"""Prompt loading and rendering helpers for enrichment providers."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from ..core.types import RawItem


_PROMPT_DIR = Path(__file__).resolve().parent.parent / "prompts"


@lru_cache(maxsize=None)
def _load_template(name: str) -> str:
    path = _PROMPT_DIR / f"{name}.md"
    return path.read_text(encoding="utf-8").strip()


def _render_template(name: str, **values: str) -> str:
    template = _load_template(name)
    return template.format(**values)


def format_headline(item: RawItem) -> str:
    return f"[{item.source}] {item.title}"


def build_enrichment_prompt(items: list[RawItem]) -> str:
    headlines = "\n".join(format_headline(item) for item in items)
    return _render_template("enrichment", count=str(len(items)), headlines=headlines)
