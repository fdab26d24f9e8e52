"""
Serializations of a PipelineResult.

The batch job writes a generated TypeScript data module for static
serving; the on-demand handler returns a JSON payload. Both read the same
PipelineResult, so grouping and brief derivation happen only once.
"""

from __future__ import annotations

from datetime import datetime, timezone
import json
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from ..core.types import PipelineResult, Stream


_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"

# Exported variable name for each stream in the generated module.
_STREAM_VARS = (
    ("techStream", "tech"),
    ("worldStream", "world"),
    ("longReadStream", "long_read"),
)


def _environment() -> Environment:
    return Environment(
        loader=FileSystemLoader(str(_TEMPLATE_DIR)),
        autoescape=False,
        trim_blocks=True,
        keep_trailing_newline=True,
        undefined=StrictUndefined,
    )


def iso_timestamp(moment: datetime) -> str:
    """Format as an ISO 8601 UTC timestamp with millisecond precision and a Z suffix."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def _js(value: Any) -> str:
    return json.dumps(value, indent=4, ensure_ascii=False)


def _stream_articles(stream: Stream) -> str:
    text = _js([article.to_dict() for article in stream.articles])
    # Nest the array one level inside the stream object literal.
    return text.replace("\n", "\n    ")


def render_artifact(result: PipelineResult, generated_at: datetime) -> str:
    """Render the generated data module for the dashboard page."""
    template = _environment().get_template("news_data.ts.j2")
    streams = []
    for var, attr in _STREAM_VARS:
        stream: Stream = getattr(result, attr)
        streams.append(
            {
                "var": var,
                "id": json.dumps(stream.id),
                "title": json.dumps(stream.title, ensure_ascii=False),
                "articles": _stream_articles(stream),
            }
        )
    return template.render(
        generated_at=iso_timestamp(generated_at),
        daily_brief=_js([item.to_dict() for item in result.daily_brief]),
        streams=streams,
    )


def write_artifact(path: Path, result: PipelineResult, generated_at: datetime) -> Path:
    """Render the data module and overwrite ``path`` with it."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_artifact(result, generated_at), encoding="utf-8")
    return path


def build_payload(result: PipelineResult, fetched_at: datetime) -> dict[str, Any]:
    """Build the JSON response body for the on-demand handler."""
    return {
        "success": True,
        "fetchedAt": iso_timestamp(fetched_at),
        "articleCount": len(result.articles),
        "streams": {
            "tech": [article.to_dict() for article in result.tech.articles],
            "world": [article.to_dict() for article in result.world.articles],
            "longRead": [article.to_dict() for article in result.long_read.articles],
        },
        "dailyBrief": [item.to_dict() for item in result.daily_brief],
    }
