"""Stream assembly and output serialization."""

from .assembler import assemble, build_daily_brief, build_stream
from .renderer import build_payload, render_artifact, write_artifact

__all__ = [
    "assemble",
    "build_daily_brief",
    "build_stream",
    "build_payload",
    "render_artifact",
    "write_artifact",
]
