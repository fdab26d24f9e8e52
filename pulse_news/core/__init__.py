"""Core pipeline types and aggregation."""

from .aggregate import aggregate, parse_pub_date
from .types import (
    DailyBriefItem,
    DeepContent,
    EnrichedArticle,
    FeedSource,
    PipelineResult,
    RawItem,
    Stream,
)

__all__ = [
    "aggregate",
    "parse_pub_date",
    "DailyBriefItem",
    "DeepContent",
    "EnrichedArticle",
    "FeedSource",
    "PipelineResult",
    "RawItem",
    "Stream",
]
