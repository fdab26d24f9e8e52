"""
Merge per-source items into one recency-ordered working set.

No deduplication happens here: the same story syndicated by two feeds
shows up twice.
"""

from __future__ import annotations

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Iterable

from .types import RawItem


MAX_WORKING_SET = 30

_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


def parse_pub_date(value: str | None) -> datetime | None:
    """Parse an RSS (RFC 822) or ISO 8601 date string into UTC.

    Naive results are treated as UTC.

    Returns:
        A UTC datetime, or None when the value is empty, unparseable or
        cannot be represented in UTC (e.g. year 1 with a positive offset)
    """
    if not value or not value.strip():
        return None
    text = value.strip()
    parsed: datetime | None
    try:
        parsed = parsedate_to_datetime(text)
    except (TypeError, ValueError, IndexError, OverflowError):
        parsed = None
    if parsed is None:
        try:
            parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    try:
        return parsed.astimezone(timezone.utc)
    except (OverflowError, ValueError):
        return None


def aggregate(batches: Iterable[Iterable[RawItem]], limit: int = MAX_WORKING_SET) -> list[RawItem]:
    """Concatenate item batches, sort newest first and truncate.

    Items without a usable date sort after every dated item. The sort is
    stable, so ties keep their arrival order.

    Args:
        batches: Per-source item sequences, in source order
        limit: Maximum number of items to keep

    Returns:
        At most ``limit`` items, most recent first
    """
    merged = [item for batch in batches for item in batch]
    ordered = sorted(merged, key=_sort_key, reverse=True)
    return ordered[: max(limit, 0)]


def _sort_key(item: RawItem) -> datetime:
    return parse_pub_date(item.pub_date) or _OLDEST
