"""
Tolerant RSS item extraction.

Feed bodies are not assumed to be well-formed XML, so instead of a parser
this module scans for ``<item>`` blocks with non-recursive patterns and
pulls fields out of each block independently. Only the plain-text and
CDATA conventions are handled; other feed dialects are not special-cased.
"""

from __future__ import annotations

import html
from itertools import islice
import re

from ..core.types import RawItem


MAX_ITEMS_PER_FEED = 5
MAX_DESCRIPTION_CHARS = 300

_ITEM_RE = re.compile(r"<item(?:\s[^>]*)?>(.*?)</item\s*>", re.IGNORECASE | re.DOTALL)
_TAG_RE = re.compile(r"<[^>]*>")
# Decoded text keeps bare "<" and ">" (e.g. "3 < 5"); only tag-shaped spans go.
_DECODED_TAG_RE = re.compile(r"</?[A-Za-z][^<>]*>")
_WS_RE = re.compile(r"\s+")


def _field_pattern(tag: str) -> re.Pattern[str]:
    # Self-closing tags (e.g. <link href="..."/>) never open a field.
    return re.compile(
        rf"<{tag}(?:\s[^>]*)?(?<!/)>\s*(?:<!\[CDATA\[)?(.*?)(?:\]\]>)?\s*</{tag}\s*>",
        re.IGNORECASE | re.DOTALL,
    )


_FIELD_RES = {
    "title": _field_pattern("title"),
    "link": _field_pattern("link"),
    "pubDate": _field_pattern("pubDate"),
    "description": _field_pattern("description"),
}


def parse_feed_items(
    xml: str,
    source_name: str,
    category: str,
    limit: int = MAX_ITEMS_PER_FEED,
) -> list[RawItem]:
    """Parse raw feed markup into at most ``limit`` RawItems.

    Args:
        xml: Raw feed body
        source_name: Name of the feed the body came from
        category: Category tag of that feed
        limit: Maximum number of item blocks to read

    Returns:
        Items in document order. Blocks missing a title or link are skipped,
        so fewer than ``limit`` items may come back. A body with no item
        blocks yields an empty list.
    """
    if not xml:
        return []

    items: list[RawItem] = []
    for match in islice(_ITEM_RE.finditer(xml), max(limit, 0)):
        block = match.group(1)
        title = clean_text(_extract_field(block, "title"))
        link = html.unescape(_extract_field(block, "link")).strip()
        if not title or not link:
            continue
        description = clean_text(_extract_field(block, "description"))
        items.append(
            RawItem(
                title=title,
                link=link,
                pub_date=_extract_field(block, "pubDate").strip(),
                description=description[:MAX_DESCRIPTION_CHARS],
                source=source_name,
                category=category,
            )
        )
    return items


def clean_text(value: str) -> str:
    """Strip markup tags, decode entities and normalize whitespace.

    Raw tags are stripped before entity decoding. Entity-escaped markup
    (``&lt;p&gt;``) is removed after decoding, but only spans shaped like
    a tag, so comparisons such as ``3 &lt; 5 and 7 &gt; 2`` survive.
    """
    text = _TAG_RE.sub("", value)
    text = html.unescape(text)
    text = _DECODED_TAG_RE.sub("", text)
    return _WS_RE.sub(" ", text).strip()


def _extract_field(block: str, name: str) -> str:
    match = _FIELD_RES[name].search(block)
    if match is None:
        return ""
    return match.group(1)
