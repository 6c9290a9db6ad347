"""
RSS/Atom parsing via feedparser.

Any format feedparser recognizes is accepted. Entries are mapped onto
FeedItem: the first link becomes the item link, the summary becomes the
description, the first content block becomes the body, and an update
timestamp takes precedence over the publication timestamp.
"""

from __future__ import annotations

import calendar
from datetime import datetime, timezone
from email.utils import format_datetime
import time
from typing import Any

import feedparser

from ..errors import FeedParseError
from .types import Feed, FeedItem


def parse_feed(data: bytes | str) -> Feed:
    """Parse a feed document into a Feed.

    Args:
        data: Raw document bytes (preferred, so feedparser can sniff the
            encoding) or text

    Returns:
        The parsed Feed

    Raises:
        FeedParseError: If the document is not a recognizable feed
    """
    parsed = feedparser.parse(data)
    if not parsed.get("version") and not parsed.entries:
        reason = parsed.get("bozo_exception")
        detail = f": {reason}" if reason else ""
        raise FeedParseError(f"Failed to parse feed{detail}")

    meta = parsed.feed
    return Feed(
        title=meta.get("title", ""),
        link=meta.get("link", ""),
        description=meta.get("subtitle", "") or meta.get("description", ""),
        items=[_to_item(entry) for entry in parsed.entries],
    )


def _to_item(entry: Any) -> FeedItem:
    content = None
    blocks = entry.get("content") or []
    if blocks:
        content = blocks[0].get("value")

    return FeedItem(
        title=entry.get("title", ""),
        link=_first_link(entry),
        description=entry.get("summary", ""),
        author=_author(entry),
        pub_date=_pub_date(entry),
        guid=entry.get("id"),
        content=content,
    )


def _first_link(entry: Any) -> str | None:
    links = entry.get("links") or []
    for link in links:
        href = link.get("href")
        if href:
            return href
    return entry.get("link") or None


def _author(entry: Any) -> str | None:
    detail = entry.get("author_detail") or {}
    return detail.get("email") or entry.get("author") or None


def _pub_date(entry: Any) -> str | None:
    # Membership checks avoid feedparser's updated -> published alias
    for key in ("updated_parsed", "published_parsed"):
        if key in entry and entry[key]:
            return _format_rfc822(entry[key])
    for key in ("updated", "published"):
        if key in entry and entry[key]:
            return entry[key]
    return None


def _format_rfc822(stamp: time.struct_time) -> str:
    moment = datetime.fromtimestamp(calendar.timegm(stamp), tz=timezone.utc)
    return format_datetime(moment)
