"""
Feed boundary: download, parse and re-serialize feed documents.
"""

from .loader import fetch_feed
from .parser import parse_feed
from .types import Feed, FeedItem
from .writer import render_rss

__all__ = ["Feed", "FeedItem", "fetch_feed", "parse_feed", "render_rss"]
