"""
Article fetching and extraction.

This package handles HTTP fetching and content extraction for the
articles linked from feed items.
"""

from .fetcher import ArticleFetcher, FetchResult, fetch_url, is_placeholder_text
from .extractor import extract_text

__all__ = [
    "ArticleFetcher",
    "FetchResult",
    "fetch_url",
    "is_placeholder_text",
    "extract_text",
]
