"""
Full Feed - RSS/Atom proxy that inlines full article text.

The proxy fetches a feed, scrapes the article behind every item link and
returns the feed as RSS 2.0 with the article text as each item's body.
Scraped articles are held in a compressed in-memory cache that evicts idle
entries and refreshes stale ones in the background.

Main entry point is the CLI via `full-feed serve`.

Example:
    $ full-feed serve --port 8080
    $ curl http://127.0.0.1:8080/$(printf 'https://example.com/rss' | base64)
"""

__all__ = ["__version__", "CacheActor", "CacheHandle", "enrich", "qualify_feed"]
__version__ = "0.1.0"

from .cache import CacheActor, CacheHandle
from .enrich import enrich, qualify_feed
