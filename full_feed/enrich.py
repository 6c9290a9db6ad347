"""
Feed enrichment pipeline.

For every feed item with a link, a cache-or-fetch task runs concurrently:
the cache actor is asked first and the article fetcher is only called on a
miss. All tasks are awaited regardless of individual outcomes, and results
are merged back into the feed by link. A failed item keeps its original
body; only feed-level errors (download, parse) abort a request.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging
from typing import Awaitable, Callable

import httpx

from .cache import CacheHandle
from .config import AppConfig
from .errors import ActorCommunicationError, FetchError
from .feed import Feed, fetch_feed, render_rss
from .logging_utils import get_logger, log_event


Fetcher = Callable[[str], Awaitable[str]]


@dataclass
class ItemResult:
    """Outcome of one cache-or-fetch step.

    Either content is populated (success) or error is, never both.

    Attributes:
        url: The article link
        content: Article text on success
        error: Failure detail
        stage: Failing stage ("network", "status", "extract", "task")
        from_cache: Whether the text was served by the cache
    """
    url: str
    content: str | None = None
    error: str | None = None
    stage: str | None = None
    from_cache: bool = False

    @property
    def ok(self) -> bool:
        return self.content is not None


@dataclass
class EnrichStats:
    """Counters for one enrichment run.

    Attributes:
        total: Number of distinct links looked up
        cache_hits: Number served from cache
        fetched: Successful fetches on cache miss
        failed: Lookups that left the item unenriched
    """
    total: int = 0
    cache_hits: int = 0
    fetched: int = 0
    failed: int = 0


async def cache_or_fetch(
    url: str,
    cache: CacheHandle | None,
    fetcher: Fetcher,
    logger: logging.Logger | None = None,
) -> ItemResult:
    """Read-through lookup for one article.

    A cache that cannot be reached counts as a miss. A successful fetch is
    handed to the cache without waiting for it to be stored.
    """
    logger = logger or get_logger("enrich")
    cached: str | None = None
    if cache is not None:
        try:
            cached = await cache.get(url)
        except ActorCommunicationError as exc:
            log_event(logger, "Cache unavailable", logging.DEBUG, event="cache_unavailable", url=url, error=str(exc))
    if cached is not None:
        return ItemResult(url=url, content=cached, from_cache=True)

    try:
        text = await fetcher(url)
    except FetchError as exc:
        return ItemResult(url=url, error=exc.message, stage=exc.stage)

    if cache is not None:
        try:
            cache.set(url, text)
        except ActorCommunicationError as exc:
            log_event(logger, "Cache unavailable", logging.DEBUG, event="cache_unavailable", url=url, error=str(exc))
    return ItemResult(url=url, content=text)


async def enrich(
    feed: Feed,
    cache: CacheHandle | None,
    fetcher: Fetcher,
    max_concurrency: int | None = None,
    logger: logging.Logger | None = None,
) -> tuple[Feed, EnrichStats]:
    """Replace item bodies with full article text where possible.

    Args:
        feed: Parsed feed; items are updated in place
        cache: Handle to the cache actor, or None to always fetch
        fetcher: Coroutine function returning article text or raising FetchError
        max_concurrency: Optional cap on simultaneous fetches; None spawns
            one fetch per link
        logger: Logger for per-item failures

    Returns:
        Tuple of (the same feed, enrichment statistics)
    """
    logger = logger or get_logger("enrich")
    urls = list(dict.fromkeys(item.link for item in feed.linked_items()))
    stats = EnrichStats(total=len(urls))
    if not urls:
        return feed, stats

    if max_concurrency:
        fetcher = _limit(fetcher, max_concurrency)

    tasks = [asyncio.create_task(cache_or_fetch(url, cache, fetcher, logger)) for url in urls]
    outcomes = await asyncio.gather(*tasks, return_exceptions=True)

    contents: dict[str, str] = {}
    for url, outcome in zip(urls, outcomes):
        if isinstance(outcome, BaseException):
            outcome = ItemResult(url=url, error=f"{type(outcome).__name__}: {outcome}", stage="task")
        if not outcome.ok:
            stats.failed += 1
            log_event(
                logger,
                f"Fetch html failed: {url}",
                logging.WARNING,
                event="enrich_failed",
                url=url,
                stage=outcome.stage,
                error=outcome.error,
            )
            continue
        if outcome.from_cache:
            stats.cache_hits += 1
        else:
            stats.fetched += 1
        contents[url] = outcome.content

    for item in feed.items:
        if item.link in contents:
            item.content = contents[item.link]

    return feed, stats


async def qualify_feed(
    url: str,
    client: httpx.AsyncClient,
    cache: CacheHandle | None,
    fetcher: Fetcher,
    cfg: AppConfig | None = None,
    logger: logging.Logger | None = None,
) -> str:
    """Fetch a feed, enrich its items and return it as RSS 2.0.

    Raises:
        FeedFetchError: If the feed cannot be downloaded
        FeedParseError: If the download is not a feed
    """
    cfg = cfg or AppConfig()
    logger = logger or get_logger("enrich")
    log_event(logger, "Feed start", logging.DEBUG, event="feed_start", url=url)
    feed = await fetch_feed(client, url, cfg.fetch)
    feed, stats = await enrich(feed, cache, fetcher, cfg.fetch.max_concurrency, logger)
    log_event(
        logger,
        f"Feed enriched: total={stats.total}, fetched={stats.fetched}, "
        f"cache_hits={stats.cache_hits}, failed={stats.failed}",
        event="feed_enriched",
        url=url,
        total=stats.total,
        fetched=stats.fetched,
        cache_hits=stats.cache_hits,
        failed=stats.failed,
    )
    return render_rss(feed)


def _limit(fetcher: Fetcher, max_concurrency: int) -> Fetcher:
    semaphore = asyncio.Semaphore(max_concurrency)

    async def limited(url: str) -> str:
        async with semaphore:
            return await fetcher(url)

    return limited
