"""
Single-owner article cache.

CacheActor is the only code that reads or writes the CacheStore and the
pending-refresh marker. Everything else talks to it through CacheHandle,
which enqueues Get/Set messages on the actor's inbox. The actor processes
one message at a time and, on a fixed cadence, runs a maintenance pass that
evicts idle entries and schedules at most one background refresh.

Network work never runs on the actor's own task: refreshes are spawned as
separate tasks that report back by sending Set messages into the inbox.
"""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Awaitable, Callable

from ..config import CacheConfig
from ..errors import ActorCommunicationError
from ..logging_utils import get_logger, log_event
from .messages import CacheMessage, Get, Set
from .store import CacheStore


Fetcher = Callable[[str], Awaitable[str]]

_CLOSE = object()


class CacheActor:
    """Owns the article cache and services Get/Set messages.

    Args:
        fetcher: Coroutine function used for background refreshes. It receives
            the URL and returns article text, raising on failure.
        cfg: Cache thresholds and maintenance cadence
        clock: Wall-clock source for entry timestamps (seconds)
        logger: Logger for cache events

    Attributes:
        store: The owned CacheStore
        pending_refresh: URL of the in-flight background refresh, if any
    """

    def __init__(
        self,
        fetcher: Fetcher,
        cfg: CacheConfig | None = None,
        clock: Callable[[], float] = time.time,
        logger: logging.Logger | None = None,
    ):
        self.cfg = cfg or CacheConfig()
        self.store = CacheStore(max_entries=self.cfg.max_entries)
        self.pending_refresh: str | None = None
        self._fetcher = fetcher
        self._clock = clock
        self._logger = logger or get_logger("cache")
        self._inbox: asyncio.Queue = asyncio.Queue()
        self._closed = False
        self._task: asyncio.Task | None = None
        self._refresh_tasks: set[asyncio.Task] = set()

    @property
    def closed(self) -> bool:
        return self._closed

    def handle(self) -> "CacheHandle":
        return CacheHandle(self)

    def send(self, message: CacheMessage) -> None:
        """Enqueue a message. Raises ActorCommunicationError once closed."""
        if self._closed:
            raise ActorCommunicationError("cache actor is closed")
        self._inbox.put_nowait(message)

    def start(self) -> asyncio.Task:
        if self._task is None:
            self._task = asyncio.create_task(self.run(), name="full-feed-cache")
        return self._task

    def close(self) -> None:
        """Stop accepting messages; the loop exits after draining earlier ones."""
        if self._closed:
            return
        self._closed = True
        self._inbox.put_nowait(_CLOSE)

    async def wait_closed(self) -> None:
        if self._task is not None:
            await self._task
        tasks = list(self._refresh_tasks)
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)

    async def run(self) -> None:
        loop = asyncio.get_running_loop()
        interval = self.cfg.maintenance_interval_seconds
        next_tick = loop.time() + interval
        try:
            while True:
                if loop.time() >= next_tick:
                    self.run_maintenance()
                    next_tick = loop.time() + interval
                try:
                    message = self._inbox.get_nowait()
                except asyncio.QueueEmpty:
                    try:
                        message = await asyncio.wait_for(
                            self._inbox.get(), max(0.0, next_tick - loop.time())
                        )
                    except asyncio.TimeoutError:
                        continue
                if message is _CLOSE:
                    break
                self.process(message)
        finally:
            self._closed = True
            self._fail_unanswered()
            log_event(self._logger, "Cache actor stopped", logging.DEBUG, event="cache_stopped")

    def process(self, message: CacheMessage) -> None:
        if isinstance(message, Get):
            self._handle_get(message)
        elif isinstance(message, Set):
            self._handle_set(message)
        else:
            self._logger.warning("Ignoring unknown cache message: %r", message)

    def run_maintenance(self) -> None:
        """Evict idle entries, then schedule one refresh if none is in flight."""
        now = self._clock()
        for url in self.store.evict_idle(now - self.cfg.eviction_seconds):
            log_event(self._logger, f"evicted: {url}", event="cache_evicted", url=url, reason="idle")
        for url in self.store.evict_overflow():
            log_event(self._logger, f"evicted: {url}", event="cache_evicted", url=url, reason="capacity")

        if self.pending_refresh is not None:
            return
        url = self.store.find_stale(now - self.cfg.refresh_seconds)
        if url is None:
            return
        self.pending_refresh = url
        log_event(self._logger, f"refreshing: {url}", logging.DEBUG, event="cache_refresh_start", url=url)
        task = asyncio.create_task(self._refresh(url))
        self._refresh_tasks.add(task)
        task.add_done_callback(self._refresh_tasks.discard)

    def _handle_get(self, message: Get) -> None:
        text = self.store.get(message.url, self._clock())
        # The caller may have stopped waiting (timeout, cancellation)
        if not message.reply.done():
            message.reply.set_result(text)

    def _handle_set(self, message: Set) -> None:
        url = message.url
        if message.content is None:
            if self.pending_refresh == url:
                self.pending_refresh = None
                log_event(
                    self._logger,
                    f"refresh failed: {url}",
                    logging.WARNING,
                    event="cache_refresh_failed",
                    url=url,
                )
            return

        new_entry = self.store.put(url, message.content, self._clock())
        if self.pending_refresh == url:
            self.pending_refresh = None
        log_event(self._logger, f"cached: {url}", event="cache_set", url=url, new_entry=new_entry)

    async def _refresh(self, url: str) -> None:
        try:
            text: str | None = await self._fetcher(url)
        except Exception as exc:  # noqa: BLE001
            log_event(
                self._logger,
                "Background refresh fetch failed",
                logging.DEBUG,
                event="cache_refresh_error",
                url=url,
                error=f"{type(exc).__name__}: {exc}",
            )
            text = None
        try:
            self.send(Set(url, text))
        except ActorCommunicationError:
            log_event(self._logger, "Refresh result dropped", logging.DEBUG, event="cache_refresh_dropped", url=url)

    def _fail_unanswered(self) -> None:
        while True:
            try:
                message = self._inbox.get_nowait()
            except asyncio.QueueEmpty:
                return
            if isinstance(message, Get) and not message.reply.done():
                message.reply.set_exception(ActorCommunicationError("cache actor stopped"))


class CacheHandle:
    """Client side of the cache protocol, safe to share between tasks."""

    def __init__(self, actor: CacheActor):
        self._actor = actor

    async def get(self, url: str) -> str | None:
        reply = asyncio.get_running_loop().create_future()
        self._actor.send(Get(url, reply))
        return await reply

    def set(self, url: str, content: str | None) -> None:
        self._actor.send(Set(url, content))
