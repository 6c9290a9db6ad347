"""
HTTP front end.

Clients request `/<base64 feed url>`; the response is the enriched feed as
RSS 2.0. One httpx client, one ArticleFetcher and one CacheActor are shared
by every request for the lifetime of the application.
"""

from __future__ import annotations

import base64
import binascii
from contextlib import asynccontextmanager
import logging
from typing import AsyncIterator

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import PlainTextResponse, Response
import httpx

from .cache import CacheActor
from .config import AppConfig
from .enrich import qualify_feed
from .errors import FeedFetchError, FeedParseError
from .fetch import ArticleFetcher
from .logging_utils import get_logger, log_event


RSS_MEDIA_TYPE = "application/rss+xml; charset=utf-8"

logger = get_logger("server")
router = APIRouter()


class PathDecodeError(ValueError):
    """The request path does not encode a usable feed URL."""


def decode_feed_url(path: str) -> str:
    """Decode a base64 request path into an absolute http(s) URL.

    Raises:
        PathDecodeError: With the client-facing reason
    """
    try:
        raw = base64.b64decode(path[1:] if path.startswith("/") else path, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise PathDecodeError("Failed to decode Base64 path") from exc
    try:
        url = raw.decode("utf-8")
    except UnicodeDecodeError as exc:
        raise PathDecodeError("Invalid UTF-8 sequence in Base64 decoded URL") from exc
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as exc:
        raise PathDecodeError("Invalid URL in Base64 decoded path") from exc
    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise PathDecodeError("Invalid URL in Base64 decoded path")
    return url


def create_app(
    cfg: AppConfig | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Build the application.

    Args:
        cfg: Application configuration
        transport: Optional httpx transport for all outbound requests
    """
    cfg = cfg or AppConfig()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        client = httpx.AsyncClient(transport=transport, trust_env=cfg.fetch.trust_env)
        fetcher = ArticleFetcher(client, cfg.fetch, cfg.extract)
        actor = CacheActor(fetcher, cfg.cache)
        actor.start()
        app.state.cfg = cfg
        app.state.client = client
        app.state.fetcher = fetcher
        app.state.actor = actor
        log_event(logger, "Proxy started", event="server_start")
        try:
            yield
        finally:
            actor.close()
            await actor.wait_closed()
            await client.aclose()
            log_event(logger, "Proxy stopped", event="server_stop")

    app = FastAPI(
        title="full-feed",
        lifespan=lifespan,
        docs_url=None,
        redoc_url=None,
        openapi_url=None,
    )
    app.include_router(router)
    return app


@router.get("/{encoded:path}")
async def qualify(encoded: str, request: Request) -> Response:
    try:
        url = decode_feed_url(request.url.path)
    except PathDecodeError as exc:
        log_event(logger, str(exc), logging.INFO, event="bad_request", path=encoded)
        return PlainTextResponse(str(exc), status_code=400)

    state = request.app.state
    log_event(logger, f"handling request for {url}", event="request", url=url)
    try:
        body = await qualify_feed(url, state.client, state.actor.handle(), state.fetcher, state.cfg)
    except (FeedFetchError, FeedParseError) as exc:
        log_event(logger, "Could not qualify RSS", logging.ERROR, event="request_failed", url=url, error=str(exc))
        return PlainTextResponse(f"Could not qualify RSS: {exc}", status_code=500)
    return Response(content=body, media_type=RSS_MEDIA_TYPE)
