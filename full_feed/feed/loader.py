from __future__ import annotations

import httpx

from ..config import FetchConfig
from ..errors import FeedFetchError
from .parser import parse_feed
from .types import Feed


async def fetch_feed(client: httpx.AsyncClient, url: str, cfg: FetchConfig | None = None) -> Feed:
    """Download and parse the upstream feed.

    Raises:
        FeedFetchError: On network failure or a non-success response
        FeedParseError: If the body is not a feed
    """
    cfg = cfg or FetchConfig()
    try:
        resp = await client.get(
            url,
            headers={"User-Agent": cfg.user_agent},
            timeout=cfg.timeout_seconds,
            follow_redirects=True,
        )
        resp.raise_for_status()
    except httpx.HTTPStatusError as exc:
        raise FeedFetchError(f"HTTP {exc.response.status_code} for {url}") from exc
    except httpx.HTTPError as exc:
        raise FeedFetchError(f"{type(exc).__name__}: {exc}") from exc
    return parse_feed(resp.content)
