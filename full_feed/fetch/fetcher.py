"""
Article retrieval: HTTP fetch with retries followed by text extraction.

fetch_url() performs the raw GET and reports failures in its FetchResult
rather than raising. ArticleFetcher combines it with the extraction chain
and raises a FetchError tagged with the stage that failed, which is the
contract the cache actor and the enrichment pipeline rely on.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
import logging

import httpx

from ..config import ExtractConfig, FetchConfig
from ..errors import FetchError
from ..logging_utils import get_logger, log_event
from .extractor import extract_text


@dataclass
class FetchResult:
    """Result of an HTTP fetch operation.

    Either text will be populated (success) or error will be populated (failure),
    but never both. status_code may be None for network-level failures.

    Attributes:
        url: The URL that was fetched
        status_code: HTTP status code, or None if request failed before getting response
        text: The response body text, or None on error
        error: Error message if fetch failed, None on success
    """
    url: str
    status_code: int | None
    text: str | None
    error: str | None

    @property
    def ok(self) -> bool:
        return self.error is None and self.status_code is not None and 200 <= self.status_code < 300


async def fetch_url(
    client: httpx.AsyncClient,
    url: str,
    timeout: float,
    retries: int,
    user_agent: str | None = None,
) -> FetchResult:
    """Fetch a URL with retry logic.

    Network errors are retried with linear backoff. A response with a
    non-success status is returned as-is (with error set) and not retried,
    except for 5xx responses.

    Args:
        client: Shared async HTTP client
        url: The URL to fetch
        timeout: Request timeout in seconds
        retries: Number of retry attempts after initial failure
        user_agent: Optional User-Agent header override

    Returns:
        FetchResult with text on success or error message on failure
    """
    headers = {"User-Agent": user_agent} if user_agent else None
    last_error: str | None = None
    last_status: int | None = None

    for attempt in range(retries + 1):
        try:
            resp = await client.get(url, headers=headers, timeout=timeout, follow_redirects=True)
        except httpx.HTTPError as exc:
            last_error = f"{type(exc).__name__}: {exc}"
            last_status = None
        else:
            if resp.is_success:
                return FetchResult(url=url, status_code=resp.status_code, text=resp.text, error=None)
            last_error = f"HTTP {resp.status_code}"
            last_status = resp.status_code
            if resp.status_code < 500:
                break
        if attempt < retries:
            # Linear backoff: 0.5s, 1.0s, 1.5s...
            await asyncio.sleep(0.5 * (attempt + 1))

    return FetchResult(url=url, status_code=last_status, text=None, error=last_error)


class ArticleFetcher:
    """Turns an article URL into extracted text.

    Instances are stateless apart from the shared client and can be awaited
    concurrently from any number of tasks.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        fetch_cfg: FetchConfig | None = None,
        extract_cfg: ExtractConfig | None = None,
        logger: logging.Logger | None = None,
    ):
        self.client = client
        self.fetch_cfg = fetch_cfg or FetchConfig()
        self.extract_cfg = extract_cfg or ExtractConfig()
        self._logger = logger or get_logger("fetch")

    async def __call__(self, url: str) -> str:
        return await self.fetch(url)

    async def fetch(self, url: str) -> str:
        """Fetch and extract one article.

        Raises:
            FetchError: stage "network" or "status" when retrieval fails,
                "extract" when the page yields no usable text
        """
        log_event(self._logger, "Fetch start", logging.DEBUG, event="fetch_start", url=url)
        result = await fetch_url(
            self.client,
            url,
            timeout=self.fetch_cfg.timeout_seconds,
            retries=self.fetch_cfg.retries,
            user_agent=self.fetch_cfg.user_agent,
        )
        if result.text is None:
            stage = FetchError.NETWORK if result.status_code is None else FetchError.STATUS
            raise FetchError(url, stage, result.error or "empty response", status_code=result.status_code)

        try:
            text = await asyncio.to_thread(
                extract_text, result.text, self.extract_cfg.primary, self.extract_cfg.fallback
            )
        except Exception as exc:  # noqa: BLE001
            raise FetchError(url, FetchError.EXTRACT, f"{type(exc).__name__}: {exc}") from exc

        if not text:
            raise FetchError(url, FetchError.EXTRACT, "Empty extraction result", status_code=result.status_code)
        if is_placeholder_text(text):
            raise FetchError(url, FetchError.EXTRACT, "Placeholder page", status_code=result.status_code)

        log_event(
            self._logger,
            "Fetch complete",
            logging.DEBUG,
            event="fetch_complete",
            url=url,
            status_code=result.status_code,
            chars=len(text),
        )
        return text


def is_placeholder_text(text: str) -> bool:
    """Detect JavaScript-required notices and bot challenge pages.

    Legitimate pages served behind Cloudflare mention a ray id too, so that
    marker only counts when the page is short.
    """
    lowered = text.lower()
    if "javascript is disabled" in lowered or "please enable javascript" in lowered:
        return True
    if "enable javascript to continue" in lowered:
        return True
    if "verifying you are human" in lowered:
        return True
    if "checking your browser before accessing" in lowered:
        return True
    if "ray id:" in lowered and len(text.strip()) < 1000:
        return True
    return False
