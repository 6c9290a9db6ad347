"""
Article text extraction for scraped pages.

Methods are looked up by name in EXTRACTORS and tried in the configured
order; the first one that yields non-blank text wins:
1. trafilatura: main-content detection tuned for news articles
2. readability: Reader View style content block, flattened with bs4
3. bs4: every visible line of the page
"""

from __future__ import annotations

from typing import Callable

from bs4 import BeautifulSoup
import trafilatura
from readability import Document
from readability.readability import Unparseable

Extractor = Callable[[str], "str | None"]

# Tags that never hold article prose
_NOISE_TAGS = ["script", "style", "noscript", "template", "svg", "iframe"]


def extract_text(html: str, primary: str, fallback: list[str]) -> str | None:
    """Return the article text of `html`, or None when no method finds any.

    Args:
        html: Page markup as downloaded
        primary: Method to try first
        fallback: Methods to try after it, in order; names missing from
            EXTRACTORS and repeats of `primary` are skipped
    """
    if not html or not html.strip():
        return None

    for name in _method_order(primary, fallback):
        method = EXTRACTORS.get(name)
        if method is None:
            continue
        text = method(html)
        if text and text.strip():
            return text.strip()
    return None


def _method_order(primary: str, fallback: list[str]) -> list[str]:
    seen: list[str] = []
    for name in [primary, *fallback]:
        if name not in seen:
            seen.append(name)
    return seen


def _extract_trafilatura(html: str) -> str | None:
    return trafilatura.extract(html, include_comments=False, include_tables=True)


def _extract_readability(html: str) -> str | None:
    try:
        summary = Document(html).summary(html_partial=True)
    except Unparseable:
        return None
    return _extract_bs4(summary)


def _extract_bs4(html: str) -> str | None:
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup(_NOISE_TAGS):
        tag.decompose()
    lines = (line.strip() for line in soup.get_text(separator="\n").splitlines())
    text = "\n".join(line for line in lines if line)
    return text or None


EXTRACTORS: dict[str, Extractor] = {
    "trafilatura": _extract_trafilatura,
    "readability": _extract_readability,
    "bs4": _extract_bs4,
}
