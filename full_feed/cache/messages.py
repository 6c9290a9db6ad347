"""Messages accepted by the cache actor."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from typing import Union


@dataclass
class Get:
    """Look up `url`; the actor resolves `reply` with the text or None."""
    url: str
    reply: asyncio.Future


@dataclass
class Set:
    """Store `content` for `url`.

    A None content reports that a background refresh of `url` failed: the
    pending marker is cleared and the previous content is kept.
    """
    url: str
    content: str | None


CacheMessage = Union[Get, Set]
