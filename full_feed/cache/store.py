"""
In-memory article store keyed by URL.

The store is not safe for concurrent mutation on its own; it is owned and
driven exclusively by CacheActor, which serializes every access.
"""

from __future__ import annotations

from dataclasses import dataclass

from .codec import decode, encode


@dataclass
class CacheEntry:
    """One cached article.

    Attributes:
        content: Stored bytes, compressed when `compressed` is set
        compressed: Whether content is zlib-compressed
        creation: When the entry was first stored
        last_access: When the entry was last read
        last_update: When the content was last replaced
    """
    content: bytes
    compressed: bool
    creation: float
    last_access: float
    last_update: float

    @classmethod
    def create(cls, text: str, now: float) -> "CacheEntry":
        content, compressed = encode(text)
        return cls(
            content=content,
            compressed=compressed,
            creation=now,
            last_access=now,
            last_update=now,
        )

    def read(self, now: float) -> str:
        text = decode(self.content, self.compressed)
        self.last_access = now
        return text

    def replace(self, text: str, now: float) -> None:
        self.content, self.compressed = encode(text)
        self.last_update = now


class CacheStore:
    """URL to CacheEntry mapping with staleness queries.

    Attributes:
        max_entries: Optional capacity bound enforced by evict_overflow()
    """

    def __init__(self, max_entries: int | None = None):
        self.max_entries = max_entries
        self._entries: dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, url: object) -> bool:
        return url in self._entries

    def entry(self, url: str) -> CacheEntry | None:
        return self._entries.get(url)

    def get(self, url: str, now: float) -> str | None:
        entry = self._entries.get(url)
        if entry is None:
            return None
        return entry.read(now)

    def put(self, url: str, text: str, now: float) -> bool:
        """Store text for url. Returns True when a new entry was created."""
        entry = self._entries.get(url)
        if entry is None:
            self._entries[url] = CacheEntry.create(text, now)
            return True
        entry.replace(text, now)
        return False

    def evict_idle(self, older_than: float) -> list[str]:
        """Remove every entry last read before `older_than`."""
        expired = [url for url, entry in self._entries.items() if entry.last_access < older_than]
        for url in expired:
            del self._entries[url]
        return expired

    def evict_overflow(self) -> list[str]:
        """Drop least recently read entries until within max_entries."""
        if self.max_entries is None or len(self._entries) <= self.max_entries:
            return []
        excess = len(self._entries) - self.max_entries
        by_access = sorted(self._entries.items(), key=lambda item: item[1].last_access)
        removed = [url for url, _entry in by_access[:excess]]
        for url in removed:
            del self._entries[url]
        return removed

    def find_stale(self, older_than: float) -> str | None:
        """Return the first URL whose content was last updated before `older_than`."""
        for url, entry in self._entries.items():
            if entry.last_update < older_than:
                return url
        return None
