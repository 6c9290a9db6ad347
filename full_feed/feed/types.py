"""
Feed data types.

Feeds are normalized to an RSS-shaped model regardless of the upstream
format, so Atom sources come out of the proxy as RSS 2.0.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass
class FeedItem:
    """One feed entry.

    Attributes:
        title: Entry headline
        link: URL of the linked article, or None when the entry has no link
        description: Short summary from the upstream feed
        author: Author name or email, if given
        pub_date: RFC 822 publication (or last update) date
        guid: Upstream unique identifier
        content: Entry body; enrichment replaces it with the full article text
    """
    title: str = ""
    link: str | None = None
    description: str = ""
    author: str | None = None
    pub_date: str | None = None
    guid: str | None = None
    content: str | None = None


@dataclass
class Feed:
    """A parsed feed document."""
    title: str = ""
    link: str = ""
    description: str = ""
    items: list[FeedItem] = field(default_factory=list)

    def linked_items(self) -> list[FeedItem]:
        """Items that carry a non-empty link."""
        return [item for item in self.items if item.link]
