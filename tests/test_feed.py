"""Tests for feed parsing, RSS rendering and upstream download."""

from __future__ import annotations

import asyncio

import httpx
import pytest

from full_feed.errors import FeedFetchError, FeedParseError
from full_feed.feed import Feed, FeedItem, fetch_feed, parse_feed, render_rss


RSS = b"""<?xml version="1.0" encoding="utf-8"?>
<rss version="2.0" xmlns:content="http://purl.org/rss/1.0/modules/content/">
<channel>
  <title>Example News</title>
  <link>https://news.example.com/</link>
  <description>All the news</description>
  <item>
    <title>First story</title>
    <link>https://news.example.com/first</link>
    <description>First summary</description>
    <guid isPermaLink="false">story-1</guid>
    <pubDate>Mon, 06 Jan 2025 08:30:00 GMT</pubDate>
    <content:encoded>Inline body</content:encoded>
  </item>
  <item>
    <title>No link here</title>
    <description>Orphan summary</description>
  </item>
</channel>
</rss>"""

ATOM = b"""<?xml version="1.0" encoding="utf-8"?>
<feed xmlns="http://www.w3.org/2005/Atom">
  <title>Atom Example</title>
  <link href="https://atom.example.com/"/>
  <subtitle>Atom subtitle</subtitle>
  <id>urn:example:feed</id>
  <updated>2025-01-07T10:00:00Z</updated>
  <entry>
    <title>Atom entry</title>
    <link href="https://atom.example.com/entry"/>
    <id>urn:example:entry</id>
    <published>2025-01-06T10:00:00Z</published>
    <updated>2025-01-07T10:00:00Z</updated>
    <author><name>Jane Writer</name></author>
    <summary>Atom summary</summary>
    <content type="text">Atom body</content>
  </entry>
</feed>"""


def test_parse_rss():
    feed = parse_feed(RSS)

    assert feed.title == "Example News"
    assert feed.link == "https://news.example.com/"
    assert feed.description == "All the news"
    assert len(feed.items) == 2

    first = feed.items[0]
    assert first.title == "First story"
    assert first.link == "https://news.example.com/first"
    assert first.description == "First summary"
    assert first.guid == "story-1"
    assert first.content == "Inline body"
    assert first.pub_date == "Mon, 06 Jan 2025 08:30:00 +0000"

    assert feed.items[1].link is None
    assert feed.linked_items() == [first]


def test_parse_atom_maps_to_rss_fields():
    feed = parse_feed(ATOM)

    assert feed.title == "Atom Example"
    assert feed.description == "Atom subtitle"
    entry = feed.items[0]
    assert entry.link == "https://atom.example.com/entry"
    assert entry.description == "Atom summary"
    assert entry.content == "Atom body"
    assert entry.author == "Jane Writer"
    # The update timestamp wins over the publication timestamp
    assert entry.pub_date == "Tue, 07 Jan 2025 10:00:00 +0000"


@pytest.mark.parametrize("document", [b"", b"plain text", b"<html><body><p>hi</p></body></html>"])
def test_parse_rejects_non_feeds(document):
    with pytest.raises(FeedParseError):
        parse_feed(document)


def test_render_rss_round_trips_through_parser():
    feed = Feed(
        title="Rendered",
        link="https://example.com/",
        description="Rendered feed",
        items=[
            FeedItem(
                title="Item with more",
                link="https://example.com/1",
                description="summary <b>bold</b>",
                guid="https://example.com/1",
                pub_date="Mon, 06 Jan 2025 08:30:00 +0000",
                content="Full article text",
            ),
            FeedItem(title="Bare", description="no link"),
        ],
    )

    rss = render_rss(feed)
    parsed = parse_feed(rss.encode("utf-8"))

    assert rss.startswith('<?xml version="1.0" encoding="utf-8"?>')
    assert "<content:encoded>Full article text</content:encoded>" in rss
    assert parsed.title == "Rendered"
    assert parsed.items[0].title == "Item with more"
    assert parsed.items[0].content == "Full article text"
    assert parsed.items[0].pub_date == "Mon, 06 Jan 2025 08:30:00 +0000"
    assert parsed.items[1].link is None


def test_render_changes_only_bodies_after_enrichment():
    before = parse_feed(RSS)
    baseline = render_rss(before)
    before.items[0].content = "Replaced body"
    after = render_rss(before)

    assert baseline.replace("Inline body", "Replaced body") == after


def test_fetch_feed_parses_response():
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url == "https://news.example.com/rss"
        return httpx.Response(200, content=RSS)

    async def scenario():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await fetch_feed(client, "https://news.example.com/rss")

    assert asyncio.run(scenario()).title == "Example News"


def _not_found(request: httpx.Request) -> httpx.Response:
    return httpx.Response(404)


def _refused(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("refused", request=request)


@pytest.mark.parametrize("handler", [_not_found, _refused], ids=["not-found", "connect-error"])
def test_fetch_feed_errors(handler):
    async def scenario():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            await fetch_feed(client, "https://news.example.com/rss")

    with pytest.raises(FeedFetchError):
        asyncio.run(scenario())
