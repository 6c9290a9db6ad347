"""RSS 2.0 serialization."""

from __future__ import annotations

import xml.etree.ElementTree as ET

from .types import Feed, FeedItem


CONTENT_NS = "http://purl.org/rss/1.0/modules/content/"

ET.register_namespace("content", CONTENT_NS)


def render_rss(feed: Feed) -> str:
    """Serialize a Feed as an RSS 2.0 document.

    Output depends only on the Feed's fields, so two feeds that differ only
    in item bodies render identically apart from their content:encoded
    elements.
    """
    rss = ET.Element("rss", {"version": "2.0"})
    channel = ET.SubElement(rss, "channel")
    _text(channel, "title", feed.title)
    _text(channel, "link", feed.link)
    _text(channel, "description", feed.description)
    for item in feed.items:
        channel.append(_render_item(item))
    body = ET.tostring(rss, encoding="unicode")
    return f'<?xml version="1.0" encoding="utf-8"?>\n{body}'


def _render_item(item: FeedItem) -> ET.Element:
    node = ET.Element("item")
    _text(node, "title", item.title)
    if item.link:
        _text(node, "link", item.link)
    _text(node, "description", item.description)
    if item.author:
        _text(node, "author", item.author)
    if item.pub_date:
        _text(node, "pubDate", item.pub_date)
    if item.guid:
        guid = _text(node, "guid", item.guid)
        if item.guid != item.link:
            guid.set("isPermaLink", "false")
    if item.content:
        _text(node, f"{{{CONTENT_NS}}}encoded", item.content)
    return node


def _text(parent: ET.Element, tag: str, value: str | None) -> ET.Element:
    child = ET.SubElement(parent, tag)
    child.text = value or ""
    return child
