"""Tests for the HTTP front end."""

from __future__ import annotations

import base64

from fastapi.testclient import TestClient
import httpx
import pytest

from full_feed.config import AppConfig, ExtractConfig, FetchConfig
from full_feed.feed import parse_feed
from full_feed.server import PathDecodeError, create_app, decode_feed_url


FEED_URL = "https://news.example.com/rss"

RSS = b"""<?xml version="1.0"?>
<rss version="2.0"><channel>
<title>Upstream</title><link>https://news.example.com</link><description>News</description>
<item><title>Good</title><link>https://news.example.com/good</link><description>teaser</description></item>
<item><title>Broken</title><link>https://news.example.com/broken</link><description>kept teaser</description></item>
</channel></rss>"""

ARTICLE = "<html><body><p>Every word of the good article.</p></body></html>"


def _encode(url: str) -> str:
    return base64.b64encode(url.encode("utf-8")).decode("ascii")


ARTICLE_HITS: list[str] = []


def _upstream(request: httpx.Request) -> httpx.Response:
    url = str(request.url)
    if url == FEED_URL:
        return httpx.Response(200, content=RSS)
    if url == "https://news.example.com/good":
        ARTICLE_HITS.append(url)
        return httpx.Response(200, text=ARTICLE)
    if url == "https://news.example.com/not-a-feed":
        return httpx.Response(200, text="<html>nope</html>")
    return httpx.Response(500)


@pytest.fixture
def client():
    cfg = AppConfig(
        fetch=FetchConfig(retries=0),
        extract=ExtractConfig(primary="bs4", fallback=[]),
    )
    ARTICLE_HITS.clear()
    app = create_app(cfg, transport=httpx.MockTransport(_upstream))
    with TestClient(app) as test_client:
        yield test_client


def test_enriched_feed_is_returned(client):
    resp = client.get(f"/{_encode(FEED_URL)}")

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("application/rss+xml")
    items = parse_feed(resp.content).items
    assert items[0].content == "Every word of the good article."
    assert items[1].content is None
    assert items[1].description == "kept teaser"


def test_second_request_is_served_from_cache(client):
    first = client.get(f"/{_encode(FEED_URL)}")
    second = client.get(f"/{_encode(FEED_URL)}")

    assert first.text == second.text
    assert ARTICLE_HITS == ["https://news.example.com/good"]
    assert "https://news.example.com/good" in client.app.state.actor.store


def test_upstream_failure_is_500(client):
    resp = client.get(f"/{_encode('https://news.example.com/missing')}")

    assert resp.status_code == 500
    assert resp.text.startswith("Could not qualify RSS:")


def test_non_feed_upstream_is_500(client):
    resp = client.get(f"/{_encode('https://news.example.com/not-a-feed')}")

    assert resp.status_code == 500
    assert "Failed to parse feed" in resp.text


@pytest.mark.parametrize(
    ("path", "message"),
    [
        ("not*base64", "Failed to decode Base64 path"),
        (base64.b64encode(b"\xff\xfe\xfd").decode("ascii"), "Invalid UTF-8 sequence in Base64 decoded URL"),
        (_encode("not a url"), "Invalid URL in Base64 decoded path"),
        (_encode("ftp://files.example.com/feed"), "Invalid URL in Base64 decoded path"),
    ],
)
def test_bad_paths_are_400(client, path, message):
    resp = client.get(f"/{path}")

    assert resp.status_code == 400
    assert resp.text == message


def test_decode_feed_url_accepts_leading_slash():
    assert decode_feed_url("/" + _encode(FEED_URL)) == FEED_URL


def test_decode_feed_url_rejects_empty_path():
    with pytest.raises(PathDecodeError):
        decode_feed_url("")


def test_decode_feed_url_strips_only_one_slash():
    encoded = base64.b64encode(b"\xff\xfe\xfd").decode("ascii")
    assert encoded.startswith("/")

    with pytest.raises(PathDecodeError, match="Invalid UTF-8 sequence"):
        decode_feed_url("/" + encoded)


@pytest.mark.parametrize("path", ["/docs", "/redoc", "/openapi.json"])
def test_framework_pages_are_not_served(client, path):
    resp = client.get(path)

    assert resp.status_code == 400
