"""
Error types shared across the proxy.

Only feed-level errors (FeedFetchError, FeedParseError) ever reach the caller
of a request. Article-level errors are recovered inside the enrichment
pipeline and cache actor, and surface only through logging.
"""

from __future__ import annotations


class FullFeedError(Exception):
    """Base class for all errors raised by this package."""


class FetchError(FullFeedError):
    """An article could not be retrieved or yielded no usable content.

    Attributes:
        url: The article URL
        stage: Which step failed: "network", "status" or "extract"
        message: Human readable detail
        status_code: HTTP status when the failure is a non-success response
    """

    NETWORK = "network"
    STATUS = "status"
    EXTRACT = "extract"

    def __init__(self, url: str, stage: str, message: str, status_code: int | None = None):
        super().__init__(f"{stage} failure for {url}: {message}")
        self.url = url
        self.stage = stage
        self.message = message
        self.status_code = status_code


class ActorCommunicationError(FullFeedError):
    """The cache actor is closed or dropped a reply."""


class FeedFetchError(FullFeedError):
    """The upstream feed document could not be downloaded."""


class FeedParseError(FullFeedError):
    """The upstream document is not a recognizable RSS or Atom feed."""
