"""
RSS feed retrieval.

Downloads a podcast RSS feed over HTTP and parses it with feedparser,
returning the raw feed entries. Every transport or parse problem is
surfaced as a single ``FeedFetchError`` so the caller can abort the run.
"""

import logging
from typing import Any, List, Optional

import feedparser
import requests

logger = logging.getLogger(__name__)


class FeedFetchError(Exception):
    """Raised when an RSS feed cannot be downloaded or parsed."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"Error fetching RSS feed {url}: {reason}")


def fetch_rss_feed(
    url: str,
    timeout: float = 30.0,
    user_agent: Optional[str] = None,
) -> List[Any]:
    """
    Fetch an RSS feed and return its entries.

    Args:
        url: URL of the RSS feed
        timeout: HTTP timeout in seconds
        user_agent: Optional User-Agent header value

    Returns:
        List of feedparser entry objects, in feed order

    Raises:
        FeedFetchError: If the request fails or the body is not a feed

    Example:
        >>> entries = fetch_rss_feed("https://example.com/podcast/rss")
        >>> print(entries[0].title)
    """
    if not url:
        raise FeedFetchError(url, "no feed URL configured")

    headers = {"User-Agent": user_agent} if user_agent else {}

    logger.info("Fetching RSS feed from: %s", url)
    try:
        response = requests.get(url, timeout=timeout, headers=headers)
        response.raise_for_status()
    except requests.RequestException as exc:
        raise FeedFetchError(url, str(exc)) from exc

    feed = feedparser.parse(response.content)

    if feed.bozo and not feed.entries:
        raise FeedFetchError(url, f"failed to parse feed: {feed.bozo_exception}")
    if feed.bozo:
        logger.warning("Feed parsing encountered errors: %s", feed.bozo_exception)

    logger.info("Successfully fetched %d episodes", len(feed.entries))
    return list(feed.entries)

