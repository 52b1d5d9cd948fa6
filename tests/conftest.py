"""
Shared test fixtures.

Provides pytest fixtures for common test resources including:
- Test configuration rooted in a temporary directory
- A small but realistic podcast RSS document
- A helper that patches the HTTP layer to serve that document
"""

from datetime import datetime
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from podcast_analytics.config import Config


FEED_URL = "https://feeds.example.com/brew-talk.rss"

SAMPLE_FEED = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0" xmlns:itunes="http://www.itunes.com/dtds/podcast-1.0.dtd">
  <channel>
    <title>Brew Talk</title>
    <link>https://example.com/brew-talk</link>
    <description>Conversations about craft beer.</description>
    <item>
      <title>Episode 12: Barrel Aging</title>
      <description><![CDATA[<p>Hello &amp; welcome</p>]]></description>
      <link>https://example.com/brew-talk/12</link>
      <guid isPermaLink="false">guid-0012</guid>
      <pubDate>Mon, 15 Jan 2024 10:00:00 GMT</pubDate>
      <itunes:duration>00:45:00</itunes:duration>
    </item>
    <item>
      <title>Episode 13: Hop Varieties</title>
      <description><![CDATA[<p>All about   <b>hops</b>.</p>
        <p>Cascade, Citra and more.</p>]]></description>
      <link>https://example.com/brew-talk/13</link>
      <guid isPermaLink="false">guid-0013</guid>
      <pubDate>Mon, 22 Jan 2024 10:00:00 GMT</pubDate>
      <itunes:duration>00:52:10</itunes:duration>
    </item>
    <item>
      <title>Bonus: Live Q&amp;A</title>
      <description>Recorded live at the taproom.</description>
      <link>https://example.com/brew-talk/bonus</link>
      <guid isPermaLink="false">guid-bonus</guid>
      <pubDate>TBD</pubDate>
    </item>
  </channel>
</rss>
"""


def make_response(content: bytes = SAMPLE_FEED) -> MagicMock:
    """Build a requests-style response serving ``content``."""
    response = MagicMock()
    response.content = content
    response.status_code = 200
    response.raise_for_status.return_value = None
    return response


@pytest.fixture
def test_config(tmp_path: Path) -> Config:
    """
    Create test configuration with temporary paths.

    Returns:
        Config: Test configuration
    """
    return Config(
        rss_url=FEED_URL,
        data_dir=tmp_path / "data",
        spotify_client_id=None,
        spotify_client_secret=None,
    )


@pytest.fixture
def mock_feed_get():
    """Patch the HTTP GET used by the RSS fetcher to serve SAMPLE_FEED."""
    with patch("podcast_analytics.ingestion.rss_fetcher.requests.get") as mock_get:
        mock_get.return_value = make_response()
        yield mock_get


@pytest.fixture
def run_time() -> datetime:
    return datetime(2024, 2, 1, 9, 30, 0)
