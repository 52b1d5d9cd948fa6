"""
Ingestion module for RSS feed fetching and episode metadata normalization.
"""

from podcast_analytics.ingestion.rss_fetcher import FeedFetchError, fetch_rss_feed
from podcast_analytics.ingestion.episode_processor import process_episode_data
from podcast_analytics.ingestion.pipeline import IngestResult, run_rss_ingest

__all__ = [
    "FeedFetchError",
    "fetch_rss_feed",
    "process_episode_data",
    "IngestResult",
    "run_rss_ingest",
]
