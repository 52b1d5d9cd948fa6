"""
RSS ingestion run: fetch, normalize, persist.

Runs once per invocation and reports the outcome as an ``IngestResult``.
Intended to be called by the CLI or by an external scheduler (cron,
GitHub Actions, etc.) that only looks at the exit code and the log.

Example:
    >>> from podcast_analytics.ingestion.pipeline import run_rss_ingest
    >>> result = run_rss_ingest(config)
    >>> if not result.success:
    ...     print(result.errors)
"""

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from podcast_analytics.config import Config, get_config
from podcast_analytics.ingestion.episode_processor import process_episode_data
from podcast_analytics.ingestion.rss_fetcher import FeedFetchError, fetch_rss_feed
from podcast_analytics.storage import backup_path_for, save_episode_data, summarize_episode_data

logger = logging.getLogger(__name__)


@dataclass
class IngestResult:
    """
    Outcome of one RSS ingestion run.

    Attributes:
        success: True if the episode file was written
        rss_url: Feed that was fetched
        output_file: Destination CSV path
        backup_file: Backup of the previous output, if one was made
        episode_count: Number of rows written
        fetched_at: ISO-8601 timestamp of the fetch
        summary: Summary statistics of the written table
        errors: Human-readable error messages
    """

    success: bool = False
    rss_url: str = ""
    output_file: str = ""
    backup_file: Optional[str] = None
    episode_count: int = 0
    fetched_at: str = ""
    summary: Dict[str, Any] = field(default_factory=dict)
    errors: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "success": self.success,
            "rss_url": self.rss_url,
            "output_file": self.output_file,
            "backup_file": self.backup_file,
            "episode_count": self.episode_count,
            "fetched_at": self.fetched_at,
            "summary": self.summary,
            "errors": self.errors,
        }

    def to_json(self, indent: int = 2) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)


def run_rss_ingest(
    config: Optional[Config] = None,
    output_file: Optional[Path] = None,
    now: Optional[datetime] = None,
) -> IngestResult:
    """
    Fetch the configured feed and write the episode metadata CSV.

    A fetch error leaves any existing output untouched. A save error
    may leave a backup behind but never a partial success.

    Args:
        config: Application Config object (optional, uses default if None)
        output_file: Override for the destination CSV
        now: Run timestamp for fetch stamp and backup name (default: now)

    Returns:
        IngestResult describing the run
    """
    if config is None:
        config = get_config()

    now = now or datetime.now()
    output_file = Path(output_file) if output_file else config.episodes_file

    result = IngestResult(
        rss_url=config.rss_url,
        output_file=str(output_file),
        fetched_at=now.isoformat(timespec="seconds"),
    )

    logger.info("Starting RSS feed processing...")
    logger.info("Timestamp: %s", now.strftime("%Y-%m-%d %H:%M:%S"))

    try:
        entries = fetch_rss_feed(
            config.rss_url,
            timeout=config.request_timeout,
            user_agent=config.user_agent,
        )
    except FeedFetchError as exc:
        logger.error("%s", exc)
        result.errors.append(str(exc))
        return result

    data = process_episode_data(entries, fetched_at=now)
    if data is None:
        result.errors.append("Feed contained no episodes to process")
        return result

    had_previous = output_file.exists()
    if not save_episode_data(data, output_file, now=now):
        result.errors.append(f"Failed to save episode data to {output_file}")
        return result

    result.success = True
    result.episode_count = len(data)
    result.summary = summarize_episode_data(data)
    if had_previous:
        result.backup_file = str(backup_path_for(output_file, now))
    return result
