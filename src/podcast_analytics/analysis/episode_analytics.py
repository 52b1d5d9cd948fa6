"""
Descriptive analytics over the episode metadata CSV.

Reads the table written by the RSS ingestion run and reports totals,
the publishing date range, average description length and episode
counts by year, weekday and month.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Union

import pandas as pd

logger = logging.getLogger(__name__)

MISSING_LABEL = "NA"


@dataclass
class EpisodeAnalytics:
    """
    Summary of an episode metadata table.

    Count dictionaries map a value (as text) to the number of episodes;
    episodes with a missing value are counted under ``"NA"``.
    """

    total_episodes: int
    earliest: Optional[pd.Timestamp] = None
    latest: Optional[pd.Timestamp] = None
    avg_description_length: Optional[float] = None
    episodes_by_year: Dict[str, int] = field(default_factory=dict)
    episodes_by_day_of_week: Dict[str, int] = field(default_factory=dict)
    episodes_by_month: Dict[str, int] = field(default_factory=dict)


def _value_counts(series: pd.Series) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for value, count in series.value_counts(dropna=False).sort_index().items():
        if pd.isna(value):
            key = MISSING_LABEL
        elif isinstance(value, float) and value.is_integer():
            key = str(int(value))
        else:
            key = str(value)
        counts[key] = int(count)
    return counts


def load_episode_data(file_path: Union[str, Path]) -> Optional[pd.DataFrame]:
    """
    Load the episode metadata CSV.

    Args:
        file_path: Path to the CSV written by the ingestion run

    Returns:
        DataFrame with ``publish_date`` parsed as UTC timestamps, or None
        if the file is missing or unreadable
    """
    file_path = Path(file_path)
    if not file_path.exists():
        logger.error("Episode data file not found: %s", file_path)
        logger.error("Please run `podcast-analytics fetch-rss` first to generate episode data.")
        return None

    try:
        data = pd.read_csv(file_path)
    except (OSError, ValueError) as exc:
        logger.error("Error loading episode data: %s", exc)
        return None

    if "publish_date" in data.columns:
        data["publish_date"] = pd.to_datetime(data["publish_date"], utc=True, errors="coerce")
    if "publish_year" in data.columns:
        data["publish_year"] = data["publish_year"].astype("Int64")

    logger.info("Loaded %d episodes for analysis", len(data))
    return data


def generate_basic_analytics(episodes_data: Optional[pd.DataFrame]) -> Optional[EpisodeAnalytics]:
    """
    Compute basic analytics for an episode table.

    Returns:
        EpisodeAnalytics, or None if there is no data
    """
    if episodes_data is None or episodes_data.empty:
        logger.warning("No data available for analysis")
        return None

    dates = episodes_data["publish_date"].dropna()
    lengths = episodes_data["description_length"].dropna()

    return EpisodeAnalytics(
        total_episodes=len(episodes_data),
        earliest=dates.min() if not dates.empty else None,
        latest=dates.max() if not dates.empty else None,
        avg_description_length=float(lengths.mean()) if not lengths.empty else None,
        episodes_by_year=_value_counts(episodes_data["publish_year"]),
        episodes_by_day_of_week=_value_counts(episodes_data["publish_day_of_week"]),
        episodes_by_month=_value_counts(episodes_data["publish_month"]),
    )


def _format_counts(counts: Dict[str, int]) -> List[str]:
    return [f"  {key}: {count}" for key, count in counts.items()]


def format_analytics(analytics: EpisodeAnalytics) -> str:
    """Render analytics as a plain-text report."""
    avg_length = (
        f"{round(analytics.avg_description_length)} characters"
        if analytics.avg_description_length is not None
        else "n/a"
    )
    lines = [
        "=== PODCAST EPISODE ANALYTICS ===",
        f"Total Episodes: {analytics.total_episodes}",
        f"Date Range: {analytics.earliest} to {analytics.latest}",
        f"Average Description Length: {avg_length}",
        "",
        "Episodes by Year:",
        *_format_counts(analytics.episodes_by_year),
        "",
        "Episodes by Day of Week:",
        *_format_counts(analytics.episodes_by_day_of_week),
        "",
        "Episodes by Month:",
        *_format_counts(analytics.episodes_by_month),
    ]
    return "\n".join(lines)


def run_episode_analytics(file_path: Union[str, Path]) -> Optional[str]:
    """
    Load the episode CSV and build the analytics report.

    Returns:
        Report text, or None if no episode data could be loaded
    """
    logger.info("Starting episode analytics...")
    analytics = generate_basic_analytics(load_episode_data(file_path))
    if analytics is None:
        return None
    return format_analytics(analytics)
