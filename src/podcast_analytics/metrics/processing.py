"""
Daily metrics processing.

Cleans the raw daily table and computes:
- 7-day trailing moving averages
- Play rate and engagement rate
- Calendar fields (weekday, month, week of year)
- Overall summary statistics
- Per-platform download totals and shares
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)

MOVING_AVERAGE_WINDOW = 7

_MOVING_AVERAGE_COLUMNS = ["downloads", "plays", "unique_listeners"]


@dataclass
class MetricsAnalysis:
    """
    Result of processing a daily metrics table.

    Attributes:
        processed_data: Cleaned daily rows with derived columns
        summary_stats: Single-row table of overall statistics
        platform_summary: One row per platform
    """

    processed_data: pd.DataFrame
    summary_stats: pd.DataFrame
    platform_summary: pd.DataFrame


def _safe_ratio(numerator: pd.Series, denominator: pd.Series) -> pd.Series:
    """Element-wise ratio; zero denominators give NaN."""
    ratio = numerator / denominator
    return ratio.replace([np.inf, -np.inf], np.nan)


def week_of_year(dates: pd.Series) -> pd.Series:
    """Week number counted in whole 7-day blocks from January 1st."""
    return (dates.dt.dayofyear - 1) // 7 + 1


def clean_metrics(raw_data: pd.DataFrame) -> pd.DataFrame:
    """Drop rows missing date or downloads and sort by date."""
    cleaned = raw_data.dropna(subset=["date", "downloads"]).copy()
    cleaned["date"] = pd.to_datetime(cleaned["date"]).dt.normalize()
    return cleaned.sort_values("date", kind="mergesort").reset_index(drop=True)


def add_moving_averages(data: pd.DataFrame, window: int = MOVING_AVERAGE_WINDOW) -> pd.DataFrame:
    """
    Add right-aligned ``<metric>_7day_ma`` columns.

    The first ``window - 1`` rows have no full window and are NaN.
    """
    data = data.copy()
    for column in _MOVING_AVERAGE_COLUMNS:
        data[f"{column}_{window}day_ma"] = data[column].rolling(window=window).mean()
    return data


def add_derived_metrics(data: pd.DataFrame) -> pd.DataFrame:
    """Add rate and calendar columns."""
    data = data.copy()
    data["play_rate"] = _safe_ratio(data["plays"], data["downloads"])
    data["engagement_rate"] = _safe_ratio(data["unique_listeners"], data["downloads"])
    data["week_day"] = data["date"].dt.strftime("%a")
    data["month"] = data["date"].dt.strftime("%b")
    data["week_of_year"] = week_of_year(data["date"])
    return data


def compute_summary_stats(data: pd.DataFrame, analysis_time: Optional[datetime] = None) -> pd.DataFrame:
    """Single-row table of overall statistics."""
    return pd.DataFrame([{
        "total_downloads": int(data["downloads"].sum()),
        "avg_daily_downloads": data["downloads"].mean(),
        "median_daily_downloads": data["downloads"].median(),
        "total_plays": int(data["plays"].sum()),
        "avg_play_rate": data["play_rate"].mean(),
        "avg_engagement_rate": data["engagement_rate"].mean(),
        "date_range_start": data["date"].min(),
        "date_range_end": data["date"].max(),
        "analysis_timestamp": analysis_time or datetime.now(),
    }])


def compute_platform_summary(data: pd.DataFrame) -> pd.DataFrame:
    """
    Download totals per platform.

    ``download_share`` is each platform's percentage of all downloads;
    shares sum to 100 unless there were no downloads at all.
    """
    summary = (
        data.groupby("platform", sort=True)
        .agg(
            total_downloads=("downloads", "sum"),
            avg_downloads=("downloads", "mean"),
            total_episodes=("downloads", "size"),
        )
        .reset_index()
    )
    grand_total = summary["total_downloads"].sum()
    if grand_total > 0:
        summary["download_share"] = summary["total_downloads"] / grand_total * 100
    else:
        summary["download_share"] = np.nan
    return summary


def process_metrics(raw_data: pd.DataFrame, analysis_time: Optional[datetime] = None) -> MetricsAnalysis:
    """
    Clean the raw daily table and compute all derived outputs.

    Args:
        raw_data: Daily metrics with at least date, downloads, plays,
            unique_listeners and platform columns
        analysis_time: Timestamp recorded in the summary (default: now)

    Returns:
        MetricsAnalysis with processed rows and both summaries

    Example:
        >>> analysis = process_metrics(fetch_podcast_data(config))
        >>> analysis.summary_stats["total_downloads"].iloc[0]
    """
    logger.info("Processing and analyzing data...")
    processed = clean_metrics(raw_data)
    processed = add_moving_averages(processed)
    processed = add_derived_metrics(processed)

    return MetricsAnalysis(
        processed_data=processed,
        summary_stats=compute_summary_stats(processed, analysis_time),
        platform_summary=compute_platform_summary(processed),
    )
