"""
Metrics run: fetch, save raw, process, save outputs, report.
"""

import logging
from typing import Optional

from podcast_analytics.config import Config, get_config
from podcast_analytics.metrics.export import save_metrics, save_raw_metrics
from podcast_analytics.metrics.processing import MetricsAnalysis, process_metrics
from podcast_analytics.metrics.sample_data import fetch_podcast_data

logger = logging.getLogger(__name__)


def log_metrics_report(analysis: MetricsAnalysis) -> None:
    """Write the analysis summary and platform breakdown to the run log."""
    stats = analysis.summary_stats.iloc[0]

    logger.info("=== ANALYSIS SUMMARY ===")
    logger.info(
        "Date range: %s to %s",
        stats["date_range_start"].date(),
        stats["date_range_end"].date(),
    )
    logger.info("Total downloads: %d", stats["total_downloads"])
    logger.info("Average daily downloads: %.1f", stats["avg_daily_downloads"])
    logger.info("Average play rate: %.1f%%", stats["avg_play_rate"] * 100)
    logger.info("Average engagement rate: %.1f%%", stats["avg_engagement_rate"] * 100)

    logger.info("=== PLATFORM BREAKDOWN ===")
    for row in analysis.platform_summary.itertuples(index=False):
        logger.info(
            "%s: %d downloads (%.1f%%)",
            row.platform,
            row.total_downloads,
            row.download_share,
        )


def run_metrics_pipeline(config: Optional[Config] = None) -> bool:
    """
    Run the full metrics pipeline once.

    Any failure is logged and reported as False; nothing is retried.

    Args:
        config: Application Config object (optional, uses default if None)

    Returns:
        True if every output was written
    """
    if config is None:
        config = get_config()

    logger.info("Starting podcast analytics pipeline...")
    try:
        config.ensure_directories()
        raw_data = fetch_podcast_data(config)
        save_raw_metrics(raw_data, config.raw_dir)

        analysis = process_metrics(raw_data)
        save_metrics(analysis, config.processed_dir)
        log_metrics_report(analysis)
    except Exception as exc:
        logger.error("Error in analysis pipeline: %s", exc)
        return False

    logger.info("Analysis completed successfully!")
    return True
