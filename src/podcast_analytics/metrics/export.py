"""
Metrics export to CSV, JSON and a pickled bundle.
"""

import json
import logging
import pickle
from pathlib import Path
from typing import Any, Dict, List

import pandas as pd

from podcast_analytics.metrics.processing import MetricsAnalysis
from podcast_analytics.storage import write_csv

logger = logging.getLogger(__name__)

PROCESSED_METRICS_CSV = "podcast_metrics_processed.csv"
SUMMARY_STATS_CSV = "summary_statistics.csv"
PLATFORM_SUMMARY_CSV = "platform_summary.csv"
BUNDLE_PICKLE = "podcast_analytics.pkl"
METRICS_JSON = "podcast_metrics.json"
RAW_METRICS_CSV = "podcast_data_raw.csv"

JSON_EXPORT_COLUMNS = ["date", "downloads", "plays", "unique_listeners", "downloads_7day_ma"]


def metrics_to_records(data: pd.DataFrame) -> List[Dict[str, Any]]:
    """
    JSON-ready records of the web export columns.

    Dates become ``YYYY-MM-DD`` strings and missing values become None.
    """
    export = data[JSON_EXPORT_COLUMNS].copy()
    export["date"] = export["date"].dt.strftime("%Y-%m-%d")
    export = export.astype(object).where(export.notna(), None)
    return export.to_dict(orient="records")


def save_raw_metrics(raw_data: pd.DataFrame, raw_dir: Path) -> Path:
    """Write the unprocessed metrics table."""
    return write_csv(raw_data, Path(raw_dir) / RAW_METRICS_CSV)


def save_metrics(analysis: MetricsAnalysis, processed_dir: Path) -> Dict[str, Path]:
    """
    Write all processed metrics outputs.

    Args:
        analysis: Result of ``process_metrics``
        processed_dir: Destination directory

    Returns:
        Mapping of output kind to written path

    Raises:
        OSError: If any file cannot be written
    """
    logger.info("Saving processed data...")
    processed_dir = Path(processed_dir)
    processed_dir.mkdir(parents=True, exist_ok=True)

    paths = {
        "processed": write_csv(analysis.processed_data, processed_dir / PROCESSED_METRICS_CSV),
        "summary": write_csv(analysis.summary_stats, processed_dir / SUMMARY_STATS_CSV),
        "platform": write_csv(analysis.platform_summary, processed_dir / PLATFORM_SUMMARY_CSV),
    }

    bundle_path = processed_dir / BUNDLE_PICKLE
    with open(bundle_path, "wb") as f:
        pickle.dump(
            {
                "processed_data": analysis.processed_data,
                "summary_stats": analysis.summary_stats,
                "platform_summary": analysis.platform_summary,
            },
            f,
        )
    paths["bundle"] = bundle_path

    json_path = processed_dir / METRICS_JSON
    json_path.write_text(
        json.dumps(metrics_to_records(analysis.processed_data), indent=2),
        encoding="utf-8",
    )
    paths["json"] = json_path

    logger.info("Data saved successfully!")
    return paths
