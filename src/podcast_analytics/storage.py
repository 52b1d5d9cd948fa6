"""
Output persistence for tabular results.

Writes DataFrames to CSV, keeping the previous version of an output
file as a timestamped backup copy next to it. Backups are never pruned.
"""

import logging
import shutil
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional, Union

import pandas as pd

logger = logging.getLogger(__name__)

BACKUP_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"


def backup_path_for(output_file: Path, now: Optional[datetime] = None) -> Path:
    """Return ``<output_file>.backup.<YYYYMMDD_HHMMSS>``."""
    stamp = (now or datetime.now()).strftime(BACKUP_TIMESTAMP_FORMAT)
    return output_file.with_name(f"{output_file.name}.backup.{stamp}")


def backup_existing_file(output_file: Path, now: Optional[datetime] = None) -> Optional[Path]:
    """
    Copy an existing output file to a timestamped sibling.

    Args:
        output_file: File about to be overwritten
        now: Timestamp used in the backup name (default: current time)

    Returns:
        Path of the backup, or None if there was no file to back up

    Raises:
        OSError: If the copy fails
    """
    if not output_file.exists():
        return None
    backup_file = backup_path_for(output_file, now)
    shutil.copy2(output_file, backup_file)
    logger.info("Created backup: %s", backup_file)
    return backup_file


def summarize_episode_data(data: pd.DataFrame) -> Dict[str, Any]:
    """
    Summary statistics for an episode metadata table.

    Returns:
        Dictionary with ``total_episodes``, ``date_range`` (earliest and
        latest ISO timestamps, None when no date parsed),
        ``avg_description_length`` and ``episodes_by_year`` (missing
        years counted under ``"NA"``).
    """
    dates = data["publish_date"].dropna()
    lengths = data["description_length"].dropna()

    by_year: Dict[str, int] = {}
    for year, count in data["publish_year"].value_counts(dropna=False).sort_index().items():
        key = "NA" if pd.isna(year) else str(int(year))
        by_year[key] = int(count)

    return {
        "total_episodes": int(len(data)),
        "date_range": {
            "earliest": dates.min().isoformat() if not dates.empty else None,
            "latest": dates.max().isoformat() if not dates.empty else None,
        },
        "avg_description_length": round(float(lengths.mean())) if not lengths.empty else None,
        "episodes_by_year": by_year,
    }


def log_episode_summary(summary: Dict[str, Any]) -> None:
    """Write an episode summary to the run log."""
    logger.info("=== EPISODE DATA SUMMARY ===")
    logger.info(
        "Date range: %s to %s",
        summary["date_range"]["earliest"],
        summary["date_range"]["latest"],
    )
    logger.info("Average description length: %s characters", summary["avg_description_length"])
    logger.info("Episodes by year:")
    for year, count in summary["episodes_by_year"].items():
        logger.info("  %s: %d", year, count)


def write_csv(data: pd.DataFrame, output_file: Union[str, Path]) -> Path:
    """
    Write a DataFrame to CSV without the index, creating parent directories.

    Raises:
        OSError: If the directory or file cannot be written
    """
    output_file = Path(output_file)
    output_file.parent.mkdir(parents=True, exist_ok=True)
    data.to_csv(output_file, index=False)
    return output_file


def save_episode_data(
    data: Optional[pd.DataFrame],
    output_file: Union[str, Path],
    now: Optional[datetime] = None,
) -> bool:
    """
    Save episode metadata, backing up any previous output first.

    Args:
        data: Episode table from ``process_episode_data``
        output_file: Destination CSV path
        now: Timestamp used for the backup name (default: current time)

    Returns:
        True on success, False if there was nothing to save or the write failed

    Example:
        >>> ok = save_episode_data(frame, Path("data/processed/episodes_metadata.csv"))
    """
    if data is None or data.empty:
        logger.error("No data to save")
        return False

    output_file = Path(output_file)
    try:
        output_file.parent.mkdir(parents=True, exist_ok=True)
        backup_existing_file(output_file, now)
        write_csv(data, output_file)
    except OSError as exc:
        logger.error("Error saving data: %s", exc)
        return False

    logger.info("Successfully saved episode data to: %s", output_file)
    logger.info("Total episodes saved: %d", len(data))
    log_episode_summary(summarize_episode_data(data))
    return True
