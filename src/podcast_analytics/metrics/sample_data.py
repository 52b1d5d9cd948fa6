"""
Listening metrics source.

No platform API client is wired yet: ``fetch_podcast_data`` always
returns generated sample data shaped like a daily platform export.
The generator is seeded so repeated runs produce the same numbers for
the same end date.
"""

import logging
from datetime import date, timedelta
from typing import Optional

import numpy as np
import pandas as pd

from podcast_analytics.config import Config, get_config

logger = logging.getLogger(__name__)

PLATFORMS = ["Spotify", "Apple Podcasts", "Google Podcasts"]

METRIC_COLUMNS = ["date", "downloads", "plays", "unique_listeners", "episode_title", "platform"]

# (poisson lambda, noise sigma) per metric
_METRIC_PROFILES = {
    "downloads": (150, 20),
    "plays": (120, 15),
    "unique_listeners": (100, 12),
}


def generate_sample_metrics(
    days: int = 31,
    seed: int = 42,
    end_date: Optional[date] = None,
) -> pd.DataFrame:
    """
    Generate a daily metrics table ending on ``end_date``.

    Each metric is a Poisson draw plus normal noise, rounded and
    clipped at zero. Episode titles run ``Episode 1`` to ``Episode N``
    and the platform is picked uniformly per row.

    Args:
        days: Number of daily rows
        seed: Seed for the random generator
        end_date: Last date in the table (default: today)

    Returns:
        DataFrame with METRIC_COLUMNS, one row per day, oldest first

    Example:
        >>> frame = generate_sample_metrics(days=7, seed=1)
        >>> len(frame)
        7
    """
    end_date = end_date or date.today()
    rng = np.random.default_rng(seed)

    dates = pd.date_range(end=pd.Timestamp(end_date), periods=days, freq="D")
    frame = pd.DataFrame({"date": dates})

    for column, (lam, sigma) in _METRIC_PROFILES.items():
        values = rng.poisson(lam=lam, size=days) + rng.normal(loc=0.0, scale=sigma, size=days)
        frame[column] = np.clip(np.round(values), 0, None).astype(int)

    frame["episode_title"] = [f"Episode {i}" for i in range(1, days + 1)]
    frame["platform"] = rng.choice(PLATFORMS, size=days, replace=True)
    return frame[METRIC_COLUMNS]


def fetch_podcast_data(config: Optional[Config] = None) -> pd.DataFrame:
    """
    Fetch daily listening metrics.

    Args:
        config: Application Config object (optional, uses default if None)

    Returns:
        DataFrame with METRIC_COLUMNS
    """
    if config is None:
        config = get_config()

    logger.info("Fetching podcast data from API...")
    if config.has_platform_credentials:
        logger.warning(
            "Platform credentials are configured but no platform API client "
            "is available; using sample data"
        )
    else:
        logger.info("No platform credentials configured; using sample data")

    return generate_sample_metrics(days=config.metrics_days, seed=config.metrics_seed)
