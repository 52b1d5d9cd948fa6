"""
Analysis of the episode metadata table.
"""

from podcast_analytics.analysis.episode_analytics import (
    EpisodeAnalytics,
    generate_basic_analytics,
    load_episode_data,
)

__all__ = ["EpisodeAnalytics", "generate_basic_analytics", "load_episode_data"]
