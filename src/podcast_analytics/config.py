"""
Configuration management for Podcast Analytics.

Provides centralized configuration using Pydantic for validation and
environment variable support. Supports podcast.yaml for per-project settings.
"""

from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_RSS_URL = "https://anchor.fm/s/f94a9cd8/podcast/rss"


def load_podcast_yaml(search_dir: Optional[Path] = None) -> dict:
    """
    Load podcast.yaml configuration file.

    Searches for podcast.yaml starting from search_dir (or the working directory)
    and walking up to 3 parent directories.

    Args:
        search_dir: Directory to start searching from

    Returns:
        Dictionary with podcast.yaml contents, or empty dict if not found
    """
    start = Path(search_dir) if search_dir else Path.cwd()
    for parent in [start] + list(start.parents)[:3]:
        candidate = parent / "podcast.yaml"
        if candidate.exists():
            with open(candidate, "r", encoding="utf-8") as f:
                return yaml.safe_load(f) or {}
    return {}


class Config(BaseSettings):
    """
    Application configuration with environment variable support.

    Configuration can be provided via:
    1. Environment variables (prefixed with PODCAST_ANALYTICS_)
    2. .env file
    3. podcast.yaml
    4. Default values

    Example:
        export PODCAST_ANALYTICS_RSS_URL="https://example.com/feed.rss"
        export PODCAST_ANALYTICS_DATA_DIR="/custom/data"
    """

    model_config = SettingsConfigDict(
        env_prefix="PODCAST_ANALYTICS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
        extra="ignore",
    )

    # RSS Feed
    rss_url: str = Field(
        default=DEFAULT_RSS_URL,
        description="RSS feed URL for the podcast"
    )
    request_timeout: float = Field(
        default=30.0,
        gt=0,
        description="HTTP timeout in seconds for the feed request"
    )
    user_agent: str = Field(
        default="podcast-analytics/0.1 (+feedparser)",
        description="User-Agent header sent with the feed request"
    )

    # Storage paths
    data_dir: Path = Field(
        default_factory=lambda: Path.cwd() / "data",
        description="Root directory for raw and processed data files (default: ./data)"
    )
    episodes_filename: str = Field(
        default="episodes_metadata.csv",
        description="File name of the episode metadata CSV in processed_dir"
    )

    # Metrics settings
    metrics_days: int = Field(
        default=31,
        ge=1,
        description="Number of daily rows produced by the metrics fetch"
    )
    metrics_seed: int = Field(
        default=42,
        description="Random seed for the sample metrics generator"
    )

    # Platform credentials (read only, no API client is wired yet)
    spotify_client_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "PODCAST_ANALYTICS_SPOTIFY_CLIENT_ID", "SPOTIFY_CLIENT_ID", "spotify_client_id"
        ),
        description="Spotify API client id"
    )
    spotify_client_secret: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices(
            "PODCAST_ANALYTICS_SPOTIFY_CLIENT_SECRET", "SPOTIFY_CLIENT_SECRET", "spotify_client_secret"
        ),
        description="Spotify API client secret"
    )

    @property
    def processed_dir(self) -> Path:
        return self.data_dir / "processed"

    @property
    def raw_dir(self) -> Path:
        return self.data_dir / "raw"

    @property
    def episodes_file(self) -> Path:
        return self.processed_dir / self.episodes_filename

    @property
    def has_platform_credentials(self) -> bool:
        return bool(self.spotify_client_id and self.spotify_client_secret)

    def ensure_directories(self) -> None:
        """Create necessary directories if they don't exist."""
        self.processed_dir.mkdir(parents=True, exist_ok=True)
        self.raw_dir.mkdir(parents=True, exist_ok=True)


def _yaml_settings(yaml_config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Flatten podcast.yaml into Config field values.

    Top-level keys matching a Config field are used directly. The
    ``podcast.rss_url`` form is accepted as an alternative location
    for the feed URL.
    """
    values = {k: v for k, v in yaml_config.items() if k in Config.model_fields}
    podcast_section = yaml_config.get("podcast") or {}
    if isinstance(podcast_section, dict) and podcast_section.get("rss_url"):
        values.setdefault("rss_url", podcast_section["rss_url"])
    return values


def get_config(search_dir: Optional[Path] = None, **overrides: Any) -> Config:
    """
    Get the application configuration instance.

    Merges settings from environment variables, .env file,
    and podcast.yaml (if present). Environment values take precedence
    over podcast.yaml; explicit ``overrides`` take precedence over both.

    Args:
        search_dir: Directory to start the podcast.yaml search from
        **overrides: Field values that win over every other source

    Returns:
        Config: Application configuration
    """
    from_env = Config()
    yaml_values = {
        k: v
        for k, v in _yaml_settings(load_podcast_yaml(search_dir)).items()
        if k not in from_env.model_fields_set
    }
    yaml_values.update({k: v for k, v in overrides.items() if v is not None})
    return Config(**yaml_values) if yaml_values else from_env
