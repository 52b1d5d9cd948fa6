"""
Podcast Analytics

Run-to-completion jobs that fetch podcast episode metadata from an RSS
feed and daily listening metrics, clean them, and write flat files.
"""

__version__ = "0.1.0"
__author__ = "Podcast Analytics Team"

from podcast_analytics.config import Config

__all__ = ["Config", "__version__"]
