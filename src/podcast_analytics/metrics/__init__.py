"""
Daily listening metrics: sample source, processing and export.
"""

from podcast_analytics.metrics.processing import MetricsAnalysis, process_metrics
from podcast_analytics.metrics.pipeline import run_metrics_pipeline

__all__ = ["MetricsAnalysis", "process_metrics", "run_metrics_pipeline"]
