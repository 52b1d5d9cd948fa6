"""
Command-line interface for Podcast Analytics.

Usage:
    podcast-analytics fetch-rss                  # Fetch RSS feed and write episodes CSV
    podcast-analytics fetch-rss --output-json    # JSON result for CI integration
    podcast-analytics fetch-metrics              # Fetch and analyze daily metrics
    podcast-analytics analyze                    # Report on the episodes CSV

Every command exits with status 0 on success and 1 on failure.
"""

import argparse
import sys
from pathlib import Path

from podcast_analytics.config import get_config
from podcast_analytics.logging_config import setup_logging


def cmd_fetch_rss(args):
    """Fetch the RSS feed and write the episode metadata CSV."""
    from podcast_analytics.ingestion.pipeline import run_rss_ingest

    config = get_config(rss_url=args.rss_url)
    output_file = Path(args.output) if args.output else None
    result = run_rss_ingest(config=config, output_file=output_file)

    # JSON output mode (for CI/automation)
    if args.output_json:
        print(result.to_json())
        sys.exit(0 if result.success else 1)

    if not result.success:
        for err in result.errors:
            print(f"ERROR: {err}")
        print("\n✗ RSS processing failed!")
        sys.exit(1)

    print("\n✓ RSS processing completed successfully!")
    print(f"Episode database updated: {result.output_file}")
    if result.backup_file:
        print(f"Previous version kept at: {result.backup_file}")


def cmd_fetch_metrics(args):
    """Fetch daily metrics and write processed outputs."""
    from podcast_analytics.metrics.pipeline import run_metrics_pipeline

    config = get_config()
    if not run_metrics_pipeline(config):
        print("\n✗ Metrics pipeline failed!")
        sys.exit(1)

    print("\n✓ Metrics pipeline completed successfully!")
    print(f"Outputs written to: {config.processed_dir}")


def cmd_analyze(args):
    """Print analytics for the episode metadata CSV."""
    from podcast_analytics.analysis.episode_analytics import run_episode_analytics

    config = get_config()
    input_file = Path(args.input) if args.input else config.episodes_file

    report = run_episode_analytics(input_file)
    if report is None:
        print("Cannot proceed without episode data")
        sys.exit(1)

    print(report)
    print("\n✓ Episode analytics completed successfully!")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="podcast-analytics",
        description="Podcast Analytics -- fetch, clean and summarise podcast data",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        default=False,
        help="Enable debug logging",
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # fetch-rss
    sub_fetch_rss = subparsers.add_parser(
        "fetch-rss",
        help="Fetch the RSS feed and write the episode metadata CSV",
    )
    sub_fetch_rss.add_argument(
        "--rss-url",
        default=None,
        help="Feed URL (default: PODCAST_ANALYTICS_RSS_URL or podcast.yaml)",
    )
    sub_fetch_rss.add_argument(
        "--output",
        default=None,
        help="Destination CSV (default: data/processed/episodes_metadata.csv)",
    )
    sub_fetch_rss.add_argument(
        "--output-json",
        action="store_true",
        default=False,
        help="Output result as JSON (for CI/automation)",
    )
    sub_fetch_rss.set_defaults(func=cmd_fetch_rss)

    # fetch-metrics
    sub_fetch_metrics = subparsers.add_parser(
        "fetch-metrics",
        help="Fetch daily listening metrics and write processed outputs",
    )
    sub_fetch_metrics.set_defaults(func=cmd_fetch_metrics)

    # analyze
    sub_analyze = subparsers.add_parser(
        "analyze",
        help="Print analytics for the episode metadata CSV",
    )
    sub_analyze.add_argument(
        "--input",
        default=None,
        help="Episode CSV to analyze (default: configured episodes file)",
    )
    sub_analyze.set_defaults(func=cmd_analyze)

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command is None:
        parser.print_help()
        sys.exit(0)

    setup_logging(verbose=args.verbose)
    args.func(args)


if __name__ == "__main__":
    main()
