"""
Tests for the end-to-end RSS ingestion run.

Uses a realistic RSS document served through a patched HTTP layer and
checks the written CSV, the backup behaviour on re-runs, and that fetch
errors leave existing output untouched.
"""

import json
from datetime import datetime
from unittest.mock import patch

import pandas as pd
import requests

from podcast_analytics.ingestion.pipeline import IngestResult, run_rss_ingest
from podcast_analytics.ingestion.episode_processor import EPISODE_COLUMNS
from podcast_analytics.storage import backup_path_for

from conftest import make_response


class TestRunRssIngest:

    def test_writes_one_row_per_feed_item(self, test_config, mock_feed_get, run_time):
        result = run_rss_ingest(test_config, now=run_time)

        assert result.success is True
        assert result.errors == []
        assert result.episode_count == 3
        assert result.backup_file is None

        written = pd.read_csv(test_config.episodes_file)
        assert len(written) == 3
        assert list(written.columns) == EPISODE_COLUMNS

    def test_rows_are_newest_first_with_undated_last(self, test_config, mock_feed_get, run_time):
        run_rss_ingest(test_config, now=run_time)
        written = pd.read_csv(test_config.episodes_file)

        assert list(written["episode_guid"]) == ["guid-0013", "guid-0012", "guid-bonus"]
        assert pd.isna(written["publish_date"].iloc[2])
        assert pd.isna(written["publish_year"].iloc[2])

    def test_derived_columns(self, test_config, mock_feed_get, run_time):
        run_rss_ingest(test_config, now=run_time)
        written = pd.read_csv(test_config.episodes_file, dtype={"episode_number_extracted": str})
        by_guid = written.set_index("episode_guid")

        ep12 = by_guid.loc["guid-0012"]
        assert ep12["episode_description_clean"] == "Hello & welcome"
        assert ep12["description_length"] == 15
        assert ep12["episode_number_extracted"] == "12"
        assert ep12["publish_day_of_week"] == "Monday"
        assert ep12["publish_month"] == "Jan"
        assert ep12["publish_year"] == 2024
        assert ep12["duration"] == "00:45:00"
        assert ep12["data_fetched_at"] == "2024-02-01 09:30:00"

        ep13 = by_guid.loc["guid-0013"]
        assert ep13["episode_description_clean"] == "All about hops. Cascade, Citra and more."

        assert pd.isna(by_guid.loc["guid-bonus", "episode_number_extracted"])

        lengths = written["episode_description_clean"].fillna("").str.len()
        assert (written["description_length"] == lengths).all()

    def test_rerun_backs_up_and_reproduces_content(self, test_config, mock_feed_get, run_time):
        run_rss_ingest(test_config, now=run_time)
        first = pd.read_csv(test_config.episodes_file)

        later = datetime(2024, 2, 2, 9, 30, 0)
        result = run_rss_ingest(test_config, now=later)
        second = pd.read_csv(test_config.episodes_file)

        backup = backup_path_for(test_config.episodes_file, later)
        assert result.backup_file == str(backup)
        assert backup.exists()
        pd.testing.assert_frame_equal(pd.read_csv(backup), first)

        pd.testing.assert_frame_equal(
            first.drop(columns="data_fetched_at"),
            second.drop(columns="data_fetched_at"),
        )
        assert (second["data_fetched_at"] == "2024-02-02 09:30:00").all()

    def test_fetch_error_leaves_output_untouched(self, test_config, run_time):
        test_config.episodes_file.parent.mkdir(parents=True)
        test_config.episodes_file.write_text("existing\n", encoding="utf-8")

        with patch("podcast_analytics.ingestion.rss_fetcher.requests.get") as mock_get:
            mock_get.side_effect = requests.ConnectionError("DNS failure")
            result = run_rss_ingest(test_config, now=run_time)

        assert result.success is False
        assert any("DNS failure" in err for err in result.errors)
        assert test_config.episodes_file.read_text(encoding="utf-8") == "existing\n"
        assert list(test_config.processed_dir.glob("*.backup.*")) == []

    def test_output_override(self, test_config, mock_feed_get, run_time, tmp_path):
        target = tmp_path / "elsewhere" / "feed.csv"
        result = run_rss_ingest(test_config, output_file=target, now=run_time)

        assert result.output_file == str(target)
        assert target.exists()
        assert not test_config.episodes_file.exists()

    def test_empty_feed_is_a_failure(self, test_config, run_time):
        empty = b"""<?xml version="1.0"?><rss version="2.0"><channel>
            <title>Nothing yet</title></channel></rss>"""
        with patch("podcast_analytics.ingestion.rss_fetcher.requests.get") as mock_get:
            mock_get.return_value.content = empty
            result = run_rss_ingest(test_config, now=run_time)

        assert result.success is False
        assert not test_config.episodes_file.exists()


class TestIngestResult:

    def test_json_round_trip(self, test_config, mock_feed_get, run_time):
        result = run_rss_ingest(test_config, now=run_time)
        data = json.loads(result.to_json())

        assert data["success"] is True
        assert data["episode_count"] == 3
        assert data["rss_url"] == test_config.rss_url
        assert data["fetched_at"] == "2024-02-01T09:30:00"
        assert data["summary"]["episodes_by_year"] == {"2024": 2, "NA": 1}

    def test_defaults(self):
        result = IngestResult()
        assert result.success is False
        assert result.to_dict()["errors"] == []


class TestNamedTimezones:

    def test_eastern_pub_date_is_stored_in_utc(self, test_config, run_time):
        feed = b"""<?xml version="1.0" encoding="UTF-8"?>
<rss version="2.0"><channel>
  <title>Brew Talk</title>
  <item>
    <title>Episode 14: Late Night Lagers</title>
    <description>After hours.</description>
    <guid isPermaLink="false">guid-0014</guid>
    <pubDate>Mon, 15 Jan 2024 22:00:00 EST</pubDate>
  </item>
</channel></rss>"""
        with patch("podcast_analytics.ingestion.rss_fetcher.requests.get") as mock_get:
            mock_get.return_value = make_response(feed)
            result = run_rss_ingest(test_config, now=run_time)

        assert result.success is True
        row = pd.read_csv(test_config.episodes_file).iloc[0]
        assert pd.Timestamp(row["publish_date"]) == pd.Timestamp("2024-01-16 03:00:00", tz="UTC")
        assert row["publish_date_formatted"] == "2024-01-16 03:00:00"
        assert row["publish_day_of_week"] == "Tuesday"
