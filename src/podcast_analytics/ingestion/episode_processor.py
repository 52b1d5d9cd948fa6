"""
Episode metadata normalization.

Turns raw feed entries into flat episode records: fixed column names,
parsed publication dates, HTML-free descriptions, and a handful of
derived columns used by the analytics step. Malformed fields degrade
to missing values instead of failing the run.
"""

import html
import logging
import re
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Mapping, Optional

import pandas as pd
from dateutil import parser as date_parser

logger = logging.getLogger(__name__)

# Output schema, in column order.
EPISODE_COLUMNS = [
    "episode_title",
    "episode_description",
    "episode_description_clean",
    "publish_date",
    "publish_date_formatted",
    "episode_link",
    "episode_guid",
    "duration",
    "episode_number",
    "episode_number_extracted",
    "season_number",
    "description_length",
    "publish_day_of_week",
    "publish_month",
    "publish_year",
    "data_fetched_at",
]

_TAG_RE = re.compile(r"<[^>]*>")
_NUMBER_RE = re.compile(r"\b\d+\b")

# RFC-822 zone names dateutil does not know, as UTC offsets in seconds
RFC822_ZONES = {
    "UT": 0,
    "EST": -5 * 3600,
    "EDT": -4 * 3600,
    "CST": -6 * 3600,
    "CDT": -5 * 3600,
    "MST": -7 * 3600,
    "MDT": -6 * 3600,
    "PST": -8 * 3600,
    "PDT": -7 * 3600,
}

# Two defaults that differ in every date part; a complete date parses
# identically against both.
_PARTIAL_DATE_PROBES = (datetime(2000, 1, 1), datetime(2001, 2, 2))


@dataclass
class EpisodeRecord:
    """
    One normalized row of the episode metadata table.

    Optional feed fields (duration, episode and season number) are None
    when the feed does not carry them. Date-derived fields are None when
    the publication date could not be parsed.
    """

    episode_title: str
    episode_description: str
    episode_description_clean: str
    publish_date: Optional[datetime]
    publish_date_formatted: Optional[str]
    episode_link: Optional[str]
    episode_guid: Optional[str]
    duration: Optional[str]
    episode_number: Optional[str]
    episode_number_extracted: Optional[str]
    season_number: Optional[str]
    description_length: int
    publish_day_of_week: Optional[str]
    publish_month: Optional[str]
    publish_year: Optional[int]
    data_fetched_at: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def clean_description(text: Optional[str]) -> str:
    """
    Strip HTML markup from a description and collapse whitespace.

    Example:
        >>> clean_description("<p>Hello &amp; welcome</p>")
        'Hello & welcome'
    """
    if not text:
        return ""
    stripped = _TAG_RE.sub("", text)
    return " ".join(html.unescape(stripped).split())


def extract_episode_number(title: Optional[str]) -> Optional[str]:
    """
    Return the first standalone run of digits in a title, if any.

    Example:
        >>> extract_episode_number("Episode 12: Barrel Aging")
        '12'
    """
    if not title:
        return None
    match = _NUMBER_RE.search(title)
    return match.group(0) if match else None


def parse_publish_date(value: Optional[str]) -> Optional[datetime]:
    """
    Parse a feed timestamp into a UTC datetime.

    Accepts RFC-822 (``Mon, 01 Jan 2024 12:00:00 GMT``, including the
    North American zone names such as ``EST``) and ISO-8601 strings.
    Timestamps without a zone are taken as UTC. Values missing the year,
    month or day are treated as unparseable rather than completed from
    today's date.

    Returns:
        Aware datetime in UTC, or None if the value cannot be parsed
    """
    if not value:
        return None
    try:
        candidates = [
            date_parser.parse(str(value), default=default, tzinfos=RFC822_ZONES)
            for default in _PARTIAL_DATE_PROBES
        ]
    except (ValueError, OverflowError) as exc:
        logger.debug("Unparseable publish date %r: %s", value, exc)
        return None
    parsed = candidates[0]
    if parsed != candidates[1]:
        logger.debug("Incomplete publish date %r", value)
        return None
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def entry_publish_date(entry: Mapping[str, Any]) -> Optional[datetime]:
    """
    Publication date of a feed entry, in UTC.

    feedparser's ``published_parsed`` is already normalized to UTC and is
    used when present; the raw text fields are parsed otherwise.
    """
    parsed = entry.get("published_parsed")
    if parsed:
        return datetime(*parsed[:6], tzinfo=timezone.utc)
    return parse_publish_date(_text_field(entry, "published", "pubDate", "updated"))


def _text_field(entry: Mapping[str, Any], *keys: str) -> Optional[str]:
    """First non-empty value among ``keys``, stringified."""
    for key in keys:
        value = entry.get(key)
        if value not in (None, ""):
            return str(value).strip()
    return None


def build_episode_record(
    entry: Mapping[str, Any],
    fetched_at: datetime,
) -> Optional[EpisodeRecord]:
    """
    Build an EpisodeRecord from one feed entry.

    Args:
        entry: feedparser entry (or any mapping with the same keys)
        fetched_at: Timestamp of the fetch this entry came from

    Returns:
        EpisodeRecord, or None if the entry has no title
    """
    title = _text_field(entry, "title")
    if not title:
        logger.warning(
            "Skipping feed item without a title (guid=%s)",
            _text_field(entry, "id", "guid"),
        )
        return None

    description = entry.get("summary") or entry.get("description") or ""
    description_clean = clean_description(description)

    publish_date = entry_publish_date(entry)

    return EpisodeRecord(
        episode_title=title,
        episode_description=description,
        episode_description_clean=description_clean,
        publish_date=publish_date,
        publish_date_formatted=publish_date.strftime("%Y-%m-%d %H:%M:%S") if publish_date else None,
        episode_link=_text_field(entry, "link"),
        episode_guid=_text_field(entry, "id", "guid"),
        duration=_text_field(entry, "itunes_duration"),
        episode_number=_text_field(entry, "itunes_episode"),
        episode_number_extracted=extract_episode_number(title),
        season_number=_text_field(entry, "itunes_season"),
        description_length=len(description_clean),
        publish_day_of_week=publish_date.strftime("%A") if publish_date else None,
        publish_month=publish_date.strftime("%b") if publish_date else None,
        publish_year=publish_date.year if publish_date else None,
        data_fetched_at=fetched_at.strftime("%Y-%m-%d %H:%M:%S"),
    )


def records_to_frame(records: List[EpisodeRecord]) -> pd.DataFrame:
    """
    Assemble records into a DataFrame with the fixed output schema.

    Rows are ordered by publish date, newest first. Rows without a
    publish date go last and keep their feed order.
    """
    frame = pd.DataFrame([r.to_dict() for r in records], columns=EPISODE_COLUMNS)
    frame["publish_date"] = pd.to_datetime(frame["publish_date"], utc=True)
    frame["publish_year"] = frame["publish_year"].astype("Int64")
    frame["description_length"] = frame["description_length"].astype(int)

    frame = frame.sort_values(
        "publish_date", ascending=False, na_position="last", kind="mergesort"
    )
    return frame.reset_index(drop=True)


def process_episode_data(
    entries: Optional[Iterable[Mapping[str, Any]]],
    fetched_at: Optional[datetime] = None,
) -> Optional[pd.DataFrame]:
    """
    Normalize raw feed entries into the episode metadata table.

    Args:
        entries: Feed entries as returned by ``fetch_rss_feed``
        fetched_at: Fetch timestamp stamped on every row (default: now)

    Returns:
        DataFrame with EPISODE_COLUMNS, or None if there is nothing to process

    Example:
        >>> frame = process_episode_data(fetch_rss_feed(url))
        >>> frame[["episode_title", "publish_date"]].head()
    """
    if entries is None:
        logger.warning("No data to process")
        return None

    fetched_at = fetched_at or datetime.now()
    records = []
    for entry in entries:
        record = build_episode_record(entry, fetched_at)
        if record is not None:
            records.append(record)

    if not records:
        logger.warning("No data to process")
        return None

    frame = records_to_frame(records)
    logger.info("Processed %d episodes with metadata", len(frame))
    return frame
