"""Historical events: match a newspaper date to the event it reported on."""

import json
import logging
import re
from datetime import date, datetime, timedelta
from pathlib import Path

from frontpage.exceptions import ConfigurationError
from frontpage.models import DateContext, HistoricalEvent

logger = logging.getLogger(__name__)

HISTORICAL_EVENT_TAG = "Historical Event"

# Month-only dates ("March 2014") are pinned to the middle of the month
MONTH_ONLY_DAY = 15

_MONTH_ONLY = re.compile(r"^([A-Za-z]+)\s+(\d{4})$")


def format_event_date(day: date) -> str:
    """Format as in the events file: "January 6, 2021" (no zero padding)."""
    return f"{day.strftime('%B')} {day.day}, {day.year}"


def load_events(path: Path, required: bool = False) -> list[HistoricalEvent]:
    """Read the events JSON array, skipping malformed records.

    Args:
        path: Location of historical-events.json.
        required: Raise instead of returning [] when the file is missing.

    Raises:
        ConfigurationError: File missing (when required) or not a JSON array.
    """
    if not path.exists():
        if required:
            raise ConfigurationError(f"historical-events.json file not found at {path}")
        return []

    try:
        records = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"{path} is not valid JSON: {e}") from e
    if not isinstance(records, list):
        raise ConfigurationError(f"{path} must contain a JSON array of events")

    events: list[HistoricalEvent] = []
    for i, record in enumerate(records):
        if not isinstance(record, dict):
            logger.warning("Skipping event #%d: not an object", i + 1)
            continue
        event_date = str(record.get("Date", "")).strip()
        event_text = str(record.get("Event", "")).strip()
        if not event_date or not event_text:
            logger.warning("Skipping event #%d: missing Date or Event", i + 1)
            continue
        events.append(HistoricalEvent(date=event_date, event=event_text))
    return events


def match_event(ctx: DateContext, events: list[HistoricalEvent]) -> HistoricalEvent | None:
    """Find the event that the front page for ctx reported on.

    Newspapers cover the previous day, so the lookup key is the newspaper
    date minus one day. First match wins when the file has duplicates.
    """
    event_date = format_event_date(ctx.calendar_date - timedelta(days=1))
    for event in events:
        if event.date == event_date:
            logger.info(
                "Found historical event for newspaper date %s (event occurred on %s): %s",
                ctx.iso, event_date, event.event,
            )
            return event
    return None


def parse_event_date(text: str) -> date | None:
    """Parse the free-form dates used in the events file.

    Accepts "January 6, 2021", "Jan 6, 2021", "2021-01-06" and month-only
    "March 2014" (taken as the 15th). Returns None when nothing matches.
    """
    text = text.strip()
    for fmt in ("%B %d, %Y", "%b %d, %Y", "%Y-%m-%d"):
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    match = _MONTH_ONLY.match(text)
    if match:
        month, year = match.groups()
        for fmt in ("%B %d %Y", "%b %d %Y"):
            try:
                parsed = datetime.strptime(f"{month} {MONTH_ONLY_DAY} {year}", fmt).date()
            except ValueError:
                continue
            logger.info("Month-only date %r interpreted as %s", text, format_event_date(parsed))
            return parsed
    return None


def newspaper_date_for(event: HistoricalEvent) -> date | None:
    """The front page covering an event is the one printed the day after."""
    event_day = parse_event_date(event.date)
    if event_day is None:
        return None
    return event_day + timedelta(days=1)
