"""Resolve a requested newspaper date into every derived representation."""

import logging
import re
from collections.abc import Iterator
from datetime import date, datetime, timedelta

from frontpage.exceptions import DateOutOfRange, InvalidDateFormat
from frontpage.models import DateContext

logger = logging.getLogger(__name__)

# NYT front page PDFs are only reliably available from July 2012 onwards
EARLIEST_DATE = date(2012, 7, 1)

DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")

ARCHIVE_ISSUE_URL = "https://www.nytimes.com/issue/todayspaper/{path}/todays-new-york-times"


def ordinal_suffix(day: int) -> str:
    """Return the English ordinal suffix for a day of the month."""
    if 11 <= day % 100 <= 13:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")


def parse_date(value: str) -> date:
    """Parse a strict YYYY-MM-DD string.

    Raises:
        InvalidDateFormat: If the string is malformed or not a real day.
    """
    if not DATE_PATTERN.match(value or ""):
        raise InvalidDateFormat(f"Date must be in YYYY-MM-DD format: {value!r}")
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except ValueError as e:
        raise InvalidDateFormat(f"Not a valid calendar date: {value!r}") from e


def check_range(day: date) -> None:
    """Reject dates before front page PDFs exist."""
    if day < EARLIEST_DATE:
        raise DateOutOfRange(
            "NYT front page PDFs are only reliably available from July 2012 onwards; "
            f"the requested date ({day.isoformat()}) is too early for this service"
        )


def build_context(day: date) -> DateContext:
    """Derive URL path, archive prefix and display strings for a date."""
    url_path = f"{day.year}/{day.month:02d}/{day.day:02d}"
    return DateContext(
        calendar_date=day,
        url_path=url_path,
        archive_prefix=f"{day.isoformat()}T",
        ordinal_display=f"{day.strftime('%B')} {day.day}{ordinal_suffix(day.day)}",
        long_display=f"{day.strftime('%A, %B')} {day.day:02d}, {day.year}",
        archive_url=ARCHIVE_ISSUE_URL.format(path=url_path),
    )


def resolve_date(value: str | None = None, today: date | None = None) -> DateContext:
    """Turn an optional YYYY-MM-DD string into a DateContext.

    Args:
        value: Requested date; empty or None means today.
        today: Override for the current local date.

    Returns:
        The fully derived DateContext.

    Raises:
        InvalidDateFormat: Malformed date string.
        DateOutOfRange: Date earlier than 2012-07-01.
    """
    day = parse_date(value) if value else (today or date.today())
    check_range(day)
    logger.debug("Resolved date %s (%s)", day.isoformat(), day.strftime("%A"))
    return build_context(day)


def iter_dates(start: date, end: date) -> Iterator[date]:
    """Yield every day from start to end inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)
