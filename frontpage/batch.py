"""Batch drivers that run the single-date pipeline over many dates.

Every driver is strictly sequential and sleeps between dates to stay under
the NYT API rate limits. A failure on one date is logged and the loop moves
on to the next.
"""

import calendar
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import date
from pathlib import Path

import requests

from config import RunConfig, settings
from frontpage import asset_fetcher
from frontpage.dates import EARLIEST_DATE, build_context, check_range, iter_dates, parse_date
from frontpage.exceptions import (
    AssetDownloadFailed,
    EntryCreationFailed,
    FrontPageError,
    InvalidDateFormat,
)
from frontpage.historical_events import HISTORICAL_EVENT_TAG, newspaper_date_for
from frontpage.models import HistoricalEvent, SubmissionResult
from frontpage.retry import RetryPolicy

logger = logging.getLogger(__name__)

CreateEntry = Callable[[RunConfig], SubmissionResult]


@dataclass
class BatchReport:
    """What a batch run produced, for the closing summary."""

    total: int = 0
    created: list[tuple[str, str]] = field(default_factory=list)  # (label, deep link)
    failed: list[tuple[str, str]] = field(default_factory=list)  # (label, error)
    skipped: list[tuple[str, str]] = field(default_factory=list)  # (label, reason)

    def lines(self) -> list[str]:
        out = [f"Successfully created {len(self.created)} of {self.total} entries."]
        links = [f"{label}: {link}" for label, link in self.created if link]
        if links:
            out += ["", "Created Entries:", *links]
        if self.failed:
            out += ["", "Failed:", *(f"{label}: {error}" for label, error in self.failed)]
        return out


def month_bounds(value: str) -> tuple[date, date]:
    """First and last day of a YYYY-MM month."""
    try:
        year, month = (int(part) for part in value.split("-"))
        last_day = calendar.monthrange(year, month)[1]
    except (ValueError, calendar.IllegalMonthError) as e:
        raise InvalidDateFormat(f"Month must be in YYYY-MM format: {value!r}") from e
    return date(year, month, 1), date(year, month, last_day)


def run_range(
    start: date,
    end: date,
    run: RunConfig,
    create: CreateEntry,
    sleep_time: float | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> BatchReport:
    """Create one entry per day from start to end inclusive."""
    if start > end:
        raise InvalidDateFormat("START_DATE must be before END_DATE")
    check_range(start)

    pause = settings.batch_sleep if sleep_time is None else sleep_time
    days = list(iter_dates(start, end))
    report = BatchReport(total=len(days))
    logger.info("Fetching NYT entries from %s to %s (%d days)...", start, end, len(days))

    for i, day in enumerate(days, start=1):
        label = day.isoformat()
        logger.info("Processing: %s (%d of %d)", label, i, len(days))
        try:
            result = create(replace(run, date=label))
            report.created.append((label, result.deep_link))
        except FrontPageError as e:
            logger.error("Failed to create entry for %s: %s", label, e)
            report.failed.append((label, str(e)))

        if i < len(days):
            sleep(pause)
    return report


def journal_fallbacks(journal: str) -> list[str]:
    """Journals to try in order.

    Only the dedicated historical journal falls back, first to the main
    journal and then to Day One's default (empty name).
    """
    if journal != settings.historical_journal_name:
        return [journal]
    return list(dict.fromkeys([journal, settings.journal_name, ""]))


def create_in_journals(run: RunConfig, create: CreateEntry) -> SubmissionResult:
    """Create the entry, moving down the journal fallback chain on Day One failures."""
    journals = journal_fallbacks(run.journal_name)
    for journal, next_journal in zip(journals, journals[1:]):
        try:
            return create(replace(run, journal_name=journal))
        except EntryCreationFailed as e:
            logger.warning(
                "Failed to create entry in %r: %s. Retrying with %r...",
                journal, e, next_journal or "the default journal",
            )
    return create(replace(run, journal_name=journals[-1]))


def run_historical(
    events: list[HistoricalEvent],
    run: RunConfig,
    create: CreateEntry,
    start: date | None = None,
    end: date | None = None,
    only_event: str = "",
    dry_run: bool = False,
    sleep_time: float | None = None,
    retry: RetryPolicy | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> BatchReport:
    """Create an entry for each event on the day after it happened.

    The event text becomes the custom headline and the "Historical Event"
    tag is added. Failed events are retried per ``retry`` before moving on.
    """
    pause = settings.batch_sleep if sleep_time is None else sleep_time
    policy = retry or RetryPolicy(
        max_attempts=3, delay=30, retry_on=(AssetDownloadFailed, EntryCreationFailed),
    )
    selected = [e for e in events if not only_event or only_event.lower() in e.event.lower()]
    report = BatchReport(total=len(selected))
    logger.info("Found %d historical events to process.", len(selected))

    for i, event in enumerate(selected, start=1):
        logger.info("Processing event %d of %d: %s (%s)", i, len(selected), event.event, event.date)

        newspaper_date = newspaper_date_for(event)
        if newspaper_date is None:
            logger.warning("Could not parse date format for %r. Skipping event.", event.date)
            report.skipped.append((event.event, f"unparseable date {event.date!r}"))
            continue
        if newspaper_date < EARLIEST_DATE:
            logger.warning("Date %s is before July 2012. Skipping this event.", newspaper_date)
            report.skipped.append((event.event, "before July 2012"))
            continue
        if (start and newspaper_date < start) or (end and newspaper_date > end):
            logger.info("Skipping: newspaper date %s is outside the requested range", newspaper_date)
            report.skipped.append((event.event, "outside date range"))
            continue

        extra_tags = run.extra_tags
        if run.add_default_tag:
            extra_tags = (*extra_tags, HISTORICAL_EVENT_TAG)
        event_run = replace(
            run,
            date=newspaper_date.isoformat(),
            custom_headline=event.event,
            extra_tags=extra_tags,
        )
        if dry_run:
            logger.info("Dry run - would create entry for %s: %s", newspaper_date, event.event)
            report.skipped.append((event.event, "dry run"))
            continue

        try:
            result = policy.run(
                lambda _n: create_in_journals(event_run, create),
                label=f"Entry for {event.event!r}",
                sleep=sleep,
            )
            logger.info("Successfully created entry for %s", event.event)
            report.created.append((event.event, result.deep_link))
        except FrontPageError as e:
            logger.error("Failed to create entry for %s: %s", event.event, e)
            report.failed.append((event.event, str(e)))

        if i < len(selected):
            logger.info("Waiting %g seconds before next request (to avoid API rate limiting)...", pause)
            sleep(pause)
    return report


@dataclass
class DownloadReport:
    total: int = 0
    successful: int = 0
    per_month: dict[int, tuple[int, int]] = field(default_factory=dict)  # month -> (ok, attempted)


def download_year(
    year: int,
    output_dir: Path,
    with_jpg: bool = False,
    today: date | None = None,
    sleep_time: float | None = None,
    session: requests.Session | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> DownloadReport:
    """Save every available front page PDF of a year as NYT_YYYY-MM-DD.pdf.

    Days after ``today`` (local wall-clock date) and before July 2012 are
    skipped without a request.
    """
    if year < EARLIEST_DATE.year:
        raise InvalidDateFormat("NYT front page PDFs are only reliably available from 2012 onwards")

    today = today or date.today()
    pause = settings.year_download_sleep if sleep_time is None else sleep_time
    output_dir.mkdir(parents=True, exist_ok=True)
    report = DownloadReport()

    for month in range(1, 13):
        month_name = calendar.month_name[month]
        if date(year, month, 1) > today:
            logger.info("Skipping future month: %s %d", month_name, year)
            continue
        logger.info("Processing month: %s", month_name)
        ok = attempted = 0

        for day_num in range(1, calendar.monthrange(year, month)[1] + 1):
            day = date(year, month, day_num)
            if day > today or day < EARLIEST_DATE:
                continue
            ctx = build_context(day)
            dest = output_dir / f"NYT_{ctx.iso}.pdf"
            attempted += 1
            logger.info("Downloading front page for %s...", ctx.iso)
            try:
                asset_fetcher.download_pdf(asset_fetcher.front_page_url(ctx), dest, session=session)
                ok += 1
                if with_jpg:
                    jpg = asset_fetcher.render_jpg(dest)
                    if jpg is not None:
                        jpg.rename(dest.with_suffix(".jpg"))
            except AssetDownloadFailed as e:
                logger.warning("Could not download front page for %s: %s", ctx.iso, e)
                dest.unlink(missing_ok=True)
            sleep(pause)

        report.per_month[month] = (ok, attempted)
        report.total += attempted
        report.successful += ok
        logger.info("%s summary: %d of %d downloaded", month_name, ok, attempted)

    logger.info(
        "Download complete: %d of %d front pages saved to %s",
        report.successful, report.total, output_dir,
    )
    return report


def parse_optional_date(value: str | None) -> date | None:
    return parse_date(value) if value else None
