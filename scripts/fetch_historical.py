#!/usr/bin/env python3
"""Create Day One entries for the events in historical-events.json.

Each entry uses the front page printed the day AFTER the event.

Usage:
    python scripts/fetch_historical.py
    python scripts/fetch_historical.py --dry-run
    python scripts/fetch_historical.py --start-date 2020-01-01 --event "Capitol"
    python scripts/fetch_historical.py --max-retries 5 --retry-delay 60
"""

import argparse
import logging
import sys
from pathlib import Path

# Ensure project root is on sys.path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config import RunConfig, settings
from frontpage import batch
from frontpage.exceptions import AssetDownloadFailed, EntryCreationFailed, FrontPageError
from frontpage.historical_events import load_events
from frontpage.retry import RetryPolicy
from generate import create_entry

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(name)s] %(levelname)s: %(message)s")
logger = logging.getLogger("fetch_historical")


def main():
    parser = argparse.ArgumentParser(description="Create Day One entries for historical events.")
    parser.add_argument("--events-file", default=settings.historical_events_file,
                        help="Path to historical-events.json")
    parser.add_argument("--journal", default=settings.historical_journal_name,
                        help=f"Day One journal name (default: {settings.historical_journal_name}; "
                             f"falls back to {settings.journal_name}, then the default journal)")
    parser.add_argument("--no-tag", action="store_true", help="Don't add the default tags")
    parser.add_argument("--pdf", action="store_true", help="Also attach the PDF file")
    parser.add_argument("--full-summary", action="store_true", help="Include comprehensive NYT content analysis")
    parser.add_argument("--dry-run", action="store_true", help="Show what would be done without creating entries")
    parser.add_argument("--sleep", type=float, default=settings.batch_sleep,
                        help=f"Seconds between events (default: {settings.batch_sleep:g})")
    parser.add_argument("--max-retries", type=int, default=3, help="Attempts per event (default: 3)")
    parser.add_argument("--retry-delay", type=float, default=30, help="Seconds between attempts (default: 30)")
    parser.add_argument("--start-date", help="Only events whose newspaper date is on/after this (YYYY-MM-DD)")
    parser.add_argument("--end-date", help="Only events whose newspaper date is on/before this (YYYY-MM-DD)")
    parser.add_argument("--event", default="", help="Only events whose text contains this")
    args = parser.parse_args()

    try:
        events = load_events(Path(args.events_file), required=True)
        run = RunConfig(
            attach_pdf=args.pdf,
            full_summary=args.full_summary,
            journal_name=args.journal,
            add_default_tag=not args.no_tag,
        )
        report = batch.run_historical(
            events, run, create_entry,
            start=batch.parse_optional_date(args.start_date),
            end=batch.parse_optional_date(args.end_date),
            only_event=args.event,
            dry_run=args.dry_run,
            sleep_time=args.sleep,
            retry=RetryPolicy(
                max_attempts=max(args.max_retries, 1),
                delay=args.retry_delay,
                retry_on=(AssetDownloadFailed, EntryCreationFailed),
            ),
        )
    except FrontPageError as e:
        logger.error("%s", e)
        sys.exit(1)

    print("\nHistorical events processing completed!")
    print("\n".join(report.lines()))


if __name__ == "__main__":
    main()
