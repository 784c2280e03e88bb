#!/usr/bin/env python3
"""Create Day One entries for every day in a date range or month.

Usage:
    python scripts/fetch_range.py 2025-01-01 2025-01-31
    python scripts/fetch_range.py --month 2025-01 --pdf
    python scripts/fetch_range.py 2025-01-15 2025-02-15 --journal "History"
"""

import argparse
import logging
import sys
from pathlib import Path

# Ensure project root is on sys.path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config import RunConfig, settings
from frontpage import batch
from frontpage.dates import parse_date
from frontpage.exceptions import FrontPageError
from generate import create_entry

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(name)s] %(levelname)s: %(message)s")
logger = logging.getLogger("fetch_range")


def main():
    parser = argparse.ArgumentParser(description="Fetch NYT front pages for a date range into Day One.")
    parser.add_argument("start", nargs="?", help="First date (YYYY-MM-DD)")
    parser.add_argument("end", nargs="?", help="Last date (YYYY-MM-DD)")
    parser.add_argument("--month", metavar="YYYY-MM", help="Fetch a whole month instead of a range")
    parser.add_argument("--pdf", action="store_true", help="Also attach the PDF file")
    parser.add_argument("--full-summary", action="store_true", help="Include comprehensive NYT content analysis")
    parser.add_argument("--journal", default=settings.journal_name, help="Day One journal name")
    parser.add_argument("--no-tag", action="store_true", help="Don't add the default tag")
    parser.add_argument("--tag", action="append", default=[], help="Additional tag (repeatable)")
    parser.add_argument("--sleep", type=float, default=settings.batch_sleep,
                        help=f"Seconds between dates (default: {settings.batch_sleep:g})")
    args = parser.parse_args()

    try:
        if args.month:
            start, end = batch.month_bounds(args.month)
        elif args.start and args.end:
            start, end = parse_date(args.start), parse_date(args.end)
        else:
            parser.error("START_DATE and END_DATE (or --month) are required")

        run = RunConfig(
            attach_pdf=args.pdf,
            full_summary=args.full_summary,
            journal_name=args.journal,
            add_default_tag=not args.no_tag,
            extra_tags=tuple(args.tag),
        )
        report = batch.run_range(start, end, run, create_entry, sleep_time=args.sleep)
    except FrontPageError as e:
        logger.error("%s", e)
        sys.exit(1)

    print(f"\nAll entries from {start} to {end} processed.")
    print("\n".join(report.lines()))
    if report.failed:
        sys.exit(1)


if __name__ == "__main__":
    main()
