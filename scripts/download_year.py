#!/usr/bin/env python3
"""Download every NYT front page PDF for a year.

Usage:
    python scripts/download_year.py 2024
    python scripts/download_year.py 2024 --directory ~/NYT_2024 --sleep 3 --jpg
"""

import argparse
import logging
import sys
from pathlib import Path

# Ensure project root is on sys.path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from config import settings
from frontpage import batch
from frontpage.exceptions import FrontPageError

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(name)s] %(levelname)s: %(message)s")
logger = logging.getLogger("download_year")


def main():
    parser = argparse.ArgumentParser(description="Download all NYT front pages for a year.")
    parser.add_argument("year", type=int, help="Year to download (2012 or later)")
    parser.add_argument("-d", "--directory", type=Path, help="Output directory (default: ~/Downloads/NYT_YEAR)")
    parser.add_argument("-s", "--sleep", type=float, default=settings.year_download_sleep,
                        help=f"Seconds between downloads (default: {settings.year_download_sleep:g})")
    parser.add_argument("--jpg", action="store_true", help="Also render each PDF to JPG")
    args = parser.parse_args()

    output_dir = (args.directory or Path.home() / "Downloads" / f"NYT_{args.year}").expanduser()
    try:
        report = batch.download_year(args.year, output_dir, with_jpg=args.jpg, sleep_time=args.sleep)
    except FrontPageError as e:
        logger.error("%s", e)
        sys.exit(1)

    print(f"\n{'='*60}")
    print(f"NYT front pages for {args.year}: {report.successful} of {report.total} downloaded")
    print(f"  Output: {output_dir}")
    print(f"{'='*60}")


if __name__ == "__main__":
    main()
