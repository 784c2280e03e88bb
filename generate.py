"""Orchestrator: NYT front page and headlines for one date into a Day One entry."""

import argparse
import logging
import subprocess
import sys
import tempfile
import time
from datetime import date
from pathlib import Path

import requests

from config import RunConfig, resolve_api_key, settings
from frontpage import (
    archive_client,
    asset_fetcher,
    entry_composer,
    historical_events,
    journal_submitter,
)
from frontpage.corrupted_registry import CorruptedRegistry
from frontpage.dates import resolve_date
from frontpage.exceptions import (
    AssetDownloadFailed,
    DateValidationError,
    EntryCreationFailed,
    FrontPageError,
)
from frontpage.models import JournalEntry, SubmissionResult

logging.basicConfig(level=logging.INFO, format="%(asctime)s [%(name)s] %(levelname)s: %(message)s")
logger = logging.getLogger(__name__)


def create_entry(
    run: RunConfig,
    today: date | None = None,
    session: requests.Session | None = None,
    runner=subprocess.run,
    sleep=time.sleep,
) -> SubmissionResult:
    """Run the single-date pipeline.

    Steps:
        1. Resolve the date and check the corrupted-PDF registry
        2. Download the front page PDF and render a JPEG
        3. Fetch headlines (and the optional summary) from the Archive API
        4. Match a historical event for the previous day
        5. Compose the entry body
        6. Create the entry with dayone2

    Raises:
        DateValidationError: The date is malformed or too early.
        ConfigurationError: No API key is configured.
        AssetDownloadFailed: The front page could not be downloaded.
        EntryCreationFailed: Day One rejected the entry twice.
    """
    # 1. Date, key and registry, all before any network call
    ctx = resolve_date(run.date, today=today)
    logger.info("Step 1/6: Preparing entry for %s...", ctx.long_display)
    api_key = resolve_api_key()

    registry = CorruptedRegistry.load(Path(settings.corrupted_pdfs_file))
    if run.mark_bad:
        registry.mark(ctx.calendar_date)
    corrupted = run.pdf_corrupted or run.mark_bad or ctx.calendar_date in registry

    with tempfile.TemporaryDirectory(prefix="nyt-frontpage-") as tmp:
        workdir = Path(tmp)

        # 2. Front page
        asset = None
        if corrupted:
            logger.warning(
                "Step 2/6: PDF for %s is known to be corrupted. Skipping PDF/JPG processing.",
                ctx.iso,
            )
        elif run.attach_pdf or run.attach_jpg:
            logger.info("Step 2/6: Fetching front page...")
            try:
                asset = asset_fetcher.fetch_front_page(
                    ctx, workdir,
                    want_document=run.attach_pdf,
                    want_image=run.attach_jpg,
                    session=session,
                )
            except AssetDownloadFailed as e:
                logger.error("Failed to download NYT front page for %s: %s", ctx.iso, e)
                raise
        else:
            logger.info("Step 2/6: No attachments requested, skipping front page download")

        # 3. Headlines
        logger.info("Step 3/6: Extracting headlines for %s...", ctx.iso)
        headline_set = archive_client.fetch_headlines(
            ctx, api_key,
            full_summary=run.full_summary,
            today=today,
            session=session,
            sleep=sleep,
        )

        # 4. Historical event
        logger.info("Step 4/6: Checking for historical events...")
        events = historical_events.load_events(Path(settings.historical_events_file))
        event = historical_events.match_event(ctx, events)

        # 5. Compose
        logger.info("Step 5/6: Composing entry...")
        attachments = asset.attachments(run.attach_jpg, run.attach_pdf) if asset else []
        lead, remaining = entry_composer.resolve_lead(
            headline_set.headlines, event=event, custom_headline=run.custom_headline,
        )
        body = entry_composer.compose_body(
            ctx, lead, remaining,
            has_attachment=bool(attachments),
            corrupted=corrupted,
            summary=headline_set.summary if run.full_summary else None,
        )
        entry = JournalEntry(
            journal=run.journal_name,
            entry_date=ctx.iso,
            tags=journal_submitter.build_tags(
                add_default_tag=run.add_default_tag,
                extra_tags=run.extra_tags,
                historical_match=event is not None,
                corrupted=corrupted,
            ),
            attachments=tuple(attachments),
            body=body,
        )

        # 6. Submit
        logger.info("Step 6/6: Creating Day One entry...")
        try:
            result = journal_submitter.submit_entry(entry, runner=runner)
        except EntryCreationFailed as e:
            logger.error("Day One entry creation failed: %s", e)
            raise

    logger.info("Done! Entry created for %s with NYT front page and headlines.", ctx.iso)
    return result


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="nyt-to-dayone",
        description="Create a Day One entry with the NYT front page and headlines for a date.",
        add_help=False,
    )
    parser.add_argument("date", nargs="?", help="Date in YYYY-MM-DD format (default: today)")
    parser.add_argument("-h", "--help", action="store_true", help="Show this help message")
    parser.add_argument("--pdf", action="store_true", help="Also attach the PDF file (JPG only by default)")
    parser.add_argument("--full-summary", action="store_true", help="Include comprehensive NYT content analysis")
    parser.add_argument("--journal", default=settings.journal_name, metavar="NAME",
                        help=f"Day One journal name (default: {settings.journal_name})")
    parser.add_argument("--no-tag", action="store_true",
                        help=f'Don\'t add the default tag "{settings.default_tag}"')
    parser.add_argument("--tag", action="append", default=[], metavar="TAG",
                        help="Add additional tag (can be used multiple times)")
    parser.add_argument("--headline", default="", metavar="TEXT",
                        help="Replace the first headline with custom text")
    parser.add_argument("--bad-pdf", action="store_true",
                        help="Treat this date's PDF as corrupted for this run")
    parser.add_argument("--mark-bad", action="store_true",
                        help="Permanently register this date's PDF as corrupted")
    return parser


def run_config_from_args(args: argparse.Namespace) -> RunConfig:
    return RunConfig(
        date=args.date,
        attach_pdf=args.pdf,
        full_summary=args.full_summary,
        journal_name=args.journal,
        add_default_tag=not args.no_tag,
        extra_tags=tuple(args.tag),
        custom_headline=args.headline,
        pdf_corrupted=args.bad_pdf,
        mark_bad=args.mark_bad,
    )


def main(argv: list[str] | None = None) -> None:
    """Entry point for a single date."""
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.help:
        parser.print_help()
        sys.exit(1)

    try:
        result = create_entry(run_config_from_args(args))
    except DateValidationError as e:
        logger.error("%s", e)
        parser.print_usage()
        sys.exit(1)
    except EntryCreationFailed as e:
        sys.exit(e.returncode or 1)
    except FrontPageError as e:
        logger.error("Pipeline failed: %s", e)
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Interrupted.")
        sys.exit(130)

    if result.deep_link:
        print(f"View in Day One: {result.deep_link}")


if __name__ == "__main__":
    main()
