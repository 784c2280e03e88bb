"""Tests for the batch drivers."""

from datetime import date
from unittest.mock import MagicMock, patch

import pytest

from config import RunConfig
from frontpage import batch
from frontpage.exceptions import (
    AssetDownloadFailed,
    ConfigurationError,
    EntryCreationFailed,
    InvalidDateFormat,
)
from frontpage.models import HistoricalEvent, SubmissionResult
from frontpage.retry import RetryPolicy


def _ok(run):
    return SubmissionResult(entry_uuid="U", deep_link=f"dayone://view?entryId={run.date}")


class TestMonthBounds:
    def test_leap_february(self):
        assert batch.month_bounds("2024-02") == (date(2024, 2, 1), date(2024, 2, 29))

    def test_invalid(self):
        with pytest.raises(InvalidDateFormat):
            batch.month_bounds("2024-13")
        with pytest.raises(InvalidDateFormat):
            batch.month_bounds("January")


class TestRunRange:
    def test_one_entry_per_day_with_sleeps(self):
        create = MagicMock(side_effect=_ok)
        sleeps = []
        report = batch.run_range(
            date(2025, 1, 30), date(2025, 2, 2), RunConfig(attach_pdf=True), create,
            sleep_time=7, sleep=sleeps.append,
        )

        dates = [c.args[0].date for c in create.call_args_list]
        assert dates == ["2025-01-30", "2025-01-31", "2025-02-01", "2025-02-02"]
        assert all(c.args[0].attach_pdf for c in create.call_args_list)
        assert sleeps == [7, 7, 7]
        assert report.total == 4
        assert len(report.created) == 4

    def test_failure_does_not_stop_the_loop(self):
        def create(run):
            if run.date == "2025-01-02":
                raise EntryCreationFailed("Day One is not running")
            return _ok(run)

        report = batch.run_range(
            date(2025, 1, 1), date(2025, 1, 3), RunConfig(), create, sleep_time=0, sleep=lambda s: None,
        )
        assert [label for label, _ in report.created] == ["2025-01-01", "2025-01-03"]
        assert report.failed == [("2025-01-02", "Day One is not running")]
        assert report.lines()[0] == "Successfully created 2 of 3 entries."

    def test_start_after_end(self):
        with pytest.raises(InvalidDateFormat):
            batch.run_range(date(2025, 2, 1), date(2025, 1, 1), RunConfig(), _ok)


class TestRunHistorical:
    EVENTS = [
        HistoricalEvent("January 6, 2021", "Capitol riot"),
        HistoricalEvent("Someday", "Unparseable"),
        HistoricalEvent("July 20, 1969", "Moon landing"),
        HistoricalEvent("March 2020", "Lockdowns begin"),
    ]

    def test_creates_with_event_headline_and_tag(self):
        create = MagicMock(side_effect=_ok)
        report = batch.run_historical(
            self.EVENTS, RunConfig(extra_tags=("Mine",)), create, sleep_time=0, sleep=lambda s: None,
        )

        runs = [c.args[0] for c in create.call_args_list]
        assert [(r.date, r.custom_headline) for r in runs] == [
            ("2021-01-07", "Capitol riot"),
            ("2020-03-16", "Lockdowns begin"),
        ]
        assert runs[0].extra_tags == ("Mine", "Historical Event")
        assert len(report.created) == 2
        assert {reason for _, reason in report.skipped} == {
            "unparseable date 'Someday'", "before July 2012",
        }

    def test_dry_run_creates_nothing(self):
        create = MagicMock()
        report = batch.run_historical(self.EVENTS, RunConfig(), create, dry_run=True, sleep=lambda s: None)
        create.assert_not_called()
        assert ("Capitol riot", "dry run") in report.skipped

    def test_filters(self):
        create = MagicMock(side_effect=_ok)
        batch.run_historical(
            self.EVENTS, RunConfig(), create, only_event="capitol", sleep=lambda s: None,
        )
        assert create.call_count == 1

        create.reset_mock()
        batch.run_historical(
            self.EVENTS, RunConfig(), create, start=date(2021, 1, 1), sleep_time=0, sleep=lambda s: None,
        )
        assert [c.args[0].date for c in create.call_args_list] == ["2021-01-07"]

    def test_retries_failed_event(self):
        create = MagicMock(side_effect=[EntryCreationFailed("busy"), _ok(RunConfig(date="2021-01-07"))])
        sleeps = []
        report = batch.run_historical(
            self.EVENTS[:1], RunConfig(), create,
            retry=RetryPolicy(max_attempts=3, delay=30, retry_on=(EntryCreationFailed,)),
            sleep=sleeps.append,
        )
        assert create.call_count == 2
        assert sleeps == [30]
        assert len(report.created) == 1

    def test_no_tag_omits_historical_tag(self):
        create = MagicMock(side_effect=_ok)
        batch.run_historical(
            self.EVENTS[:1], RunConfig(add_default_tag=False, extra_tags=("Mine",)), create,
            sleep=lambda s: None,
        )
        run = create.call_args.args[0]
        assert run.add_default_tag is False
        assert run.extra_tags == ("Mine",)

    def test_historical_journal_falls_back_to_main_then_default(self):
        journals = []

        def create(run):
            journals.append(run.journal_name)
            if run.journal_name:
                raise EntryCreationFailed("Day One refused the entry")
            return _ok(run)

        report = batch.run_historical(
            self.EVENTS[:1], RunConfig(journal_name="Historical Events"), create,
            retry=RetryPolicy(max_attempts=1), sleep=lambda s: None,
        )
        assert journals == ["Historical Events", "The New York Times", ""]
        assert len(report.created) == 1

    def test_other_journals_do_not_fall_back(self):
        create = MagicMock(side_effect=EntryCreationFailed("refused"))
        report = batch.run_historical(
            self.EVENTS[:1], RunConfig(journal_name="Personal"), create,
            retry=RetryPolicy(max_attempts=1), sleep=lambda s: None,
        )
        assert create.call_count == 1
        assert report.failed == [("Capitol riot", "refused")]

    def test_configuration_errors_are_not_retried(self):
        create = MagicMock(side_effect=ConfigurationError("NYT API key not found"))
        sleeps = []
        report = batch.run_historical(self.EVENTS[:1], RunConfig(), create, sleep=sleeps.append)
        assert create.call_count == 1
        assert sleeps == []
        assert report.failed == [("Capitol riot", "NYT API key not found")]

    def test_gives_up_after_max_retries(self):
        create = MagicMock(side_effect=EntryCreationFailed("busy"))
        report = batch.run_historical(
            self.EVENTS[:1], RunConfig(), create,
            retry=RetryPolicy(max_attempts=2, delay=0, retry_on=(EntryCreationFailed,)),
            sleep=lambda s: None,
        )
        assert create.call_count == 2
        assert report.failed == [("Capitol riot", "busy")]


class TestDownloadYear:
    def _session(self, missing=()):
        def get(url, **kwargs):
            resp = MagicMock()
            if any(m in url for m in missing):
                resp.status_code = 404
                resp.content = b""
            else:
                resp.status_code = 200
                resp.content = b"%PDF"
            return resp

        session = MagicMock()
        session.get.side_effect = get
        return session

    def test_skips_future_days(self, tmp_path):
        session = self._session(missing=("2026/01/02",))
        report = batch.download_year(
            2026, tmp_path, today=date(2026, 1, 3), sleep_time=0, session=session, sleep=lambda s: None,
        )

        assert session.get.call_count == 3
        assert report.total == 3
        assert report.successful == 2
        assert report.per_month == {1: (2, 3)}
        assert sorted(p.name for p in tmp_path.iterdir()) == ["NYT_2026-01-01.pdf", "NYT_2026-01-03.pdf"]

    def test_with_jpg(self, tmp_path):
        def render(pdf_path):
            jpg = pdf_path.with_name("frontpage.jpg")
            jpg.write_bytes(b"jpg")
            return jpg

        with patch("frontpage.asset_fetcher.render_jpg", side_effect=render):
            batch.download_year(
                2026, tmp_path, with_jpg=True, today=date(2026, 1, 1),
                sleep_time=0, session=self._session(), sleep=lambda s: None,
            )
        assert sorted(p.name for p in tmp_path.iterdir()) == ["NYT_2026-01-01.jpg", "NYT_2026-01-01.pdf"]

    def test_year_too_early(self, tmp_path):
        with pytest.raises(InvalidDateFormat):
            batch.download_year(2011, tmp_path)


def test_asset_failure_is_counted_not_raised(tmp_path):
    with patch("frontpage.asset_fetcher.download_pdf", side_effect=AssetDownloadFailed("404")):
        report = batch.download_year(
            2026, tmp_path, today=date(2026, 1, 2), sleep_time=0, sleep=lambda s: None,
        )
    assert report.successful == 0
    assert report.total == 2


def test_journal_fallbacks():
    assert batch.journal_fallbacks("Historical Events") == ["Historical Events", "The New York Times", ""]
    assert batch.journal_fallbacks("The New York Times") == ["The New York Times"]
