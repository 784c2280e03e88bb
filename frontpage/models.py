"""Data models for the front page pipeline."""

from dataclasses import dataclass, field
from datetime import date
from pathlib import Path


@dataclass(frozen=True)
class DateContext:
    """Every representation of the newspaper date needed downstream."""

    calendar_date: date
    url_path: str  # YYYY/MM/DD
    archive_prefix: str  # YYYY-MM-DDT
    ordinal_display: str  # March 14th
    long_display: str  # Thursday, March 14, 2024
    archive_url: str

    @property
    def iso(self) -> str:
        return self.calendar_date.isoformat()

    @property
    def year(self) -> int:
        return self.calendar_date.year

    @property
    def month_index(self) -> int:
        return self.calendar_date.month

    @property
    def day(self) -> int:
        return self.calendar_date.day


@dataclass
class FetchedAsset:
    """Front page files living in the run's temporary directory."""

    document_path: Path
    image_path: Path | None = None

    def attachments(self, attach_jpg: bool, attach_pdf: bool) -> list[Path]:
        """Attachment order is always image first, then document."""
        files: list[Path] = []
        if attach_jpg and self.image_path is not None:
            files.append(self.image_path)
        if attach_pdf:
            files.append(self.document_path)
        return files


@dataclass
class ContentSummary:
    """Aggregate statistics for one day of archived articles."""

    total_articles: int
    longest_article: str
    sections: list[tuple[str, int]] = field(default_factory=list)
    opinions: list[str] = field(default_factory=list)
    keywords: list[str] = field(default_factory=list)


@dataclass
class HeadlineSet:
    """Headlines extracted from the archive for the newspaper date."""

    headlines: list[str] = field(default_factory=list)
    summary: ContentSummary | None = None
    attempts: int = 0


@dataclass(frozen=True)
class HistoricalEvent:
    """A curated event; the front page of the following day covers it."""

    date: str  # e.g. "January 6, 2021"
    event: str


@dataclass(frozen=True)
class JournalEntry:
    """A fully assembled Day One entry, submitted once."""

    journal: str
    entry_date: str  # YYYY-MM-DD
    tags: tuple[str, ...]
    attachments: tuple[Path, ...]
    body: str


@dataclass
class SubmissionResult:
    """Outcome of a successful Day One submission."""

    entry_uuid: str
    deep_link: str
    attempts: int = 1
    output: str = ""
