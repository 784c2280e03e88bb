"""NYT Archive API client: headlines and a content summary for one day.

The archive endpoint is month-granular, so every lookup downloads the whole
month and filters client-side on the publication timestamp prefix.
"""

import logging
import re
import time
from collections import Counter
from collections.abc import Callable
from datetime import date, timedelta

import requests
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from config import settings
from frontpage.exceptions import ArchiveFetchError
from frontpage.models import ContentSummary, DateContext, HeadlineSet
from frontpage.retry import RetryPolicy

logger = logging.getLogger(__name__)

ARCHIVE_URL = "https://api.nytimes.com/svc/archive/v1/{year}/{month}.json"

MAX_HEADLINES = 6
MAX_SECTIONS = 5
MAX_OPINIONS = 3
MAX_KEYWORDS = 10

RECENT_PLACEHOLDER = [
    "Headlines not yet available for recent dates",
    "Front page image is available for viewing",
]

# " By Jane Doe," / " by John Smith and Ann Lee"
BYLINE_PATTERN = re.compile(r" [Bb]y [^,]+,?")


class Headline(BaseModel):
    model_config = ConfigDict(extra="ignore")

    main: str | None = None


class Byline(BaseModel):
    model_config = ConfigDict(extra="ignore")

    original: str | None = None


class Keyword(BaseModel):
    model_config = ConfigDict(extra="ignore")

    name: str | None = None
    value: str | None = None
    rank: int | None = None


class ArchiveArticle(BaseModel):
    """One record from the archive response's docs array."""

    model_config = ConfigDict(extra="ignore")

    pub_date: str = ""
    headline: Headline = Field(default_factory=Headline)
    byline: Byline | None = None
    print_page: int | str | None = None
    type_of_material: str | None = None
    news_desk: str | None = None
    section_name: str | None = None
    word_count: int | None = None
    keywords: list[Keyword] = Field(default_factory=list)

    # Only a handful of fields are read; odd shapes elsewhere must not drop the record
    @field_validator("headline", mode="before")
    @classmethod
    def _headline_object(cls, value):
        return value if isinstance(value, dict) else {}

    @field_validator("byline", mode="before")
    @classmethod
    def _byline_object(cls, value):
        return value if isinstance(value, dict) else None

    @field_validator("keywords", mode="before")
    @classmethod
    def _keyword_objects(cls, value):
        return [k for k in value if isinstance(k, dict)] if isinstance(value, list) else []

    @field_validator("print_page", mode="before")
    @classmethod
    def _page_or_none(cls, value):
        return value if isinstance(value, (int, str)) else None

    @field_validator("word_count", mode="before")
    @classmethod
    def _count_or_none(cls, value):
        if isinstance(value, str) and value.strip().isdigit():
            return int(value)
        return value if isinstance(value, int) else None

    @field_validator("type_of_material", "news_desk", "section_name", mode="before")
    @classmethod
    def _text_or_none(cls, value):
        return value if isinstance(value, str) else None

    @property
    def title(self) -> str:
        return (self.headline.main or "").strip()

    @property
    def byline_text(self) -> str:
        return (self.byline.original or "") if self.byline else ""

    @property
    def is_front_page(self) -> bool:
        return str(self.print_page).strip() == "1"

    @property
    def is_opinion(self) -> bool:
        return (
            self.news_desk == "OpEd"
            or self.section_name == "Opinion"
            or self.type_of_material == "Op-Ed"
        )


def strip_byline(headline: str) -> str:
    """Remove author bylines from a headline. Applying it twice changes nothing."""
    while True:
        stripped = BYLINE_PATTERN.sub("", headline)
        if stripped == headline:
            return stripped
        headline = stripped


def fetch_month(
    year: int,
    month: int,
    api_key: str,
    session: requests.Session | None = None,
) -> list[ArchiveArticle]:
    """Download and parse one month of archive metadata.

    Raises:
        ArchiveFetchError: Network failure, error status, or an empty/invalid body.
    """
    http = session or requests
    url = ARCHIVE_URL.format(year=year, month=month)
    try:
        resp = http.get(url, params={"api-key": api_key}, timeout=settings.http_timeout)
        resp.raise_for_status()
        if not resp.content:
            raise ArchiveFetchError(f"Empty response from {url}")
        data = resp.json()
    except ArchiveFetchError:
        raise
    except (requests.RequestException, ValueError) as e:
        raise ArchiveFetchError(f"Archive request for {year}/{month} failed: {e}") from e

    response = data.get("response") if isinstance(data, dict) else None
    if not isinstance(response, dict):
        raise ArchiveFetchError(f"Unexpected archive payload for {year}/{month}: no response object")
    docs = response.get("docs") or []
    articles: list[ArchiveArticle] = []
    for doc in docs:
        try:
            articles.append(ArchiveArticle.model_validate(doc))
        except ValidationError as e:
            logger.debug("Skipping malformed archive record: %s", e)
    logger.info("Archive returned %d articles for %d/%d", len(articles), year, month)
    return articles


def articles_for_day(articles: list[ArchiveArticle], prefix: str) -> list[ArchiveArticle]:
    return [a for a in articles if a.pub_date.startswith(prefix)]


def select_headlines(day_articles: list[ArchiveArticle]) -> list[str]:
    """Front page articles first; hard news if the print page is unknown."""
    picked = [a for a in day_articles if a.is_front_page and a.title]
    if not picked:
        picked = [a for a in day_articles if a.type_of_material == "News" and a.title]
    return [strip_byline(a.title) for a in picked[:MAX_HEADLINES]]


def build_summary(day_articles: list[ArchiveArticle]) -> ContentSummary:
    """Aggregate one day's articles into a ContentSummary."""
    longest = max(day_articles, key=lambda a: a.word_count or 0)
    longest_text = f"{longest.word_count or 0} words | {longest.title} {longest.byline_text}".rstrip()

    sections: Counter[str] = Counter()
    keywords: Counter[str] = Counter()
    opinions: list[str] = []
    for article in day_articles:
        sections[article.section_name or "Uncategorized"] += 1
        keywords.update(k.value for k in article.keywords if k.value)
        if article.is_opinion and len(opinions) < MAX_OPINIONS:
            opinions.append(f"{article.title} {article.byline_text}".rstrip())

    return ContentSummary(
        total_articles=len(day_articles),
        longest_article=longest_text,
        sections=sections.most_common(MAX_SECTIONS),
        opinions=opinions,
        keywords=[value for value, _ in keywords.most_common(MAX_KEYWORDS)],
    )


def fetch_headlines(
    ctx: DateContext,
    api_key: str,
    full_summary: bool = False,
    today: date | None = None,
    retry_delay: float | None = None,
    session: requests.Session | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> HeadlineSet:
    """Extract the day's headlines (and optionally a summary) from the archive.

    Never raises for upstream problems: a failed or empty fetch degrades to
    placeholder or fallback content. The month fetch is retried exactly once
    after ``retry_delay`` seconds when nothing matched, unless the date is so
    recent the archive cannot have it yet.
    """
    today = today or date.today()
    recent = ctx.calendar_date in (today, today - timedelta(days=1))
    delay = settings.archive_retry_delay if retry_delay is None else retry_delay

    attempts = 0

    def attempt(n: int) -> tuple[list[ArchiveArticle], list[str]]:
        nonlocal attempts
        attempts = n
        if n > 1:
            logger.info("Retrying API fetch...")
        try:
            articles = fetch_month(ctx.year, ctx.month_index, api_key, session=session)
        except ArchiveFetchError as e:
            logger.error("Failed to fetch data from NYT Archive API: %s", e)
            return [], []
        day_articles = articles_for_day(articles, ctx.archive_prefix)
        return day_articles, select_headlines(day_articles)

    policy = RetryPolicy(
        max_attempts=2,
        delay=delay,
        retry_if=lambda result: not result[1] and not recent,
    )

    logger.info("Fetching data from NYT Archive API...")
    day_articles, headlines = policy.run(attempt, label="Archive headline lookup", sleep=sleep)

    result = HeadlineSet(headlines=headlines, attempts=attempts)
    if headlines:
        if attempts > 1:
            logger.info("Headlines found on retry!")
    elif recent:
        logger.info("Headlines not yet available from NYT Archive API for very recent dates")
        result.headlines = list(RECENT_PLACEHOLDER)
    else:
        logger.warning("Still no headlines found for %s after retry", ctx.iso)

    if full_summary and day_articles:
        result.summary = build_summary(day_articles)
    return result
