"""Centralized configuration using pydantic-settings."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import dotenv_values
from pydantic_settings import BaseSettings

from frontpage.exceptions import ConfigurationError


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # NYT Archive API
    nyt_api_key: str = ""
    nyt_api_key_file: str = "nyt_api_key.txt"

    # Local data files (relative paths resolve against the working directory)
    corrupted_pdfs_file: str = "corrupted-pdfs.json"
    historical_events_file: str = "historical-events.json"

    # Day One
    dayone_bin: str = "dayone2"
    journal_name: str = "The New York Times"
    historical_journal_name: str = "Historical Events"
    default_tag: str = "The New York Times"

    # HTTP (None = no timeout, matching the requests default)
    user_agent: str = (
        "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/605.1.15 "
        "(KHTML, like Gecko) Version/16.0 Safari/605.1.15"
    )
    http_timeout: float | None = None

    # Pacing (seconds)
    archive_retry_delay: float = 10
    batch_sleep: float = 7
    year_download_sleep: float = 2

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}


settings = Settings()


@dataclass(frozen=True)
class RunConfig:
    """Options governing a single entry-creation run."""

    date: str | None = None
    attach_pdf: bool = False
    attach_jpg: bool = True
    full_summary: bool = False
    journal_name: str = settings.journal_name
    add_default_tag: bool = True
    extra_tags: tuple[str, ...] = ()
    custom_headline: str = ""
    pdf_corrupted: bool = False
    mark_bad: bool = False


# pydantic-settings doesn't export .env values to os.environ, so the
# key lookup reads the .env file directly as a second source.
_dotenv_vars = dotenv_values(".env")


def resolve_api_key(key_file: Path | None = None) -> str:
    """Return the NYT API key from the environment, .env, or the key file.

    Raises:
        ConfigurationError: If no key can be found anywhere.
    """
    key = settings.nyt_api_key or os.environ.get("NYT_API_KEY", "") or _dotenv_vars.get("NYT_API_KEY") or ""
    if key.strip():
        return key.strip()

    path = key_file or Path(settings.nyt_api_key_file)
    if path.is_file():
        key = path.read_text(encoding="utf-8").strip()
        if key:
            return key

    raise ConfigurationError(
        "NYT API key not found. Either set the NYT_API_KEY environment "
        f"variable or create {path.name} in the current directory."
    )
