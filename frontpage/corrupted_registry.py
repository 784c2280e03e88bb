"""Registry of dates whose front page PDF is known to be unusable."""

import json
import logging
from datetime import date
from pathlib import Path

from frontpage.dates import parse_date
from frontpage.exceptions import InvalidDateFormat, RegistryError

logger = logging.getLogger(__name__)

CORRUPTED_TAG = "Corrupted PDF"

# Known bad scans, used to seed a registry file that doesn't exist yet
DEFAULT_CORRUPTED = (
    "2018-01-10",
    "2018-01-11",
    "2018-01-12",
    "2018-01-13",
)


class CorruptedRegistry:
    """A JSON array of YYYY-MM-DD strings, read once and rewritten on mutation.

    There is no locking: concurrent runs touching the same file are unsupported.
    """

    def __init__(self, path: Path, dates: set[date] | None = None):
        self.path = path
        self._dates: set[date] = set(dates or ())

    @classmethod
    def load(cls, path: Path) -> "CorruptedRegistry":
        """Read the registry, seeding it with the known bad dates if missing."""
        if not path.exists():
            logger.debug("No registry at %s, using built-in list", path)
            return cls(path, {parse_date(d) for d in DEFAULT_CORRUPTED})

        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise RegistryError(f"Could not read corrupted-PDF registry {path}: {e}") from e
        if not isinstance(raw, list):
            raise RegistryError(f"{path} must contain a JSON array of dates")

        dates: set[date] = set()
        for value in raw:
            try:
                dates.add(parse_date(str(value)))
            except InvalidDateFormat:
                logger.warning("Ignoring invalid date %r in %s", value, path)
        return cls(path, dates)

    def __contains__(self, day: date) -> bool:
        return day in self._dates

    def dates(self) -> list[date]:
        return sorted(self._dates)

    def mark(self, day: date) -> bool:
        """Add a date and persist immediately.

        Returns:
            True if the date was added, False if it was already registered.
        """
        if day in self._dates:
            logger.info("%s is already registered as a corrupted PDF", day.isoformat())
            return False
        self._dates.add(day)
        self.save()
        logger.info("Registered %s as a corrupted PDF in %s", day.isoformat(), self.path)
        return True

    def save(self) -> None:
        """Rewrite the file sorted and deduplicated."""
        payload = [d.isoformat() for d in self.dates()]
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
        except OSError as e:
            raise RegistryError(f"Could not write corrupted-PDF registry {self.path}: {e}") from e
