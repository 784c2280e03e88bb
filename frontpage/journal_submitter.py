"""Create the Day One entry through the dayone2 command-line tool."""

import logging
import re
import subprocess
from collections.abc import Callable, Iterable

from config import settings
from frontpage.corrupted_registry import CORRUPTED_TAG
from frontpage.exceptions import EntryCreationFailed
from frontpage.historical_events import HISTORICAL_EVENT_TAG
from frontpage.models import JournalEntry, SubmissionResult
from frontpage.retry import RetryPolicy

logger = logging.getLogger(__name__)

JOURNAL_NOT_FOUND = "Invalid value(s) for option -j, --journal"
# sysexits EX_USAGE, returned for invalid option values
INVALID_OPTION_STATUS = 64

UUID_PATTERN = re.compile(r"uuid:\s*([A-Za-z0-9-]+)")
DEEP_LINK = "dayone://view?entryId={uuid}"

Runner = Callable[..., subprocess.CompletedProcess]


def build_tags(
    add_default_tag: bool = True,
    extra_tags: Iterable[str] = (),
    historical_match: bool = False,
    corrupted: bool = False,
    default_tag: str | None = None,
) -> tuple[str, ...]:
    """Assemble entry tags in the order they are added, without duplicates."""
    tags: list[str] = []
    if add_default_tag:
        tags.append(default_tag or settings.default_tag)
    tags.extend(extra_tags)
    if historical_match and add_default_tag:
        tags.append(HISTORICAL_EVENT_TAG)
    if corrupted and add_default_tag:
        tags.append(CORRUPTED_TAG)
    return tuple(dict.fromkeys(t for t in tags if t))


def build_command(entry: JournalEntry, use_journal: bool = True, dayone_bin: str | None = None) -> list[str]:
    """Argument list for dayone2; the body itself goes to stdin."""
    cmd = [dayone_bin or settings.dayone_bin]
    if use_journal and entry.journal:
        cmd += ["-j", entry.journal]
    cmd += ["-d", entry.entry_date, "--all-day"]
    if entry.tags:
        cmd += ["--tags", *entry.tags]
    if entry.attachments:
        cmd += ["-a", *(str(p) for p in entry.attachments), "--"]
    cmd.append("new")
    return cmd


def journal_not_found(result: subprocess.CompletedProcess) -> bool:
    output = (result.stdout or "") + (result.stderr or "")
    return JOURNAL_NOT_FOUND in output or result.returncode == INVALID_OPTION_STATUS


def extract_uuid(output: str) -> str:
    match = UUID_PATTERN.search(output or "")
    return match.group(1) if match else ""


def submit_entry(
    entry: JournalEntry,
    runner: Runner = subprocess.run,
    dayone_bin: str | None = None,
) -> SubmissionResult:
    """Create the entry in the requested journal, falling back to the default one.

    Returns:
        SubmissionResult with the entry UUID and deep link (empty if Day One
        did not print a UUID).

    Raises:
        EntryCreationFailed: Both attempts failed; carries the tool's output.
    """
    logger.info("Using journal: %s", entry.journal or "(default)")
    if entry.tags:
        logger.info("Tags to be applied: %s", ", ".join(entry.tags))
    else:
        logger.info("No tags will be applied")

    attempts = 0

    def attempt(n: int) -> subprocess.CompletedProcess:
        nonlocal attempts
        attempts = n
        use_journal = n == 1
        if not use_journal:
            logger.warning(
                "Journal '%s' not found, saving to default journal instead", entry.journal
            )
        cmd = build_command(entry, use_journal=use_journal, dayone_bin=dayone_bin)
        logger.debug("Running: %s", cmd)
        try:
            result = runner(cmd, input=entry.body, capture_output=True, text=True)
        except OSError as e:
            raise EntryCreationFailed(f"Could not run {cmd[0]}: {e}", returncode=127) from e
        logger.debug("dayone2 exit status %d: %s", result.returncode, result.stdout)
        return result

    policy = RetryPolicy(max_attempts=2, retry_if=journal_not_found)
    result = policy.run(attempt, label="Day One entry creation")

    output = ((result.stdout or "") + (result.stderr or "")).strip()
    if result.returncode != 0:
        logger.error("Failed to create Day One entry (exit code %d)", result.returncode)
        logger.error("Command output was: %s", output)
        raise EntryCreationFailed(
            f"Failed to create Day One entry (exit code {result.returncode}): {output}",
            returncode=result.returncode,
            output=output,
        )

    entry_uuid = extract_uuid(output)
    deep_link = DEEP_LINK.format(uuid=entry_uuid) if entry_uuid else ""
    if not entry_uuid:
        logger.warning("Entry was created but UUID could not be extracted from response.")

    return SubmissionResult(
        entry_uuid=entry_uuid,
        deep_link=deep_link,
        attempts=attempts,
        output=output,
    )
