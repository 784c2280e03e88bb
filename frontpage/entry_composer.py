"""Compose the Day One entry body from headlines, event match and summary."""

from frontpage.models import ContentSummary, DateContext, HistoricalEvent

HEADER_PREFIX = "#### The New York Times"
FALLBACK_LEAD = "The New York Times"
PHOTO_PLACEHOLDER = "[{photo}]"
CORRUPTED_NOTICE = "**(PDF is corrupted)**"


def resolve_lead(
    headlines: list[str],
    event: HistoricalEvent | None = None,
    custom_headline: str = "",
) -> tuple[str, list[str]]:
    """Pick the lead line and the supporting headlines.

    Precedence: historical event > custom headline > first extracted
    headline > fallback label. An event pushes the first headline down into
    the supporting list; a custom headline simply replaces it.
    """
    first = headlines[0] if headlines else ""
    remaining = list(headlines[1:])

    if event is not None:
        if first:
            remaining.insert(0, first)
        return event.event, remaining
    if custom_headline:
        return custom_headline, remaining
    return first or FALLBACK_LEAD, remaining


def format_summary(summary: ContentSummary, archive_url: str) -> str:
    """Render the optional publication summary block."""
    sections = "\n".join(f"- {name}: {count} articles" for name, count in summary.sections)
    opinions = "\n".join(f"- {line}" for line in summary.opinions)
    keywords = "\n".join(f"- {word}" for word in summary.keywords)
    return (
        "### NYT Publication Summary\n"
        f"- Total articles published: {summary.total_articles}\n"
        f"- Longest article: {summary.longest_article}\n"
        f"- [View full archived issue]({archive_url})\n"
        "\n"
        "### Section Breakdown\n"
        f"{sections}\n"
        "\n"
        "### Top Opinion Pieces\n"
        f"{opinions}\n"
        "\n"
        "### Trending Topics\n"
        f"{keywords}"
    )


def compose_body(
    ctx: DateContext,
    lead: str,
    remaining: list[str],
    has_attachment: bool,
    corrupted: bool = False,
    summary: ContentSummary | None = None,
) -> str:
    """Build the entry text. Pure: same inputs, same body."""
    lines = [f"{HEADER_PREFIX}: {ctx.ordinal_display}", lead]
    if corrupted:
        lines += ["", CORRUPTED_NOTICE]
    elif has_attachment:
        lines.append(PHOTO_PLACEHOLDER)

    lines += [f"- {headline}" for headline in remaining]
    body = "\n".join(lines) + f"\n\n{ctx.archive_url}"

    if summary is not None:
        body += "\n\n" + format_summary(summary, ctx.archive_url)
    return body
