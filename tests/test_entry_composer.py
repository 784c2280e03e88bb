"""Tests for entry_composer module."""

from frontpage.dates import resolve_date
from frontpage.entry_composer import (
    CORRUPTED_NOTICE,
    FALLBACK_LEAD,
    PHOTO_PLACEHOLDER,
    compose_body,
    resolve_lead,
)
from frontpage.models import ContentSummary, HistoricalEvent

HEADLINES = ["Extracted Lead", "Second", "Third"]


class TestResolveLead:
    def test_event_beats_custom_and_extracted(self):
        event = HistoricalEvent(date="January 6, 2021", event="Capitol Riots")
        lead, remaining = resolve_lead(HEADLINES, event=event, custom_headline="Custom")
        assert lead == "Capitol Riots"
        assert remaining == ["Extracted Lead", "Second", "Third"]

    def test_custom_beats_extracted(self):
        lead, remaining = resolve_lead(HEADLINES, custom_headline="Custom")
        assert lead == "Custom"
        assert remaining == ["Second", "Third"]

    def test_extracted_lead(self):
        lead, remaining = resolve_lead(HEADLINES)
        assert lead == "Extracted Lead"
        assert remaining == ["Second", "Third"]

    def test_fallback_label(self):
        assert resolve_lead([]) == (FALLBACK_LEAD, [])


class TestComposeBody:
    ctx = resolve_date("2025-01-15")

    def test_layout_with_image(self):
        body = compose_body(self.ctx, "Lead", ["Second", "Third"], has_attachment=True)
        assert body.splitlines() == [
            "#### The New York Times: January 15th",
            "Lead",
            PHOTO_PLACEHOLDER,
            "- Second",
            "- Third",
            "",
            self.ctx.archive_url,
        ]

    def test_no_placeholder_without_attachment(self):
        body = compose_body(self.ctx, "Lead", [], has_attachment=False)
        assert PHOTO_PLACEHOLDER not in body
        assert body.startswith("#### The New York Times: January 15th\nLead\n")

    def test_corrupted_notice_replaces_placeholder(self):
        body = compose_body(self.ctx, "Lead", ["Second"], has_attachment=True, corrupted=True)
        assert CORRUPTED_NOTICE in body
        assert PHOTO_PLACEHOLDER not in body
        assert body.index(CORRUPTED_NOTICE) < body.index("- Second")

    def test_summary_after_archive_link(self):
        summary = ContentSummary(
            total_articles=42,
            longest_article="5000 words | Long Read By Writer",
            sections=[("U.S.", 10), ("Uncategorized", 2)],
            opinions=["Op Ed By Columnist"],
            keywords=["Elections"],
        )
        body = compose_body(self.ctx, "Lead", [], has_attachment=False, summary=summary)
        assert body.index(self.ctx.archive_url) < body.index("### NYT Publication Summary")
        assert "- Total articles published: 42" in body
        assert "- Longest article: 5000 words | Long Read By Writer" in body
        assert f"- [View full archived issue]({self.ctx.archive_url})" in body
        assert "- U.S.: 10 articles" in body
        assert "- Uncategorized: 2 articles" in body
        assert "### Top Opinion Pieces\n- Op Ed By Columnist" in body
        assert body.endswith("### Trending Topics\n- Elections")
