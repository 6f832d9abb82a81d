"""Unit tests for the inline summary fragment and robots rules."""

import pytest

from ai_summary.publication.fragment import parse_toggle, render_summary_fragment
from ai_summary.publication.robots import render_robots_txt
from ai_summary.storage.summary_storage import FaqItem, SummaryRecord


@pytest.fixture
def record():
    return SummaryRecord(
        document_id=1,
        summary_text="Tom & Jerry <script>",
        key_points=["One", "Two"],
        faq_items=[FaqItem("Why?", "Because.")],
        done=True,
    )


def test_renders_all_sections_escaped(record):
    html = render_summary_fragment(record)
    assert html.startswith('<div class="ai-summary-shortcode">')
    assert "<h3>Summary</h3><p>Tom &amp; Jerry &lt;script&gt;</p>" in html
    assert "<ul><li>One</li><li>Two</li></ul>" in html
    assert '<div class="faq-item"><h4>Why?</h4><p>Because.</p></div>' in html


def test_sections_can_be_toggled_off(record):
    html = render_summary_fragment(record, show_summary=False, show_faq=False)
    assert "ai-summary-section" not in html
    assert "ai-faq-section" not in html
    assert "ai-keypoints-section" in html


def test_nothing_to_show_is_empty(record):
    assert render_summary_fragment(record, False, False, False) == ""


@pytest.mark.parametrize("value, expected", [("yes", True), ("no", False), ("NO", False), (None, True), (False, False)])
def test_parse_toggle(value, expected):
    assert parse_toggle(value) is expected


def test_robots_rules_added_when_enabled():
    robots = render_robots_txt(enabled=True, public=True)
    assert "# AI Summary Plugin Rules" in robots
    assert "User-agent: GPTBot\nUser-agent: Google-Extended\nUser-agent: PerplexityBot\n" in robots
    assert "Allow: /*/ai-summary/" in robots
    assert "Allow: /ai/v1/" in robots


@pytest.mark.parametrize("enabled, public", [(False, True), (True, False)])
def test_robots_rules_omitted(enabled, public):
    assert "GPTBot" not in render_robots_txt(enabled=enabled, public=public)
