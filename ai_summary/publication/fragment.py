"""
Inline HTML fragment for embedding a summary in page content.
"""

from __future__ import annotations

from html import escape
from typing import List

from ai_summary.storage.summary_storage import SummaryRecord


def parse_toggle(value: str | bool | None, default: bool = True) -> bool:
    """Interpret a ``yes``/``no`` attribute."""
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return value.strip().lower() in ("yes", "true", "1", "on")


def render_summary_fragment(
    record: SummaryRecord,
    show_summary: bool = True,
    show_key_points: bool = True,
    show_faq: bool = True,
) -> str:
    """Render the enabled sections of a record as escaped HTML.

    Sections with no content are omitted; an empty string means nothing
    to show.
    """
    sections: List[str] = []

    if show_summary and record.summary_text:
        sections.append(
            '<div class="ai-summary-section">'
            "<h3>Summary</h3>"
            f"<p>{escape(record.summary_text)}</p>"
            "</div>"
        )

    if show_key_points and record.key_points:
        items = "".join(f"<li>{escape(point)}</li>" for point in record.key_points)
        sections.append(
            '<div class="ai-keypoints-section">'
            "<h3>Key Points</h3>"
            f"<ul>{items}</ul>"
            "</div>"
        )

    if show_faq and record.faq_items:
        items = "".join(
            '<div class="faq-item">'
            f"<h4>{escape(item.question)}</h4>"
            f"<p>{escape(item.answer)}</p>"
            "</div>"
            for item in record.faq_items
        )
        sections.append(
            '<div class="ai-faq-section">'
            "<h3>FAQ</h3>"
            f"{items}"
            "</div>"
        )

    if not sections:
        return ""
    return '<div class="ai-summary-shortcode">' + "".join(sections) + "</div>"
