"""Content extraction and normalization for summarization."""
from __future__ import annotations

import logging
import re

import lxml.html
from lxml import etree

from ai_summary.documents import ContentRenderer, Document, PassthroughRenderer
from ai_summary.errors import EmptyContentError

logger = logging.getLogger(__name__)

ELLIPSIS = "\u2026"
_WHITESPACE = re.compile(r"\s+")
# Characters lxml refuses in text nodes
_XML_INCOMPATIBLE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")

BLOCK_TAGS = frozenset({
    "address", "article", "aside", "blockquote", "dd", "div", "dl", "dt",
    "figcaption", "figure", "footer", "h1", "h2", "h3", "h4", "h5", "h6",
    "header", "hr", "li", "ol", "p", "pre", "section", "table", "td", "th",
    "tr", "ul",
})


def _collect_text(element, separator: str, parts: list[str]) -> None:
    tag = element.tag.lower() if isinstance(element.tag, str) else None
    if tag == "br":
        parts.append(separator)
    elif tag is not None:
        block = tag in BLOCK_TAGS
        if block:
            parts.append(separator)
        if element.text:
            parts.append(element.text)
        for child in element:
            _collect_text(child, separator, parts)
        if block:
            parts.append(separator)
    if element.tail:
        parts.append(element.tail)


def text_content(markup: str, separator: str = " ") -> str:
    """Return the raw text of an HTML fragment, tags removed.

    Block elements and ``<br>`` are bounded by ``separator``; inline markup
    leaves its text contiguous. Script and style bodies and comments are
    dropped entirely.
    """
    if not markup or not markup.strip():
        return ""
    root = lxml.html.fragment_fromstring(
        _XML_INCOMPATIBLE.sub(" ", markup), create_parent="div"
    )
    etree.strip_elements(root, etree.Comment, "script", "style", with_tail=False)
    parts: list[str] = []
    _collect_text(root, separator, parts)
    return "".join(parts)


def strip_markup(markup: str) -> str:
    """Return the text content of an HTML fragment with whitespace collapsed."""
    return _WHITESPACE.sub(" ", text_content(markup)).strip()


def truncate_text(text: str, max_length: int) -> str:
    """Bound ``text`` to ``max_length`` characters plus an ellipsis.

    The cut moves back to the last space when that space sits at or beyond
    80% of the window; otherwise the hard limit is used.
    """
    if len(text) <= max_length:
        return text
    window = text[:max_length]
    last_space = window.rfind(" ")
    if last_space != -1 and last_space >= max_length * 0.8:
        window = window[:last_space]
    return window + ELLIPSIS


class ContentPreparer:
    """Turns a document into bounded plain text for the provider prompt."""

    def __init__(self, renderer: ContentRenderer | None = None, max_length: int = 8000):
        self.renderer = renderer or PassthroughRenderer()
        self.max_length = max_length

    def prepare(self, document: Document) -> str:
        """Render, strip, collapse and truncate the document body.

        Raises:
            EmptyContentError: nothing is left after normalization
        """
        rendered = self.renderer.render(document)
        text = strip_markup(rendered)
        if not text:
            raise EmptyContentError(
                "No extractable content",
                details={"document_id": document.id},
            )

        truncated = truncate_text(text, self.max_length)
        if len(truncated) != len(text):
            logger.debug(
                f"Truncated content from {len(text)} to {len(truncated)} characters",
                extra={"document_id": document.id},
            )
        return truncated
