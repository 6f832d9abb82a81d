"""Response validation for summary generation."""
from __future__ import annotations

import logging
import re
from typing import Any, Iterable, List, Optional

from pydantic import BaseModel, Field, StrictStr
from pydantic import ValidationError as PydanticValidationError

from ai_summary.errors import ValidationError
from ai_summary.summarization.content import strip_markup, text_content

logger = logging.getLogger(__name__)

_INLINE_WHITESPACE = re.compile(r"[ \t\f\v]+")
_BLANK_LINES = re.compile(r"\n{3,}")


class FaqPayload(BaseModel):
    """FAQ entry as returned by a structured provider."""

    question: Optional[StrictStr] = None
    answer: Optional[StrictStr] = None


class SummaryPayload(BaseModel):
    """Structured provider output: ``{summary, key_points, faq}``."""

    summary: StrictStr
    key_points: List[StrictStr] = Field(default_factory=list)
    faq: List[FaqPayload] = Field(default_factory=list)


def sanitize_text_field(value: str) -> str:
    """Single-line text: tags removed, all whitespace collapsed."""
    return strip_markup(value or "")


def sanitize_textarea(value: str) -> str:
    """Multi-line text: tags removed, line breaks kept.

    Paragraphs are separated by a single blank line.
    """
    text = text_content(value or "", separator="\n")
    lines = [_INLINE_WHITESPACE.sub(" ", line).strip() for line in text.splitlines()]
    return _BLANK_LINES.sub("\n\n", "\n".join(lines)).strip()


class ResponseValidator:
    """Turns provider output into sanitized summary fields.

    Free-text providers only yield a summary. Structured providers must
    return JSON matching ``SummaryPayload``; anything else is rejected as a
    whole.
    """

    def validate_text(self, raw: str) -> SummaryPayload:
        """Accept free text as the summary, trimmed."""
        return SummaryPayload(summary=(raw or "").strip())

    def validate_json(self, raw: str) -> SummaryPayload:
        """Parse and sanitize a structured response.

        Raises:
            ValidationError: malformed JSON or a missing/non-string summary
        """
        try:
            payload = SummaryPayload.model_validate_json(raw)
        except PydanticValidationError as e:
            logger.warning(
                "Structured response failed schema validation",
                extra={"error": str(e)},
            )
            raise ValidationError("Malformed structured response", details={"errors": e.errors()}) from e

        return self.clean(payload.summary, payload.key_points, payload.faq)

    def validate(self, raw: str, *, structured: bool = False) -> SummaryPayload:
        return self.validate_json(raw) if structured else self.validate_text(raw)

    def clean(
        self,
        summary: str,
        key_points: Iterable[str] = (),
        faq: Iterable[Any] = (),
    ) -> SummaryPayload:
        """Sanitize fields, dropping empty key points and incomplete FAQ pairs.

        ``faq`` entries may be ``FaqPayload`` objects or plain mappings.
        """
        points = [sanitize_text_field(point) for point in key_points]
        items: List[FaqPayload] = []
        for entry in faq:
            if isinstance(entry, dict):
                question, answer = entry.get("question"), entry.get("answer")
            else:
                question, answer = entry.question, entry.answer
            if not question or not answer:
                continue
            question, answer = sanitize_text_field(question), sanitize_textarea(answer)
            if question and answer:
                items.append(FaqPayload(question=question, answer=answer))

        return SummaryPayload(
            summary=sanitize_textarea(summary),
            key_points=[point for point in points if point],
            faq=items,
        )
