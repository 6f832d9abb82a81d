"""Prompt building for summary generation."""
from __future__ import annotations

import logging
from typing import Optional

logger = logging.getLogger(__name__)

DEFAULT_TEMPLATE = (
    "Please provide a concise summary of the following text in {language}. "
    "Focus on the main points and key information:\n\n{content}"
)


class PromptBuilder:
    """Builds the single instruction sent to every provider."""

    def __init__(self, language: str = "English", template: Optional[str] = None):
        """Initialize prompt builder.

        Args:
            language: Output language for the summary
            template: Format string with ``{language}`` and ``{content}`` fields
        """
        self.language = language
        self._template = template or DEFAULT_TEMPLATE

    def build(self, content: str) -> str:
        """Embed the normalized text into the instruction."""
        return self._template.format(language=self.language, content=content)
