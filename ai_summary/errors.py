"""
Error taxonomy for summary generation and publication.

All of these are caught at the generation pipeline boundary and turned into
a boolean result plus a log entry; the HTTP layer maps the publication-side
ones onto status codes with a generic message.
"""

from __future__ import annotations

from typing import Any, Optional


class SummaryError(Exception):
    """Base exception for the AI Summary service."""

    error_code: str = "summary_error"

    def __init__(self, message: str, *, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class DocumentNotFound(SummaryError):
    """The requested document does not exist in the host platform."""

    error_code = "document_not_found"


class EmptyContentError(SummaryError):
    """Nothing left to summarize after normalization. Not retryable."""

    error_code = "empty_content"


class GenerationFailed(SummaryError):
    """Provider call failed: transport, timeout, non-200 or malformed body."""

    error_code = "generation_failed"


class ValidationError(SummaryError):
    """A structured provider response did not have the expected shape."""

    error_code = "validation_error"


class ConfigurationError(SummaryError):
    """Missing API key or unknown provider."""

    error_code = "configuration_error"


class RateLimitExceeded(SummaryError):
    """The caller spent the hourly generation budget."""

    error_code = "rate_limited"
