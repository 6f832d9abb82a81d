"""
Utility helpers shared across the AI Summary service.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional
from urllib.parse import urlparse


def is_valid_url(url: str) -> bool:
    """Check if a string is a valid URL.

    Args:
        url: String to validate

    Returns:
        True if valid URL
    """
    try:
        parsed = urlparse(url)
        return bool(parsed.scheme and parsed.netloc)
    except Exception:
        return False


def is_iso8601(value: str) -> bool:
    """Check if a string is an ISO-8601 date or datetime.

    A trailing ``Z`` is accepted as UTC.
    """
    if not isinstance(value, str) or not value:
        return False
    candidate = value[:-1] + "+00:00" if value.endswith("Z") else value
    try:
        datetime.fromisoformat(candidate)
        return True
    except ValueError:
        return False


def isoformat(value: Optional[datetime]) -> Optional[str]:
    """Format a datetime as ISO-8601, passing None through."""
    return value.isoformat() if value is not None else None
