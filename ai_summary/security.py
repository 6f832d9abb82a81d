"""
Per-caller generation budget.

Regeneration requests spend a fixed hourly budget per caller, counted in
the cache backend. The decision is local; no provider is contacted.
"""

from __future__ import annotations

import hashlib
import logging
from typing import Optional

from fastapi import Request

from ai_summary.storage.cache import KEY_PREFIX, CacheBackend

logger = logging.getLogger(__name__)

WINDOW_SECONDS = 3600


def get_client_identifier(request: Request) -> Optional[str]:
    """Get caller identifier for rate limiting.

    Prefers the ``X-User-Id`` header set by the authenticating proxy, then
    the first ``X-Forwarded-For`` hop, then the direct client address.
    """
    user_id = request.headers.get("X-User-Id")
    if user_id:
        return f"user:{user_id.strip()}"

    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    return request.client.host if request.client else None


class RateLimiter:
    """Fixed-window hourly call budget per caller."""

    def __init__(self, backend: CacheBackend, limit: int = 50, window: int = WINDOW_SECONDS):
        self.backend = backend
        self.limit = limit
        self.window = window

    def _key(self, caller: str) -> str:
        digest = hashlib.md5(caller.encode("utf-8")).hexdigest()
        return f"{KEY_PREFIX}rate_limit_{digest}"

    def check(self, caller: Optional[str]) -> bool:
        """Spend one call from the caller's budget.

        Returns:
            True if the call is allowed; False for anonymous callers or an
            exhausted budget
        """
        if not caller:
            return False
        try:
            count = self.backend.incr(self._key(caller), self.window)
        except Exception as e:
            logger.warning(f"Rate limit counter unavailable, allowing call: {e}")
            return True
        if count > self.limit:
            logger.warning(f"Rate limit exceeded for {caller}")
            return False
        return True
