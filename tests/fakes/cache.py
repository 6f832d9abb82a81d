"""Cache fakes."""

from __future__ import annotations

from typing import Dict, Optional

import redis

from ai_summary.storage.cache import CacheBackend


class FakeClock:
    """Monotonic clock advanced by hand."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FailingCacheBackend(CacheBackend):
    """Backend whose every call fails like a dropped Redis connection."""

    def __init__(self):
        self.calls = 0

    def _fail(self):
        self.calls += 1
        raise redis.ConnectionError("connection refused")

    def get(self, key: str) -> Optional[str]:
        self._fail()

    def set(self, key: str, value: str, ttl: int) -> None:
        self._fail()

    def delete(self, key: str) -> None:
        self._fail()

    def incr(self, key: str, ttl: int) -> int:
        self._fail()

    def clear_prefix(self, prefix: str) -> int:
        self._fail()

    def purge_expired(self) -> int:
        self._fail()

    def stats(self, prefix: str) -> Dict[str, int]:
        self._fail()
