"""
Cache tier for summaries and raw provider responses.

The cache is best-effort: every backend error is logged and treated as a
miss, and a miss always falls through to the durable store. Keys follow
``ai_summary_<kind>_<md5(identifier)>``.
"""

from __future__ import annotations

import hashlib
import json
import logging
import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Iterable, Optional

import redis

from ai_summary.config import CacheSettings
from ai_summary.storage.summary_storage import SummaryRecord, SummaryStorageProvider

logger = logging.getLogger(__name__)

KEY_PREFIX = "ai_summary_"
KIND_SUMMARY = "summary"
KIND_API_RESPONSE = "api_response"


class CacheBackend(ABC):
    """Expiring key/value store holding string values."""

    @abstractmethod
    def get(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    def set(self, key: str, value: str, ttl: int) -> None:
        pass

    @abstractmethod
    def delete(self, key: str) -> None:
        pass

    @abstractmethod
    def incr(self, key: str, ttl: int) -> int:
        """Increment a counter, starting its expiry window on first use."""
        pass

    @abstractmethod
    def clear_prefix(self, prefix: str) -> int:
        """Delete every key starting with ``prefix``; returns the count."""
        pass

    @abstractmethod
    def purge_expired(self) -> int:
        """Drop expired entries; returns the count."""
        pass

    @abstractmethod
    def stats(self, prefix: str) -> Dict[str, int]:
        """Return ``{"count": n, "size": bytes}`` for keys under ``prefix``."""
        pass


class RedisCacheBackend(CacheBackend):
    """Redis-backed cache. Redis expires keys natively."""

    def __init__(self, client: "redis.Redis"):
        self._client = client

    @classmethod
    def from_url(cls, url: str) -> "RedisCacheBackend":
        return cls(redis.from_url(url, decode_responses=True))

    def get(self, key: str) -> Optional[str]:
        return self._client.get(key)

    def set(self, key: str, value: str, ttl: int) -> None:
        self._client.setex(key, ttl, value)

    def delete(self, key: str) -> None:
        self._client.delete(key)

    def incr(self, key: str, ttl: int) -> int:
        count = int(self._client.incr(key))
        if count == 1:
            self._client.expire(key, ttl)
        return count

    def clear_prefix(self, prefix: str) -> int:
        keys = list(self._client.scan_iter(match=f"{prefix}*"))
        if keys:
            self._client.delete(*keys)
        return len(keys)

    def purge_expired(self) -> int:
        return 0

    def stats(self, prefix: str) -> Dict[str, int]:
        count = 0
        size = 0
        for key in self._client.scan_iter(match=f"{prefix}*"):
            count += 1
            size += int(self._client.strlen(key) or 0)
        return {"count": count, "size": size}


class MemoryCacheBackend(CacheBackend):
    """In-process expiring dictionary.

    Expired entries read as misses but are only removed by ``purge_expired``.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._entries: Dict[str, tuple[str, float]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[str]:
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or entry[1] <= self._clock():
                return None
            return entry[0]

    def set(self, key: str, value: str, ttl: int) -> None:
        with self._lock:
            self._entries[key] = (value, self._clock() + ttl)

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def incr(self, key: str, ttl: int) -> int:
        with self._lock:
            now = self._clock()
            entry = self._entries.get(key)
            if entry is None or entry[1] <= now:
                count, expires_at = 1, now + ttl
            else:
                count, expires_at = int(entry[0]) + 1, entry[1]
            self._entries[key] = (str(count), expires_at)
            return count

    def clear_prefix(self, prefix: str) -> int:
        with self._lock:
            keys = [key for key in self._entries if key.startswith(prefix)]
            for key in keys:
                del self._entries[key]
            return len(keys)

    def purge_expired(self) -> int:
        with self._lock:
            now = self._clock()
            expired = [key for key, (_, expires_at) in self._entries.items() if expires_at <= now]
            for key in expired:
                del self._entries[key]
            return len(expired)

    def stats(self, prefix: str) -> Dict[str, int]:
        with self._lock:
            values = [value for key, (value, _) in self._entries.items() if key.startswith(prefix)]
        return {"count": len(values), "size": sum(len(v.encode("utf-8")) for v in values)}


class NullCacheBackend(CacheBackend):
    """Cache disabled: nothing is stored."""

    def get(self, key: str) -> Optional[str]:
        return None

    def set(self, key: str, value: str, ttl: int) -> None:
        return None

    def delete(self, key: str) -> None:
        return None

    def incr(self, key: str, ttl: int) -> int:
        return 1

    def clear_prefix(self, prefix: str) -> int:
        return 0

    def purge_expired(self) -> int:
        return 0

    def stats(self, prefix: str) -> Dict[str, int]:
        return {"count": 0, "size": 0}


def create_cache_backend(settings: CacheSettings) -> CacheBackend:
    """Build the backend named by ``settings.backend``."""
    if settings.backend == "memory":
        return MemoryCacheBackend()
    if settings.backend == "none":
        return NullCacheBackend()
    return RedisCacheBackend.from_url(settings.redis_url())


def cache_key(kind: str, identifier: Any) -> str:
    digest = hashlib.md5(str(identifier).encode("utf-8")).hexdigest()
    return f"{KEY_PREFIX}{kind}_{digest}"


class SummaryCache:
    """Typed access to summary and raw-response entries.

    All methods swallow backend errors after logging them; reads then
    behave as misses.
    """

    def __init__(
        self,
        backend: CacheBackend,
        *,
        summary_ttl: int = 86400,
        api_response_ttl: int = 3600,
    ):
        self.backend = backend
        self.summary_ttl = summary_ttl
        self.api_response_ttl = api_response_ttl

    def get_summary(self, document_id: int) -> Optional[SummaryRecord]:
        raw = self._get(cache_key(KIND_SUMMARY, document_id))
        if raw is None:
            return None
        try:
            return SummaryRecord.from_dict(json.loads(raw))
        except (ValueError, KeyError, TypeError) as e:
            logger.warning(f"Discarding unreadable cached summary: {e}", extra={"document_id": document_id})
            return None

    def set_summary(self, record: SummaryRecord, ttl: Optional[int] = None) -> None:
        self._set(
            cache_key(KIND_SUMMARY, record.document_id),
            json.dumps(record.to_dict()),
            ttl or self.summary_ttl,
        )

    def delete_summary(self, document_id: int) -> None:
        try:
            self.backend.delete(cache_key(KIND_SUMMARY, document_id))
        except Exception as e:
            logger.warning(f"Cache delete failed: {e}", extra={"document_id": document_id})

    def get_api_response(self, identifier: str) -> Optional[str]:
        return self._get(cache_key(KIND_API_RESPONSE, identifier))

    def set_api_response(self, identifier: str, response: str, ttl: Optional[int] = None) -> None:
        self._set(cache_key(KIND_API_RESPONSE, identifier), response, ttl or self.api_response_ttl)

    def clear_all(self) -> int:
        try:
            return self.backend.clear_prefix(KEY_PREFIX)
        except Exception as e:
            logger.error(f"Cache clear failed: {e}")
            return 0

    def purge_expired(self) -> int:
        try:
            purged = self.backend.purge_expired()
        except Exception as e:
            logger.error(f"Cache sweep failed: {e}")
            return 0
        logger.info(f"Purged {purged} expired cache entries")
        return purged

    def stats(self) -> Dict[str, int]:
        try:
            backend_stats = self.backend.stats(KEY_PREFIX)
        except Exception as e:
            logger.warning(f"Cache stats unavailable: {e}")
            backend_stats = {"count": 0, "size": 0}
        return {"transients": backend_stats["count"], "size": backend_stats["size"]}

    def _get(self, key: str) -> Optional[str]:
        try:
            return self.backend.get(key)
        except Exception as e:
            logger.warning(f"Cache read failed, treating as miss: {e}")
            return None

    def _set(self, key: str, value: str, ttl: int) -> None:
        try:
            self.backend.set(key, value, ttl)
        except Exception as e:
            logger.warning(f"Cache write failed: {e}")


class CachedSummaryStore:
    """SummaryStore: durable tier with the summary cache in front."""

    def __init__(self, storage: SummaryStorageProvider, cache: SummaryCache):
        self.storage = storage
        self.cache = cache

    def get(self, document_id: int) -> Optional[SummaryRecord]:
        cached = self.cache.get_summary(document_id)
        if cached is not None:
            return cached

        record = self.storage.get(document_id)
        if record is not None:
            self.cache.set_summary(record)
        return record

    def set(self, document_id: int, record: SummaryRecord, ttl: Optional[int] = None) -> None:
        record.document_id = document_id
        self.storage.set(record)
        self.cache.set_summary(record, ttl)

    def delete(self, document_id: int) -> bool:
        deleted = self.storage.delete(document_id)
        self.cache.delete_summary(document_id)
        return deleted

    def clear_all(self) -> int:
        removed = self.storage.clear_all()
        self.cache.clear_all()
        return removed

    def stats(self) -> Dict[str, Any]:
        return self.storage.stats()

    def preload(self, document_ids: Iterable[int]) -> int:
        """Warm the cache for the given documents; returns how many were cached."""
        warmed = 0
        for document_id in document_ids:
            record = self.storage.get(document_id)
            if record is not None and record.is_valid:
                self.cache.set_summary(record)
                warmed += 1
        return warmed
