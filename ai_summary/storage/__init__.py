"""
Storage layer for summary records.

Durable tier (SQL) plus an optional best-effort cache tier in front of it.
"""

from ai_summary.storage.summary_storage import (
    FaqItem,
    SummaryRecord,
    SummaryStorageProvider,
)
from ai_summary.storage.sql_storage import SqlSummaryStorage
from ai_summary.storage.cache import (
    CacheBackend,
    CachedSummaryStore,
    MemoryCacheBackend,
    NullCacheBackend,
    RedisCacheBackend,
    SummaryCache,
    create_cache_backend,
)

__all__ = [
    "FaqItem",
    "SummaryRecord",
    "SummaryStorageProvider",
    "SqlSummaryStorage",
    "CacheBackend",
    "CachedSummaryStore",
    "MemoryCacheBackend",
    "NullCacheBackend",
    "RedisCacheBackend",
    "SummaryCache",
    "create_cache_backend",
]
