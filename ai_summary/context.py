"""
Explicitly constructed application context.

Everything the HTTP layer, the Celery tasks and the CLI need is built once
by ``build_context`` and passed around; there are no module-level service
singletons.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import httpx
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from ai_summary.config import AppSettings
from ai_summary.db.session import get_engine, get_sessionmaker
from ai_summary.documents import ContentRenderer, DocumentSource, ShortcodeStripper, SqlDocumentSource
from ai_summary.security import RateLimiter
from ai_summary.storage.cache import (
    CacheBackend,
    CachedSummaryStore,
    MemoryCacheBackend,
    NullCacheBackend,
    SummaryCache,
    create_cache_backend,
)
from ai_summary.storage.sql_storage import SqlSummaryStorage
from ai_summary.summarization.content import ContentPreparer
from ai_summary.summarization.prompt_builder import PromptBuilder
from ai_summary.summarization.providers import ProviderFactory
from ai_summary.summarization.response_parser import ResponseValidator
from ai_summary.summarization.service import GenerationPipeline

logger = logging.getLogger(__name__)


@dataclass
class AppContext:
    settings: AppSettings
    engine: Engine
    session_factory: sessionmaker[Session]
    documents: DocumentSource
    store: CachedSummaryStore
    cache: SummaryCache
    provider_factory: ProviderFactory
    pipeline: GenerationPipeline
    rate_limiter: RateLimiter


def build_context(
    settings: AppSettings,
    *,
    engine: Optional[Engine] = None,
    documents: Optional[DocumentSource] = None,
    cache_backend: Optional[CacheBackend] = None,
    renderer: Optional[ContentRenderer] = None,
    provider_factory: Optional[ProviderFactory] = None,
    http_client: Optional[httpx.Client] = None,
) -> AppContext:
    """Wire storage, cache, providers and the pipeline from settings.

    Any collaborator may be supplied directly; the rest are built from
    ``settings``.
    """
    engine = engine or get_engine(
        settings.database_url,
        pool_size=settings.database.pool_size,
        max_overflow=settings.database.max_overflow,
    )
    session_factory = get_sessionmaker(engine)

    backend = cache_backend or create_cache_backend(settings.cache)
    cache = SummaryCache(
        backend,
        summary_ttl=settings.cache.summary_ttl,
        api_response_ttl=settings.cache.api_response_ttl,
    )
    # A disabled cache still needs somewhere to count the hourly budget
    counter_backend = MemoryCacheBackend() if isinstance(backend, NullCacheBackend) else backend
    store = CachedSummaryStore(SqlSummaryStorage(session_factory), cache)
    documents = documents or SqlDocumentSource(session_factory)
    provider_factory = provider_factory or ProviderFactory(settings, client=http_client)

    pipeline = GenerationPipeline(
        documents,
        store,
        provider_factory,
        preparer=ContentPreparer(renderer or ShortcodeStripper(), settings.max_content_length),
        prompt_builder=PromptBuilder(settings.language),
        validator=ResponseValidator(),
        auto_generate=settings.auto_generate,
        bulk_delay=settings.bulk_delay_seconds,
        batch_delay=settings.batch_delay_seconds,
    )

    logger.info(
        f"Application context built (provider={settings.provider}, cache={settings.cache.backend})"
    )
    return AppContext(
        settings=settings,
        engine=engine,
        session_factory=session_factory,
        documents=documents,
        store=store,
        cache=cache,
        provider_factory=provider_factory,
        pipeline=pipeline,
        rate_limiter=RateLimiter(counter_backend, limit=settings.rate_limit_per_hour),
    )
