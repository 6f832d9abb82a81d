"""
Celery tasks.

Each worker process builds one application context on first use.
"""

from __future__ import annotations

import logging

from ai_summary.celery_app import celery_app
from ai_summary.config import get_settings
from ai_summary.context import AppContext, build_context

logger = logging.getLogger(__name__)


def get_worker_context() -> AppContext:
    ctx = getattr(celery_app, "ai_summary_context", None)
    if ctx is None:
        ctx = build_context(get_settings())
        celery_app.ai_summary_context = ctx
    return ctx


@celery_app.task(name="ai_summary.generate_summary")
def generate_summary(document_id: int, force: bool = False) -> bool:
    """Generate a summary for one document (auto-generate on save)."""
    ctx = get_worker_context()
    ok = ctx.pipeline.generate(document_id, force=force)
    logger.info(
        f"Background generation {'succeeded' if ok else 'failed'}",
        extra={"document_id": document_id},
    )
    return ok


@celery_app.task(name="ai_summary.cleanup_expired_cache")
def cleanup_expired_cache() -> int:
    """Daily sweep of expired cache entries."""
    return get_worker_context().cache.purge_expired()
