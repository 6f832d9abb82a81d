"""
FastAPI application factory.

``create_app`` builds the application context from settings unless one is
passed in, stores it on ``app.state.context`` and mounts the routers.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from ai_summary import __version__
from ai_summary.api import router as api_router
from ai_summary.config import AppSettings, configure_logging, get_settings
from ai_summary.context import AppContext, build_context
from ai_summary.storage.cache import MemoryCacheBackend

logger = logging.getLogger(__name__)

MEMORY_SWEEP_INTERVAL = 86400


def uses_memory_backend(ctx: AppContext) -> bool:
    return isinstance(ctx.cache.backend, MemoryCacheBackend) or isinstance(
        ctx.rate_limiter.backend, MemoryCacheBackend
    )


async def sweep_periodically(ctx: AppContext, interval: float = MEMORY_SWEEP_INTERVAL) -> None:
    """Purge in-process cache entries on a fixed interval.

    The Celery beat sweep runs in the worker, so an API process holding a
    memory backend sweeps its own entries.
    """
    while True:
        await asyncio.sleep(interval)
        ctx.cache.purge_expired()
        if ctx.rate_limiter.backend is not ctx.cache.backend:
            ctx.rate_limiter.backend.purge_expired()


def create_app(
    settings: Optional[AppSettings] = None,
    context: Optional[AppContext] = None,
) -> FastAPI:
    if context is not None:
        settings = context.settings
    settings = settings or get_settings()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan_context(app: FastAPI):
        # Startup
        owns_context = getattr(app.state, "context", None) is None
        if owns_context:
            app.state.context = build_context(settings)
        ctx: AppContext = app.state.context
        logger.info(
            f"AI Summary service starting (provider={ctx.settings.provider}, "
            f"model={ctx.settings.model}, auto_generate={ctx.settings.auto_generate})"
        )
        sweeper = asyncio.create_task(sweep_periodically(ctx)) if uses_memory_backend(ctx) else None
        yield
        # Shutdown
        logger.info("AI Summary service stopping")
        if sweeper is not None:
            sweeper.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await sweeper
        if owns_context:
            ctx.engine.dispose()

    app = FastAPI(title="AI Summary", version=__version__, lifespan=lifespan_context)
    app.state.context = context
    app.include_router(api_router)
    return app


def get_app() -> FastAPI:
    """Application for ``uvicorn ai_summary.server:get_app --factory``."""
    return create_app()
