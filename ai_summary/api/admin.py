from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse

from ai_summary.api.deps import error_response, get_context
from ai_summary.api.models import (
    BatchProgressResponse,
    CacheClearResponse,
    CacheSweepResponse,
    DeleteResponse,
    ManualEditRequest,
    RegenerateAllRequest,
    RegenerateResponse,
    SaveHookResponse,
    StatsResponse,
    SummaryRecordResponse,
)
from ai_summary.context import AppContext
from ai_summary.errors import DocumentNotFound
from ai_summary.health import build_health_report
from ai_summary.security import get_client_identifier

logger = logging.getLogger(__name__)

router = APIRouter()


def _rate_limited(request: Request, ctx: AppContext) -> Optional[JSONResponse]:
    caller = get_client_identifier(request)
    if ctx.rate_limiter.check(caller):
        return None
    return error_response(
        429,
        "Rate limit exceeded",
        "Too many generation requests. Please try again later.",
    )


@router.post("/summaries/regenerate-all", response_model=BatchProgressResponse)
def regenerate_all(
    payload: RegenerateAllRequest,
    request: Request,
    ctx: AppContext = Depends(get_context),
):
    limited = _rate_limited(request, ctx)
    if limited is not None:
        return limited

    progress = ctx.pipeline.regenerate_batch(
        batch_size=payload.batch_size,
        offset=payload.offset,
        force=payload.force,
    )
    return BatchProgressResponse(**progress)


@router.post("/summaries/{document_id}/regenerate", response_model=RegenerateResponse)
def regenerate(document_id: int, request: Request, ctx: AppContext = Depends(get_context)):
    if ctx.documents.get(document_id) is None:
        raise HTTPException(status_code=404, detail="Document not found")

    limited = _rate_limited(request, ctx)
    if limited is not None:
        return limited

    if not ctx.pipeline.generate(document_id, force=True):
        return error_response(500, "Generation failed", "Failed to generate summary.")

    record = ctx.store.get(document_id)
    if record is None:
        return error_response(500, "Generation failed", "Failed to generate summary.")

    return {
        "message": "Summary regenerated successfully",
        "data": {
            "summary": record.summary_text,
            "points": record.key_points,
            "last_generated": record.generated_at,
        },
    }


@router.put("/summaries/{document_id}", response_model=SummaryRecordResponse)
def save_summary(
    document_id: int,
    payload: ManualEditRequest,
    ctx: AppContext = Depends(get_context),
):
    try:
        record = ctx.pipeline.save_manual_edit(
            document_id,
            payload.summary,
            payload.key_points,
            [entry.model_dump() for entry in payload.faq],
        )
    except DocumentNotFound:
        raise HTTPException(status_code=404, detail="Document not found")
    return record.to_dict()


@router.delete("/summaries/{document_id}", response_model=DeleteResponse)
def delete_summary(document_id: int, ctx: AppContext = Depends(get_context)):
    return DeleteResponse(deleted=ctx.pipeline.delete(document_id))


@router.post("/documents/{document_id}/saved", response_model=SaveHookResponse)
def document_saved(document_id: int, ctx: AppContext = Depends(get_context)):
    """Auto-generate hook called by the host after a document is saved."""
    return SaveHookResponse(generated=ctx.pipeline.maybe_generate_on_save(document_id))


@router.get("/stats", response_model=StatsResponse)
def stats(ctx: AppContext = Depends(get_context)):
    summary_stats = ctx.pipeline.stats()
    return {**summary_stats, "cache": ctx.cache.stats()}


@router.post("/cache/clear", response_model=CacheClearResponse)
def clear_cache(ctx: AppContext = Depends(get_context)):
    cleared = ctx.cache.clear_all()
    logger.info(f"Cleared {cleared} cache entries")
    return CacheClearResponse(cleared=cleared)


@router.post("/cache/sweep", response_model=CacheSweepResponse)
def sweep_cache(ctx: AppContext = Depends(get_context)):
    return CacheSweepResponse(purged=ctx.cache.purge_expired())


@router.get("/health")
def health(ctx: AppContext = Depends(get_context)):
    return build_health_report(ctx.settings, ctx.engine, ctx.cache).to_dict()
