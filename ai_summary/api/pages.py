from __future__ import annotations

import json
import logging

from fastapi import APIRouter, Depends, Path, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from ai_summary.api.deps import get_context
from ai_summary.api.summaries import SLUG_PATTERN, not_found, server_error, structured_data_for
from ai_summary.context import AppContext
from ai_summary.publication.robots import render_robots_txt
from ai_summary.security import get_client_identifier

logger = logging.getLogger(__name__)

router = APIRouter()

LD_JSON_HEADERS = {
    "Cache-Control": "public, max-age=3600",
    "X-Robots-Tag": "noindex, follow",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET",
    "Access-Control-Allow-Headers": "Content-Type",
}


@router.get("/robots.txt", response_class=PlainTextResponse)
def robots_txt(ctx: AppContext = Depends(get_context)):
    settings = ctx.settings
    return PlainTextResponse(
        render_robots_txt(enabled=settings.robots_txt_integration, public=settings.site.public)
    )


@router.get("/{slug}/ai-summary/")
def summary_page(
    request: Request,
    slug: str = Path(..., pattern=SLUG_PATTERN),
    ctx: AppContext = Depends(get_context),
):
    """JSON-LD page for crawlers, same body as the REST lookup."""
    try:
        document = ctx.documents.get_by_slug(slug)
        if document is None or not document.is_publishable_type:
            return not_found("No post found with the specified slug.")

        data = structured_data_for(ctx, document)
    except Exception:
        logger.exception(f"Summary page failed for slug {slug}")
        return server_error()

    if isinstance(data, JSONResponse):
        return data

    logger.info(
        f"AI summary page served to {get_client_identifier(request) or 'unknown'}",
        extra={"document_id": document.id},
    )
    return Response(
        content=json.dumps(data, ensure_ascii=False, indent=2),
        media_type="application/ld+json; charset=UTF-8",
        headers=LD_JSON_HEADERS,
    )
