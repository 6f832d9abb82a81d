from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Union

from fastapi import APIRouter, Depends, Path, Query
from fastapi.responses import HTMLResponse, JSONResponse

from ai_summary.api.deps import error_response, get_context
from ai_summary.context import AppContext
from ai_summary.documents import Document
from ai_summary.publication.fragment import parse_toggle, render_summary_fragment
from ai_summary.publication.jsonld import build_json_ld, validate_json_ld

logger = logging.getLogger(__name__)

router = APIRouter()

SLUG_PATTERN = r"^[\w-]+$"


def not_found(message: str) -> JSONResponse:
    return error_response(404, "Post not found", message)


def server_error() -> JSONResponse:
    return error_response(500, "Server error", "An error occurred while retrieving the summary.")


def structured_data_for(
    ctx: AppContext, document: Document
) -> Union[Dict[str, Any], JSONResponse]:
    """JSON-LD for a published document, or the error response to send instead."""
    if not document.is_published:
        return error_response(404, "Post not available", "The requested post is not published.")

    record = ctx.store.get(document.id)
    if record is None or not record.summary_text.strip():
        return error_response(
            404, "No summary available", "No AI summary has been generated for this post."
        )

    data = build_json_ld(document, record, ctx.settings.site)
    errors = validate_json_ld(data)
    if errors:
        logger.error(
            "Structured data failed validation",
            extra={"document_id": document.id, "error": "; ".join(errors)},
        )
        return error_response(
            500, "Invalid structured data", "The structured data for this post failed validation."
        )
    return data


def _lookup(ctx: AppContext, document: Optional[Document], missing_message: str):
    if document is None or not document.is_publishable_type:
        return not_found(missing_message)
    return structured_data_for(ctx, document)


@router.get("/summary/id/{document_id}")
def summary_by_id(document_id: int, ctx: AppContext = Depends(get_context)):
    try:
        return _lookup(ctx, ctx.documents.get(document_id), "No post found with the specified ID.")
    except Exception:
        logger.exception("Summary lookup failed", extra={"document_id": document_id})
        return server_error()


@router.get("/summary/{slug}")
def summary_by_slug(
    slug: str = Path(..., pattern=SLUG_PATTERN),
    ctx: AppContext = Depends(get_context),
):
    try:
        return _lookup(ctx, ctx.documents.get_by_slug(slug), "No post found with the specified slug.")
    except Exception:
        logger.exception(f"Summary lookup failed for slug {slug}")
        return server_error()


@router.get("/fragment/{document_id}", response_class=HTMLResponse)
def summary_fragment(
    document_id: int,
    show_summary: str = Query(default="yes"),
    show_keypoints: str = Query(default="yes"),
    show_faq: str = Query(default="yes"),
    ctx: AppContext = Depends(get_context),
):
    """Embeddable HTML for a document's summary; empty when there is none."""
    document = ctx.documents.get(document_id)
    if document is None:
        return not_found("No post found with the specified ID.")

    record = ctx.store.get(document_id)
    if record is None:
        return HTMLResponse("")

    return HTMLResponse(
        render_summary_fragment(
            record,
            show_summary=parse_toggle(show_summary),
            show_key_points=parse_toggle(show_keypoints),
            show_faq=parse_toggle(show_faq),
        )
    )
