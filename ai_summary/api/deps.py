from __future__ import annotations

from fastapi import Request
from fastapi.responses import JSONResponse

from ai_summary.context import AppContext


def get_context(request: Request) -> AppContext:
    """Application context stored on ``app.state`` by ``create_app``."""
    return request.app.state.context


def error_response(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, "message": message})
