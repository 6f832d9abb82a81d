from fastapi import APIRouter

from ai_summary import __version__

router = APIRouter()


@router.get("/health")
def health():
    """Liveness check."""
    return {"status": "ok", "service": "ai-summary", "version": __version__}
