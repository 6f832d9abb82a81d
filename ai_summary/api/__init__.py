from fastapi import APIRouter

from ai_summary.api.admin import router as admin_router
from ai_summary.api.misc import router as misc_router
from ai_summary.api.pages import router as pages_router
from ai_summary.api.summaries import router as summaries_router

API_PREFIX = "/ai/v1"

router = APIRouter()
router.include_router(misc_router)
router.include_router(summaries_router, prefix=API_PREFIX, tags=["summaries"])
router.include_router(admin_router, prefix="/admin", tags=["admin"])
# Catch-all slug route goes last
router.include_router(pages_router, tags=["pages"])

__all__ = ["router", "API_PREFIX"]
