from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    error: str
    message: str


class FaqEntry(BaseModel):
    question: Optional[str] = None
    answer: Optional[str] = None


class SummaryRecordResponse(BaseModel):
    document_id: int
    summary_text: str
    key_points: List[str]
    faq_items: List[FaqEntry]
    provider: Optional[str] = None
    generated_at: Optional[datetime] = None
    done: bool


class RegeneratedFields(BaseModel):
    summary: str
    points: List[str]
    last_generated: Optional[datetime] = None


class RegenerateResponse(BaseModel):
    message: str
    data: RegeneratedFields


class RegenerateAllRequest(BaseModel):
    batch_size: int = Field(default=10, ge=1, le=100)
    offset: int = Field(default=0, ge=0)
    force: bool = Field(
        default=False,
        description="Regenerate documents that already have a summary.",
    )


class BatchProgressResponse(BaseModel):
    processed: int
    errors: int
    completed: bool
    next_offset: int


class ManualEditRequest(BaseModel):
    summary: str = ""
    key_points: List[str] = Field(default_factory=list)
    faq: List[FaqEntry] = Field(default_factory=list)


class DeleteResponse(BaseModel):
    deleted: bool


class SaveHookResponse(BaseModel):
    generated: bool


class CacheStats(BaseModel):
    transients: int
    size: int


class StatsResponse(BaseModel):
    total_summaries: int
    by_provider: Dict[str, int]
    cache: CacheStats


class CacheClearResponse(BaseModel):
    cleared: int


class CacheSweepResponse(BaseModel):
    purged: int
