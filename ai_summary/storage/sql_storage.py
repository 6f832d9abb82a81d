"""
SQLAlchemy-backed summary storage.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session, sessionmaker

from ai_summary.db.models import SummaryRecordRow
from ai_summary.db.session import get_session
from ai_summary.storage.summary_storage import (
    FaqItem,
    SummaryRecord,
    SummaryStorageProvider,
)

logger = logging.getLogger(__name__)


class SqlSummaryStorage(SummaryStorageProvider):
    """Durable tier over the ``summary_records`` table."""

    def __init__(self, session_factory: sessionmaker[Session]):
        self._session_factory = session_factory

    def get(self, document_id: int) -> Optional[SummaryRecord]:
        with get_session(self._session_factory) as session:
            row = self._find(session, document_id)
            return self._to_record(row) if row is not None else None

    def set(self, record: SummaryRecord) -> None:
        with get_session(self._session_factory) as session:
            row = self._find(session, record.document_id)
            if row is None:
                row = SummaryRecordRow(document_id=record.document_id)
                session.add(row)
            row.summary_text = record.summary_text
            row.key_points = list(record.key_points)
            row.faq_items = [item.to_dict() for item in record.faq_items]
            row.provider = record.provider
            row.generated_at = record.generated_at
            row.done = record.done
            row.updated_at = datetime.now(timezone.utc)

        logger.debug(
            "Stored summary record",
            extra={"document_id": record.document_id, "provider": record.provider},
        )

    def delete(self, document_id: int) -> bool:
        with get_session(self._session_factory) as session:
            result = session.execute(
                delete(SummaryRecordRow).where(SummaryRecordRow.document_id == document_id)
            )
            return (result.rowcount or 0) > 0

    def clear_all(self) -> int:
        with get_session(self._session_factory) as session:
            result = session.execute(delete(SummaryRecordRow))
            return result.rowcount or 0

    def stats(self) -> Dict[str, Any]:
        with get_session(self._session_factory) as session:
            rows = session.execute(
                select(SummaryRecordRow.provider, func.count())
                .where(
                    SummaryRecordRow.done.is_(True),
                    SummaryRecordRow.summary_text != "",
                )
                .group_by(SummaryRecordRow.provider)
            ).all()

        by_provider = {provider or "unknown": count for provider, count in rows}
        return {
            "total_summaries": sum(by_provider.values()),
            "by_provider": by_provider,
        }

    @staticmethod
    def _find(session: Session, document_id: int) -> Optional[SummaryRecordRow]:
        return session.execute(
            select(SummaryRecordRow).where(SummaryRecordRow.document_id == document_id)
        ).scalar_one_or_none()

    @staticmethod
    def _to_record(row: SummaryRecordRow) -> SummaryRecord:
        generated_at = row.generated_at
        # SQLite drops tzinfo on the way back
        if generated_at is not None and generated_at.tzinfo is None:
            generated_at = generated_at.replace(tzinfo=timezone.utc)
        return SummaryRecord(
            document_id=row.document_id,
            summary_text=row.summary_text or "",
            key_points=list(row.key_points or []),
            faq_items=[
                FaqItem(question=item["question"], answer=item["answer"])
                for item in row.faq_items or []
            ],
            provider=row.provider,
            generated_at=generated_at,
            done=bool(row.done),
        )
