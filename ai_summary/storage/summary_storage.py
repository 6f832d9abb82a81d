"""
Summary Storage Abstraction Layer

Defines the canonical SummaryRecord shape and the interface every durable
backend implements. One record per document, last write wins.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, List, Optional


@dataclass
class FaqItem:
    """One question/answer pair."""

    question: str
    answer: str

    def to_dict(self) -> Dict[str, str]:
        return {"question": self.question, "answer": self.answer}


@dataclass
class SummaryRecord:
    """Generated summary fields plus generation metadata for one document."""

    document_id: int
    summary_text: str = ""
    key_points: List[str] = field(default_factory=list)
    faq_items: List[FaqItem] = field(default_factory=list)
    provider: Optional[str] = None
    generated_at: Optional[datetime] = None
    done: bool = False

    @property
    def is_valid(self) -> bool:
        """Done and carrying a non-empty summary; not regenerated unless forced."""
        return self.done and bool(self.summary_text.strip())

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "document_id": self.document_id,
            "summary_text": self.summary_text,
            "key_points": list(self.key_points),
            "faq_items": [item.to_dict() for item in self.faq_items],
            "provider": self.provider,
            "generated_at": self.generated_at.isoformat() if self.generated_at else None,
            "done": self.done,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SummaryRecord":
        generated_at = data.get("generated_at")
        if isinstance(generated_at, str):
            generated_at = datetime.fromisoformat(generated_at)
        return cls(
            document_id=int(data["document_id"]),
            summary_text=data.get("summary_text") or "",
            key_points=list(data.get("key_points") or []),
            faq_items=[
                FaqItem(question=item["question"], answer=item["answer"])
                for item in data.get("faq_items") or []
            ],
            provider=data.get("provider"),
            generated_at=generated_at,
            done=bool(data.get("done", False)),
        )


class SummaryStorageProvider(ABC):
    """Abstract base class for durable summary storage."""

    @abstractmethod
    def get(self, document_id: int) -> Optional[SummaryRecord]:
        """Get the record for a document.

        Args:
            document_id: Host document id

        Returns:
            SummaryRecord if present, None otherwise
        """
        pass

    @abstractmethod
    def set(self, record: SummaryRecord) -> None:
        """Create or overwrite the record for ``record.document_id``."""
        pass

    @abstractmethod
    def delete(self, document_id: int) -> bool:
        """Delete the record for a document.

        Returns:
            True if a record was deleted
        """
        pass

    @abstractmethod
    def clear_all(self) -> int:
        """Delete every record.

        Returns:
            Number of records deleted
        """
        pass

    @abstractmethod
    def stats(self) -> Dict[str, Any]:
        """Return ``{"total_summaries": int, "by_provider": {name: count}}``."""
        pass
