"""
Host documents consumed by the summary pipeline.

Documents (articles, pages, products) are owned by the host platform. This
module only reads them: a ``DocumentSource`` resolves ids and slugs, and a
``ContentRenderer`` expands the host's embedded macros before the text is
normalized for summarization.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session, sessionmaker

from ai_summary.db.models import DocumentRow
from ai_summary.db.session import get_session

logger = logging.getLogger(__name__)

PUBLISHABLE_TYPES: tuple[str, ...] = ("post", "page", "product")
PUBLISHED_STATUS = "publish"


@dataclass
class DocumentImage:
    """Featured image of a document."""

    url: str
    width: Optional[int] = None
    height: Optional[int] = None


@dataclass
class Document:
    """Read-only view of a host document."""

    id: int
    slug: str
    title: str = ""
    body: str = ""
    status: str = "draft"
    doc_type: str = "post"
    author_name: Optional[str] = None
    author_url: Optional[str] = None
    permalink: Optional[str] = None
    published_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None
    categories: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)
    image: Optional[DocumentImage] = None
    # Product fields
    price: Optional[float] = None
    currency: Optional[str] = None
    in_stock: Optional[bool] = None
    sku: Optional[str] = None
    brand: Optional[str] = None
    product_category: Optional[str] = None

    @property
    def is_published(self) -> bool:
        return self.status == PUBLISHED_STATUS

    @property
    def is_publishable_type(self) -> bool:
        return self.doc_type in PUBLISHABLE_TYPES

    @property
    def is_product(self) -> bool:
        return self.doc_type == "product"


class DocumentSource(ABC):
    """Lookup interface over the host's content store."""

    @abstractmethod
    def get(self, document_id: int) -> Optional[Document]:
        """Return the document with this id, or None."""

    @abstractmethod
    def get_by_slug(self, slug: str) -> Optional[Document]:
        """Return the document with this slug, or None."""

    @abstractmethod
    def list_published(self, limit: int, offset: int = 0) -> list[Document]:
        """Return published documents of publishable types, ordered by id."""


class SqlDocumentSource(DocumentSource):
    """DocumentSource reading the ``documents`` table."""

    def __init__(self, session_factory: sessionmaker[Session]):
        self._session_factory = session_factory

    def get(self, document_id: int) -> Optional[Document]:
        with get_session(self._session_factory) as session:
            row = session.get(DocumentRow, document_id)
            return _row_to_document(row) if row is not None else None

    def get_by_slug(self, slug: str) -> Optional[Document]:
        with get_session(self._session_factory) as session:
            row = session.execute(
                select(DocumentRow).where(DocumentRow.slug == slug)
            ).scalar_one_or_none()
            return _row_to_document(row) if row is not None else None

    def list_published(self, limit: int, offset: int = 0) -> list[Document]:
        with get_session(self._session_factory) as session:
            rows = session.execute(
                select(DocumentRow)
                .where(
                    DocumentRow.status == PUBLISHED_STATUS,
                    DocumentRow.doc_type.in_(PUBLISHABLE_TYPES),
                )
                .order_by(DocumentRow.id)
                .limit(limit)
                .offset(offset)
            ).scalars().all()
            return [_row_to_document(row) for row in rows]


def _row_to_document(row: DocumentRow) -> Document:
    image = None
    if row.image_url:
        image = DocumentImage(
            url=row.image_url,
            width=row.image_width,
            height=row.image_height,
        )
    return Document(
        id=row.id,
        slug=row.slug,
        title=row.title or "",
        body=row.body or "",
        status=row.status,
        doc_type=row.doc_type,
        author_name=row.author_name,
        author_url=row.author_url,
        permalink=row.permalink,
        published_at=row.published_at,
        modified_at=row.modified_at,
        categories=list(row.categories or []),
        tags=list(row.tags or []),
        image=image,
        price=row.price,
        currency=row.currency,
        in_stock=row.in_stock,
        sku=row.sku,
        brand=row.brand,
        product_category=row.product_category,
    )


class ContentRenderer(ABC):
    """Expands host macros embedded in a document body."""

    @abstractmethod
    def render(self, document: Document) -> str:
        """Return the rendered body markup."""


class PassthroughRenderer(ContentRenderer):
    """Returns the body unchanged."""

    def render(self, document: Document) -> str:
        return document.body or ""


# [tag attr="x"]inner[/tag] keeps ``inner``; bare [tag ...] is dropped
_SHORTCODE_PAIR = re.compile(r"\[(\w[\w-]*)(?:\s[^\]]*)?\](.*?)\[/\1\]", re.DOTALL)
_SHORTCODE_SINGLE = re.compile(r"\[/?\w[\w-]*(?:\s[^\]]*)?/?\]")


class ShortcodeStripper(ContentRenderer):
    """Removes ``[tag ...]`` macros, keeping enclosed content."""

    def render(self, document: Document) -> str:
        body = document.body or ""
        previous = None
        while previous != body:
            previous = body
            body = _SHORTCODE_PAIR.sub(r"\2", body)
        return _SHORTCODE_SINGLE.sub("", body)
