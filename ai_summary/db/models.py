"""
SQLAlchemy ORM models for the AI Summary service.

``summary_records`` is owned by this service. ``documents`` mirrors the host
platform's content and is only ever read here.
"""

from __future__ import annotations

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Float,
    Index,
    Integer,
    JSON,
    String,
    Text,
    text as sa_text,
)
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class DocumentRow(Base):
    """Host document (article, page or product)."""

    __tablename__ = "documents"

    id = Column(Integer, primary_key=True, autoincrement=True)
    slug = Column(String(200), nullable=False, unique=True)
    title = Column(Text, nullable=False, server_default="")
    body = Column(Text, nullable=False, server_default="")
    status = Column(String(20), nullable=False, server_default="draft")
    doc_type = Column(String(20), nullable=False, server_default="post")
    author_name = Column(String, nullable=True)
    author_url = Column(Text, nullable=True)
    permalink = Column(Text, nullable=True)
    published_at = Column(DateTime(timezone=True), nullable=True)
    modified_at = Column(DateTime(timezone=True), nullable=True)
    categories = Column(JSON, nullable=True)
    tags = Column(JSON, nullable=True)
    # Featured image
    image_url = Column(Text, nullable=True)
    image_width = Column(Integer, nullable=True)
    image_height = Column(Integer, nullable=True)
    # Product fields
    price = Column(Float, nullable=True)
    currency = Column(String(8), nullable=True)
    in_stock = Column(Boolean, nullable=True)
    sku = Column(String, nullable=True)
    brand = Column(String, nullable=True)
    product_category = Column(String, nullable=True)

    __table_args__ = (
        Index("idx_documents_status_type", "status", "doc_type"),
    )


class SummaryRecordRow(Base):
    """AI-generated summary, key points and FAQ for one document."""

    __tablename__ = "summary_records"

    id = Column(Integer, primary_key=True, autoincrement=True)
    document_id = Column(Integer, nullable=False, unique=True)
    summary_text = Column(Text, nullable=False, server_default="")
    key_points = Column(JSON, nullable=True)
    faq_items = Column(JSON, nullable=True)
    provider = Column(String(32), nullable=True)
    generated_at = Column(DateTime(timezone=True), nullable=True)
    done = Column(Boolean, nullable=False, server_default=sa_text("false"))
    updated_at = Column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        Index("idx_summary_records_provider", "provider"),
    )
