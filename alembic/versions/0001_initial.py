"""documents and summary records

Revision ID: 0001_initial
Revises: 
Create Date: 2026-10-19
"""

from __future__ import annotations

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'documents',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('slug', sa.String(length=200), nullable=False, unique=True),
        sa.Column('title', sa.Text(), nullable=False, server_default=''),
        sa.Column('body', sa.Text(), nullable=False, server_default=''),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='draft'),
        sa.Column('doc_type', sa.String(length=20), nullable=False, server_default='post'),
        sa.Column('author_name', sa.String(), nullable=True),
        sa.Column('author_url', sa.Text(), nullable=True),
        sa.Column('permalink', sa.Text(), nullable=True),
        sa.Column('published_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('modified_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('categories', sa.JSON(), nullable=True),
        sa.Column('tags', sa.JSON(), nullable=True),
        sa.Column('image_url', sa.Text(), nullable=True),
        sa.Column('image_width', sa.Integer(), nullable=True),
        sa.Column('image_height', sa.Integer(), nullable=True),
        sa.Column('price', sa.Float(), nullable=True),
        sa.Column('currency', sa.String(length=8), nullable=True),
        sa.Column('in_stock', sa.Boolean(), nullable=True),
        sa.Column('sku', sa.String(), nullable=True),
        sa.Column('brand', sa.String(), nullable=True),
        sa.Column('product_category', sa.String(), nullable=True),
    )
    op.create_index('idx_documents_status_type', 'documents', ['status', 'doc_type'])

    op.create_table(
        'summary_records',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('document_id', sa.Integer(), nullable=False, unique=True),
        sa.Column('summary_text', sa.Text(), nullable=False, server_default=''),
        sa.Column('key_points', sa.JSON(), nullable=True),
        sa.Column('faq_items', sa.JSON(), nullable=True),
        sa.Column('provider', sa.String(length=32), nullable=True),
        sa.Column('generated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('done', sa.Boolean(), nullable=False, server_default=sa.text('false')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=True),
    )
    op.create_index('idx_summary_records_provider', 'summary_records', ['provider'])


def downgrade() -> None:
    op.drop_index('idx_summary_records_provider', table_name='summary_records')
    op.drop_table('summary_records')
    op.drop_index('idx_documents_status_type', table_name='documents')
    op.drop_table('documents')
