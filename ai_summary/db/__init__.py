"""
Database module for the AI Summary service.

Provides SQLAlchemy models and session management for summary records and
the mirrored host documents.
"""

from ai_summary.db.session import (
    check_connection,
    get_engine,
    get_session,
    get_sessionmaker,
    init_db,
)
from ai_summary.db.models import (
    Base,
    DocumentRow,
    SummaryRecordRow,
)

__all__ = [
    # Session management
    "check_connection",
    "get_engine",
    "get_session",
    "get_sessionmaker",
    "init_db",
    # SQLAlchemy models
    "Base",
    "DocumentRow",
    "SummaryRecordRow",
]
