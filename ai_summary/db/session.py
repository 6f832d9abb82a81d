"""
Database session management for the AI Summary service.

Provides SQLAlchemy engine and session factory configuration. Engines are
built explicitly from a URL and handed to the application context; nothing
here is a process-wide singleton.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ai_summary.db.models import Base


def get_engine(url: str, *, pool_size: int = 5, max_overflow: int = 10) -> Engine:
    """Create a SQLAlchemy Engine for the given URL.

    SQLite URLs (used for local runs and tests) get a static pool when they
    point at an in-memory database so every session shares one connection.

    Args:
        url: SQLAlchemy database URL
        pool_size: Connection pool size (ignored for SQLite)
        max_overflow: Pool overflow (ignored for SQLite)

    Returns:
        SQLAlchemy Engine instance
    """
    if url.startswith("sqlite"):
        kwargs: dict = {"connect_args": {"check_same_thread": False}}
        if ":memory:" in url or url in ("sqlite://", "sqlite+pysqlite://"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, future=True, **kwargs)

    return create_engine(
        url,
        pool_pre_ping=True,
        pool_size=pool_size,
        max_overflow=max_overflow,
        future=True,
    )


def get_sessionmaker(engine: Engine) -> sessionmaker[Session]:
    """Get a session factory bound to the engine.

    Returns:
        SQLAlchemy sessionmaker instance
    """
    return sessionmaker(
        bind=engine,
        autoflush=False,
        autocommit=False,
        expire_on_commit=False,
        future=True,
    )


@contextmanager
def get_session(session_factory: sessionmaker[Session]) -> Iterator[Session]:
    """Get a database session with automatic commit/rollback.

    Yields:
        SQLAlchemy Session instance

    Usage:
        with get_session(factory) as session:
            session.add(model)
    """
    session: Session = session_factory()
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(engine: Engine) -> None:
    """Initialize database tables.

    Creates all tables defined in the Base metadata.
    Should only be used for development/testing.
    Production should use Alembic migrations.
    """
    Base.metadata.create_all(bind=engine)


def check_connection(engine: Engine) -> bool:
    """Check if database connection is working.

    Returns:
        True if connection is successful
    """
    try:
        with engine.connect() as conn:
            conn.execute(text("SELECT 1"))
        return True
    except Exception:
        return False
