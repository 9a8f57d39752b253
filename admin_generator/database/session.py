"""
Database Session Management Module.

Provides synchronous session management using SQLAlchemy 2.0 patterns.
"""

from collections.abc import Generator, Iterator
from contextlib import contextmanager

from sqlalchemy.orm import Session, sessionmaker

from admin_generator.database.engine import get_engine, close_engine


# Global session factory (initialized lazily)
_session_factory: sessionmaker[Session] | None = None


def get_session_factory() -> sessionmaker[Session]:
    """
    Get or create the session factory.

    Returns:
        sessionmaker[Session]: Factory for creating database sessions.
    """
    global _session_factory

    if _session_factory is None:
        _session_factory = sessionmaker(
            bind=get_engine(),
            expire_on_commit=False,
            autoflush=False,
        )

    return _session_factory


def get_db_session() -> Generator[Session, None, None]:
    """
    FastAPI dependency for database session injection.

    Yields:
        Session: Database session that is closed after the request.
    """
    session_factory = get_session_factory()

    with session_factory() as session:
        try:
            yield session
        except Exception:
            session.rollback()
            raise


@contextmanager
def session_scope() -> Iterator[Session]:
    """
    Context manager for standalone sessions (scripts, CLI commands, tests).

    Commits on success, rolls back on error.

    Example:
        with session_scope() as session:
            article = session.get(Article, article_id)
    """
    session_factory = get_session_factory()

    with session_factory() as session:
        try:
            yield session
            session.commit()
        except Exception:
            session.rollback()
            raise


def init_database() -> None:
    """
    Initialize database schema.

    Creates all tables registered on Base.metadata if they don't exist.
    Models must be imported before calling this.
    """
    from admin_generator.database.base import Base

    Base.metadata.create_all(get_engine())


def close_db_connections() -> None:
    """
    Close all database connections.

    Should be called during application shutdown.
    """
    global _session_factory

    close_engine()
    _session_factory = None
