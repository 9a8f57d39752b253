"""
Database Package.

Provides the declarative base, engine and session helpers used by
the default persistence handler.
"""

from admin_generator.database.base import Base, TimestampMixin, CreatedAt, UpdatedAt
from admin_generator.database.engine import get_engine, close_engine
from admin_generator.database.session import (
    get_session_factory,
    get_db_session,
    session_scope,
    init_database,
    close_db_connections,
)

__all__ = [
    # Base
    "Base",
    "TimestampMixin",
    "CreatedAt",
    "UpdatedAt",
    # Engine
    "get_engine",
    "close_engine",
    # Session
    "get_session_factory",
    "get_db_session",
    "session_scope",
    "init_database",
    "close_db_connections",
]
