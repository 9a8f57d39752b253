"""
Database Engine Management Module.

Provides a singleton Engine for the application, configured from
`database.url` / `database.echo` settings.
"""

import logging

from sqlalchemy import Engine, create_engine
from sqlalchemy.engine import make_url

from admin_generator.settings import get_settings

_logger = logging.getLogger(__name__)

# Global engine instance
_engine: Engine | None = None


def get_engine() -> Engine:
    """
    Get or create the database engine (singleton).

    Returns:
        Engine: SQLAlchemy engine instance.
    """
    global _engine

    if _engine is None:
        settings = get_settings()
        database_url = make_url(str(settings.get("database.url", "")))

        connect_args = {}
        if database_url.get_backend_name() == "sqlite":
            # Sessions may be handed across FastAPI's threadpool workers
            connect_args["check_same_thread"] = False

        _engine = create_engine(
            database_url,
            echo=bool(settings.get("database.echo", False)),
            pool_pre_ping=True,
            connect_args=connect_args,
        )
        _logger.info(f"Database engine created for {database_url.render_as_string(hide_password=True)}")

    return _engine


def close_engine() -> None:
    """
    Close the database engine and release all connections.

    Should be called during application shutdown.
    """
    global _engine

    if _engine is not None:
        _engine.dispose()
        _engine = None
