"""
Pytest Configuration and Shared Fixtures.

Provides an in-memory database, sample entities and a concrete CRUD
controller for the test suite.
"""

from typing import Any, Dict, Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from admin_generator.controller import AbstractCrudController
from admin_generator.database import Base
from admin_generator.hydration import HydrationProfile
from admin_generator.persistence import SQLAlchemyPersistenceHandler
from admin_generator.settings import AdminGeneratorSettings, reset_settings

from blog_models import Article, Author, Tag


# =============================================================================
# Environment Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Drop cached settings and admin generator env vars around each test."""
    for name in (
        "APP_DEBUG",
        "APP_LOG_LEVEL",
        "APP_LOG_DIR",
        "DATABASE_URL",
        "DATABASE_ECHO",
        "API_PREFIX",
        "EXCEPTION_EXPOSE_MESSAGE",
    ):
        monkeypatch.delenv(name, raising=False)

    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def make_settings():
    """Factory fixture for settings with explicit values."""
    def _make(debug: bool = False, expose_message: bool = False, prefix: str = "/direct"):
        return AdminGeneratorSettings(
            _config={
                "app": {"debug": debug},
                "api": {"prefix": prefix},
                "exception": {"expose_message": expose_message},
            },
            _loaded=True,
        )

    return _make


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture
def engine():
    """In-memory SQLite engine shared across threads."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def session(engine):
    """Session bound to the in-memory engine."""
    factory = sessionmaker(bind=engine, expire_on_commit=False, autoflush=False)
    with factory() as session:
        yield session


@pytest.fixture
def author(session):
    author = Author(name="Ada", email="ada@example.com")
    session.add(author)
    session.commit()
    return author


@pytest.fixture
def tags(session):
    tags = [Tag(label="python"), Tag(label="sql")]
    session.add_all(tags)
    session.commit()
    return tags


@pytest.fixture
def articles(session, author):
    """Three persisted articles; the first two belong to `author`."""
    articles = [
        Article(title="Alpha", body="First article body", views=10, published=True, author=author),
        Article(title="Beta", body="Second", views=20, author=author),
        Article(title="Gamma", views=30),
    ]
    session.add_all(articles)
    session.commit()
    return articles


# =============================================================================
# Controller Fixtures
# =============================================================================


ARTICLE_HYDRATION: Dict[str, Any] = {
    "profiles": {
        "list": ["main"],
        "detail": ["main", "author"],
        "form": HydrationProfile.create(False).use_groups(["main", "author"]),
    },
    "groups": {
        "main": ["id", "title", "status"],
        "author": {"author_name": "author.name"},
    },
}


class ArticleController(AbstractCrudController):
    """Concrete controller over Article accepting configuration overrides."""

    def __init__(self, persistence_handler, overrides: Optional[Dict[str, Any]] = None, **kwargs):
        super().__init__(persistence_handler, **kwargs)
        self._overrides = overrides or {}

    def get_config(self) -> Dict[str, Any]:
        config: Dict[str, Any] = {
            "entity": Article,
            "hydration": ARTICLE_HYDRATION,
        }
        config.update(self._overrides)
        return config


@pytest.fixture
def make_controller(session, make_settings):
    """Factory fixture building an ArticleController over the test session."""
    from admin_generator.exception_handling import DefaultExceptionHandler

    def _make(
        overrides: Optional[Dict[str, Any]] = None,
        persistence_handler=None,
        **kwargs,
    ) -> ArticleController:
        kwargs.setdefault("exception_handler", DefaultExceptionHandler(make_settings()))
        return ArticleController(
            persistence_handler or SQLAlchemyPersistenceHandler(session),
            overrides,
            **kwargs,
        )

    return _make


@pytest.fixture
def controller(make_controller) -> ArticleController:
    return make_controller()
