"""
Persistence Handlers.

The narrow persistence interface consumed by CRUD controllers, and its
default implementation on top of a SQLAlchemy session.
"""

import logging
from abc import ABC, abstractmethod
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Union

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from admin_generator.exceptions import BadRequestError, PersistenceError
from admin_generator.persistence.model_manager import ModelManager, SQLAlchemyModelManager
from admin_generator.persistence.operation_result import OperationResult, OperationType
from admin_generator.persistence.query import apply_paging, apply_sorting, build_criteria, has_filter

logger = logging.getLogger(__name__)

EntityRef = Union[str, type]


class PersistenceHandler(ABC):
    """
    Abstract persistence backend used by CRUD controllers.

    `entity` arguments accept an entity class or a model id.
    """

    @abstractmethod
    def query(self, entity: EntityRef, params: Dict[str, Any]) -> List[Any]:
        """Entities matching the filter/sort/paging params."""
        pass

    @abstractmethod
    def get_count(self, entity: EntityRef, params: Dict[str, Any]) -> int:
        """Number of entities matching the filter params, ignoring paging."""
        pass

    @abstractmethod
    def save(self, entity: Any) -> OperationResult:
        """Persist a new entity."""
        pass

    @abstractmethod
    def update(self, entity: Any) -> OperationResult:
        """Persist changes of an existing entity."""
        pass

    @abstractmethod
    def remove(self, entity: EntityRef, params: Dict[str, Any]) -> OperationResult:
        """Remove entities matching the filter params."""
        pass

    def discard_changes(self, entity: Any) -> None:
        """Drop unsaved modifications of an entity (e.g. after failed validation)."""
        pass


class SQLAlchemyPersistenceHandler(PersistenceHandler):
    """
    Persistence handler backed by a SQLAlchemy ORM session.

    Each save/update/remove commits its own transaction; the session is
    rolled back when the backend fails and the error re-raised as
    PersistenceError.

    Usage:
        handler = SQLAlchemyPersistenceHandler(session)
        articles = handler.query(Article, {"filter": {"published": True}, "limit": 25})
    """

    def __init__(self, session: Session, model_manager: ModelManager | None = None) -> None:
        self._session = session
        self._model_manager = model_manager or SQLAlchemyModelManager()

    @property
    def session(self) -> Session:
        return self._session

    def query(self, entity: EntityRef, params: Dict[str, Any]) -> List[Any]:
        entity_class = self._model_manager.resolve_entity_class(entity)

        stmt = select(entity_class).where(*build_criteria(entity_class, params))
        stmt = apply_sorting(stmt, entity_class, params)
        stmt = apply_paging(stmt, params)

        return list(self._session.scalars(stmt).all())

    def get_count(self, entity: EntityRef, params: Dict[str, Any]) -> int:
        entity_class = self._model_manager.resolve_entity_class(entity)

        stmt = (
            select(func.count())
            .select_from(entity_class)
            .where(*build_criteria(entity_class, params))
        )
        return int(self._session.scalar(stmt) or 0)

    def discard_changes(self, entity: Any) -> None:
        """
        Roll back everything pending on the session.

        Mapped relationships dirty the related side as well (backref
        collections, cascaded pending objects).
        """
        self._session.rollback()
        logger.debug(f"Discarded pending changes of {type(entity).__name__}")

    def save(self, entity: Any) -> OperationResult:
        return self._persist(entity, OperationType.CREATED)

    def update(self, entity: Any) -> OperationResult:
        return self._persist(entity, OperationType.UPDATED)

    def remove(self, entity: EntityRef, params: Dict[str, Any]) -> OperationResult:
        if not has_filter(params):
            raise BadRequestError(
                "Refusing to remove records without a filter.",
                path="/filter",
                params=params,
            )

        result = OperationResult()
        with self._transaction(OperationType.REMOVED):
            for item in self.query(entity, params):
                result.report_entity(type(item), self._model_manager.get_identifier(item), OperationType.REMOVED)
                self._session.delete(item)
            self._session.flush()

        return result

    def _persist(self, entity: Any, operation: OperationType) -> OperationResult:
        with self._transaction(operation):
            self._session.add(entity)
            self._session.flush()
            identifier = self._model_manager.get_identifier(entity)

        return OperationResult().report_entity(type(entity), identifier, operation)

    @contextmanager
    def _transaction(self, operation: OperationType) -> Iterator[None]:
        try:
            yield
            self._session.commit()
        except SQLAlchemyError as e:
            self._session.rollback()
            logger.error(f"Persistence operation '{operation}' failed: {e}")
            raise PersistenceError(f"Unable to complete '{operation}' operation: {e}") from e

        logger.debug(f"Persistence operation '{operation}' committed")
