"""
Data Mappers.

Apply incoming record data onto entity instances.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Dict, List, Optional

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.orm import Session

from admin_generator.database.coercion import coerce_column_value
from admin_generator.exceptions import BadRequestError

logger = logging.getLogger(__name__)


class DataMapper(ABC):
    """Interface for mapping request data onto an entity in place."""

    @abstractmethod
    def map_data(self, params: Dict[str, Any], entity: Any) -> None:
        pass


class DefaultDataMapper(DataMapper):
    """
    Maps record data onto a SQLAlchemy entity.

    - Column attributes are coerced to the column's python type.
    - Many-to-one relationships accept an identifier (or None).
    - To-many relationships accept a list of identifiers.
    - Primary key columns and unknown keys are ignored.

    Relationship identifiers are loaded through the session; without a
    session relationship keys are ignored.
    """

    def __init__(self, session: Optional[Session] = None) -> None:
        self._session = session

    def map_data(self, params: Dict[str, Any], entity: Any) -> None:
        if not isinstance(params, Mapping):
            raise BadRequestError("Record data must be a mapping.", path="/record", params=params)

        mapper = sa_inspect(type(entity))
        primary_keys = {column.key for column in mapper.primary_key}

        for key, value in params.items():
            if key in mapper.relationships:
                self._map_relationship(entity, key, mapper.relationships[key], value, params)
            elif key in mapper.columns:
                if key in primary_keys:
                    continue
                column = mapper.columns[key]
                try:
                    setattr(entity, key, coerce_column_value(column, value))
                except ValueError as e:
                    raise BadRequestError(str(e), path=f"/record/{key}", params=params) from e
            else:
                logger.debug(f"Ignoring unknown field '{key}' for {type(entity).__name__}")

    def _map_relationship(
        self,
        entity: Any,
        key: str,
        relationship: Any,
        value: Any,
        params: Dict[str, Any],
    ) -> None:
        if self._session is None:
            logger.debug(f"No session available, relationship '{key}' not mapped")
            return

        target_class = relationship.mapper.class_

        if relationship.uselist:
            if value is not None and not isinstance(value, (list, tuple)):
                raise BadRequestError(
                    f"'{key}' expects a list of identifiers.",
                    path=f"/record/{key}",
                    params=params,
                )
            ids: List[Any] = list(value or [])
            related = [self._load(target_class, identifier, key, params) for identifier in ids]
            setattr(entity, key, related)
        else:
            related = None if value is None else self._load(target_class, value, key, params)
            setattr(entity, key, related)

    def _load(self, target_class: type, identifier: Any, key: str, params: Dict[str, Any]) -> Any:
        if isinstance(identifier, Mapping):
            identifier = identifier.get("id")

        related = self._session.get(target_class, identifier)
        if related is None:
            raise BadRequestError(
                f"{target_class.__name__} with id '{identifier}' does not exist.",
                path=f"/record/{key}",
                params=params,
            )
        return related
