"""
Model Manager.

Translates between entity classes and the model ids used by clients,
and reads identifiers from entity instances.
"""

import re
from abc import ABC, abstractmethod
from typing import Any, Optional, Type, Union

from sqlalchemy import inspect as sa_inspect
from sqlalchemy.exc import NoInspectionAvailable
from sqlalchemy.orm import DeclarativeBase

from admin_generator.database.base import Base
from admin_generator.exceptions import ConfigurationError


# Package segments dropped from model ids ("blog.models.Article" -> "blog.article")
_IGNORED_SEGMENTS = {"models", "model", "entities", "entity"}

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def _snake_case(name: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", name).lower()


class ModelManager(ABC):
    """Interface consulted when serializing operation results."""

    @abstractmethod
    def generate_model_id_from_entity_class(self, entity_class: type) -> str:
        """Client-facing model id for an entity class."""
        pass

    @abstractmethod
    def resolve_entity_class(self, entity: Union[str, type]) -> type:
        """Entity class for a class or model id."""
        pass

    @abstractmethod
    def get_identifier(self, entity: Any) -> Any:
        """Identifier of an entity instance."""
        pass


class SQLAlchemyModelManager(ModelManager):
    """
    Model manager for SQLAlchemy declarative models.

    Model ids are derived from the module path and the snake-cased class
    name, e.g. `blog.models.BlogPost` -> `blog.blog_post`.
    """

    def __init__(self, base: Type[DeclarativeBase] = Base) -> None:
        self._base = base

    def generate_model_id_from_entity_class(self, entity_class: type) -> str:
        segments = [
            segment for segment in entity_class.__module__.split(".")
            if segment not in _IGNORED_SEGMENTS
        ]
        segments.append(_snake_case(entity_class.__name__))
        return ".".join(segments)

    def resolve_entity_class(self, entity: Union[str, type]) -> type:
        """
        Resolve a mapped class from a class, a model id or a class name.

        Raises:
            ConfigurationError: If nothing mapped matches.
        """
        if isinstance(entity, type):
            try:
                sa_inspect(entity)
            except NoInspectionAvailable:
                raise ConfigurationError(f"Class {entity.__name__} is not a mapped entity.")
            return entity

        if isinstance(entity, str):
            for mapper in self._base.registry.mappers:
                entity_class = mapper.class_
                if entity in (
                    self.generate_model_id_from_entity_class(entity_class),
                    f"{entity_class.__module__}.{entity_class.__name__}",
                    entity_class.__name__,
                ):
                    return entity_class

        raise ConfigurationError(f"Unable to resolve entity '{entity}' to a mapped class.")

    def get_identifier(self, entity: Any) -> Optional[Any]:
        """
        Identifier of a mapped instance; a scalar for single-column keys,
        a list for composite keys, None before the key is generated.
        """
        state = sa_inspect(entity)
        identity = state.identity
        if identity is None:
            identity = state.mapper.primary_key_from_instance(entity)
            if all(part is None for part in identity):
                return None

        identity = list(identity)
        return identity[0] if len(identity) == 1 else identity
