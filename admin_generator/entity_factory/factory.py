"""
Entity Factories.

Create blank entity instances for the configured entity class.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict

from sqlalchemy import inspect as sa_inspect

from admin_generator.exceptions import EntityCreationError
from admin_generator.persistence.model_manager import ModelManager, SQLAlchemyModelManager


class EntityFactory(ABC):
    """Interface for entity factories."""

    @abstractmethod
    def create(self, params: Dict[str, Any], config: Any) -> Any:
        pass


class DefaultEntityFactory(EntityFactory):
    """
    Instantiates the configured entity class without arguments and fills
    columns that declare a scalar default, so new records show them before
    they are flushed.
    """

    def __init__(self, model_manager: ModelManager | None = None) -> None:
        self._model_manager = model_manager or SQLAlchemyModelManager()

    def create(self, params: Dict[str, Any], config: Any) -> Any:
        entity_class = self._model_manager.resolve_entity_class(config.entity)

        try:
            entity = entity_class()
        except TypeError as e:
            raise EntityCreationError(
                f"Unable to instantiate {entity_class.__name__} without arguments: {e}"
            ) from e

        for key, column in sa_inspect(entity_class).columns.items():
            default = column.default
            if default is not None and default.is_scalar and getattr(entity, key, None) is None:
                setattr(entity, key, default.arg)

        return entity
