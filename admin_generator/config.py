"""
CRUD Controller Configuration.

Defines the strategy slots a controller configuration may override, their
default implementations, and the resolver merging overrides onto defaults.

Each strategy receives the stage's domain arguments plus the default
implementation of that stage, so an override can wrap or replace it:

    def create_entity(params, config, default_factory):
        article = default_factory.create(params, config)
        article.status = "draft"
        return article
"""

from collections.abc import Mapping
from typing import Any, Callable, Dict, Optional, Protocol, Type

from pydantic import BaseModel, ConfigDict, ValidationError

from admin_generator.data_mapping import DataMapper
from admin_generator.entity_factory import EntityFactory
from admin_generator.exception_handling import ExceptionHandler
from admin_generator.exceptions import ConfigurationError
from admin_generator.hydration import HydrationConfig
from admin_generator.persistence import OperationResult, PersistenceHandler
from admin_generator.validation import EntityValidator, ValidationResult


REQUIRED_KEYS = ("entity", "hydration")


# =============================================================================
# Strategy Interfaces
# =============================================================================


class CreateEntityStrategy(Protocol):
    def __call__(self, params: Dict[str, Any], config: "CrudConfig", default_factory: EntityFactory) -> Any:
        ...


class MapDataStrategy(Protocol):
    def __call__(self, record: Dict[str, Any], entity: Any, default_mapper: DataMapper) -> None:
        ...


class ValidatorStrategy(Protocol):
    def __call__(
        self,
        params: Dict[str, Any],
        entity: Any,
        default_validator: EntityValidator,
        config: "CrudConfig",
    ) -> ValidationResult:
        ...


class PersistEntityStrategy(Protocol):
    def __call__(self, entity: Any, params: Dict[str, Any], default_handler: PersistenceHandler) -> OperationResult:
        ...


class ExceptionHandlerStrategy(Protocol):
    def __call__(
        self,
        exception: Exception,
        operation: str,
        default_handler: ExceptionHandler,
    ) -> Optional[Dict[str, Any]]:
        ...


# =============================================================================
# Default Strategies
# =============================================================================


def default_create_entity(params, config, default_factory):
    return default_factory.create(params, config)


def default_map_data(record, entity, default_mapper):
    default_mapper.map_data(record, entity)


def default_validate(params, entity, default_validator, config):
    return default_validator.validate(entity, config)


def default_save_entity(entity, params, default_handler):
    return default_handler.save(entity)


def default_update_entity(entity, params, default_handler):
    return default_handler.update(entity)


def default_handle_exception(exception, operation, default_handler):
    return default_handler.create_response(exception, operation)


DEFAULT_CONFIG: Dict[str, Any] = {
    "create_entity": default_create_entity,
    "map_data_on_create": default_map_data,
    "map_data_on_update": default_map_data,
    "new_record_validator": default_validate,
    "updated_record_validator": default_validate,
    "save_entity_handler": default_save_entity,
    "update_entity_handler": default_update_entity,
    "exception_handler": default_handle_exception,
    # optional
    "ignore_standard_validator": False,
    # optional
    "entity_validation_method": "validate",
}


# =============================================================================
# Configuration Model
# =============================================================================


class CrudConfig(BaseModel):
    """
    Resolved, immutable controller configuration.

    Attributes:
        entity: Mapped entity class or model id.
        hydration: Profiles and groups used to hydrate responses.
        create_entity .. exception_handler: Pipeline strategies. Mapper and
            validator slots may be None to skip the stage.
        ignore_standard_validator: Skip column/schema validation.
        entity_validation_method: Entity method receiving the ValidationResult.
        validation_schema: Optional pydantic model checked against column values.

    Extra keys are kept and readable by custom strategies.
    """
    model_config = ConfigDict(frozen=True, extra="allow", arbitrary_types_allowed=True)

    entity: Any
    hydration: HydrationConfig

    create_entity: Callable[..., Any] = default_create_entity
    map_data_on_create: Optional[Callable[..., Any]] = default_map_data
    map_data_on_update: Optional[Callable[..., Any]] = default_map_data
    new_record_validator: Optional[Callable[..., Any]] = default_validate
    updated_record_validator: Optional[Callable[..., Any]] = default_validate
    save_entity_handler: Callable[..., Any] = default_save_entity
    update_entity_handler: Callable[..., Any] = default_update_entity
    exception_handler: Callable[..., Any] = default_handle_exception

    ignore_standard_validator: bool = False
    entity_validation_method: Optional[str] = "validate"
    validation_schema: Optional[Type[BaseModel]] = None

    def __getitem__(self, key: str) -> Any:
        try:
            return getattr(self, key)
        except AttributeError:
            raise KeyError(key)

    def get(self, key: str, default: Any = None) -> Any:
        return getattr(self, key, default)


def resolve_config(overrides: Optional[Mapping]) -> CrudConfig:
    """
    Shallow-merge `overrides` onto the defaults and validate the result.

    Raises:
        ConfigurationError: If a required key is missing or a value is invalid.
    """
    config = dict(DEFAULT_CONFIG)
    config.update(overrides or {})

    for key in REQUIRED_KEYS:
        if config.get(key) is None:
            raise ConfigurationError(f"'{key}' configuration property is not defined.")

    try:
        return CrudConfig.model_validate(config)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid CRUD configuration: {e}") from e
