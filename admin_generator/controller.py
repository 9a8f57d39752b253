"""
Abstract CRUD Controller.

Base class exposing create/get/list/remove/update remote actions over an
entity. Subclasses only provide `get_config()`; every pipeline stage can be
overridden there without subclassing.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Mapping
from typing import Any, Callable, Dict, List, Optional

from admin_generator.config import CrudConfig, ValidatorStrategy, resolve_config
from admin_generator.data_mapping import DataMapper, DefaultDataMapper
from admin_generator.entity_factory import DefaultEntityFactory, EntityFactory
from admin_generator.exception_handling import DefaultExceptionHandler, ExceptionHandler
from admin_generator.exceptions import BadRequestError, EntityCreationError
from admin_generator.hydration import HydrationService
from admin_generator.persistence import (
    ModelManager,
    OperationResult,
    PersistenceHandler,
    SQLAlchemyModelManager,
)
from admin_generator.validation import EntityValidator

logger = logging.getLogger(__name__)


class AbstractCrudController(ABC):
    """
    Generic CRUD controller.

    Example:
        class ArticleController(AbstractCrudController):
            def get_config(self):
                return {
                    "entity": Article,
                    "hydration": {
                        "profiles": {"list": ["main"]},
                        "groups": {"main": ["id", "title"]},
                    },
                }

        controller = ArticleController(SQLAlchemyPersistenceHandler(session))
        controller.list_action({"hydration": {"profile": "list"}, "limit": 25})

    Every action takes one params mapping and returns a response mapping
    containing `success`. Malformed requests raise BadRequestError; other
    failures are passed to the configured exception handler and re-raised
    when it cannot classify them.
    """

    def __init__(
        self,
        persistence_handler: PersistenceHandler,
        model_manager: Optional[ModelManager] = None,
        hydration_service: Optional[HydrationService] = None,
        entity_factory: Optional[EntityFactory] = None,
        data_mapper: Optional[DataMapper] = None,
        entity_validator: Optional[EntityValidator] = None,
        exception_handler: Optional[ExceptionHandler] = None,
    ) -> None:
        self._persistence_handler = persistence_handler
        self._model_manager = model_manager or SQLAlchemyModelManager()
        self._hydration_service = hydration_service or HydrationService()
        self._entity_factory = entity_factory or DefaultEntityFactory(self._model_manager)
        self._data_mapper = data_mapper or DefaultDataMapper(getattr(persistence_handler, "session", None))
        self._entity_validator = entity_validator or EntityValidator()
        self._exception_handler = exception_handler or DefaultExceptionHandler()

    @abstractmethod
    def get_config(self) -> Dict[str, Any]:
        """
        Partial configuration merged onto the defaults.

        Must define `entity` and `hydration`.
        """
        pass

    def get_prepared_config(self) -> CrudConfig:
        """Resolve the configuration; recomputed on every action call."""
        return resolve_config(self.get_config())

    def check_access(self, operation: str) -> None:
        """Access check hook, called before every action. Allows everything."""
        pass

    # =========================================================================
    # Remote Actions
    # =========================================================================

    def create_action(self, params: Dict[str, Any]) -> Dict[str, Any]:
        config = self.get_prepared_config()
        return self._run_action("create", config, lambda: self._create(params, config))

    def get_action(self, params: Dict[str, Any]) -> Dict[str, Any]:
        config = self.get_prepared_config()
        return self._run_action("get", config, lambda: self._get(params, config))

    def list_action(self, params: Dict[str, Any]) -> Dict[str, Any]:
        config = self.get_prepared_config()
        return self._run_action("list", config, lambda: self._list(params, config))

    def remove_action(self, params: Dict[str, Any]) -> Dict[str, Any]:
        config = self.get_prepared_config()
        return self._run_action("remove", config, lambda: self._remove(params, config))

    def update_action(self, params: Dict[str, Any]) -> Dict[str, Any]:
        config = self.get_prepared_config()
        return self._run_action("update", config, lambda: self._update(params, config))

    def get_new_record_values_action(self, params: Dict[str, Any]) -> Dict[str, Any]:
        config = self.get_prepared_config()
        return self._run_action(
            "get_new_record_values", config, lambda: self._new_record_values(params, config)
        )

    # =========================================================================
    # Pipelines
    # =========================================================================

    def _create(self, params: Dict[str, Any], config: CrudConfig) -> Dict[str, Any]:
        self._require_record(params)

        entity = self._create_entity(params, config)

        if config.map_data_on_create:
            config.map_data_on_create(params["record"], entity, self._data_mapper)

        validation_response = self._validate(params, entity, config, config.new_record_validator)
        if validation_response is not None:
            self._persistence_handler.discard_changes(entity)
            return validation_response

        operation_result = config.save_entity_handler(entity, params, self._persistence_handler)

        return self._build_response(entity, params, config, operation_result)

    def _get(self, params: Dict[str, Any], config: CrudConfig) -> Dict[str, Any]:
        entities = self._persistence_handler.query(config.entity, params)
        entity = self._get_single_entity(entities, params)

        return {
            "success": True,
            "result": self.hydrate(entity, params, config),
        }

    def _list(self, params: Dict[str, Any], config: CrudConfig) -> Dict[str, Any]:
        # count and fetch run as separate queries
        total = self._persistence_handler.get_count(config.entity, params)

        hydrated_items = [
            self.hydrate(entity, params, config)
            for entity in self._persistence_handler.query(config.entity, params)
        ]

        return {
            "success": True,
            "items": hydrated_items,
            "total": total,
        }

    def _remove(self, params: Dict[str, Any], config: CrudConfig) -> Dict[str, Any]:
        operation_result = self._persistence_handler.remove(config.entity, params)

        response: Dict[str, Any] = {"success": True}
        response.update(operation_result.to_dict(self._model_manager))
        return response

    def _update(self, params: Dict[str, Any], config: CrudConfig) -> Dict[str, Any]:
        self._require_record(params)

        entities = self._persistence_handler.query(config.entity, params)
        entity = self._get_single_entity(entities, params)

        if config.map_data_on_update:
            config.map_data_on_update(params["record"], entity, self._data_mapper)

        validation_response = self._validate(params, entity, config, config.updated_record_validator)
        if validation_response is not None:
            self._persistence_handler.discard_changes(entity)
            return validation_response

        operation_result = config.update_entity_handler(entity, params, self._persistence_handler)

        return self._build_response(entity, params, config, operation_result)

    def _new_record_values(self, params: Dict[str, Any], config: CrudConfig) -> Dict[str, Any]:
        entity = self._create_entity(params, config)

        return {
            "success": True,
            "result": self.hydrate(entity, params, config),
        }

    # =========================================================================
    # Stages
    # =========================================================================

    def hydrate(self, entity: Any, params: Dict[str, Any], config: Optional[CrudConfig] = None) -> Any:
        """
        Hydrate an entity with the profile (and optional groups) of the request.

        Raises:
            BadRequestError: If `/hydration/profile` is missing or unknown, or
                `/hydration/group` names unknown groups.
        """
        hydration = params.get("hydration")
        if not isinstance(hydration, Mapping) or not hydration.get("profile"):
            raise BadRequestError(
                "Hydration profile is not specified.",
                path="/hydration/profile",
                params=params,
            )

        config = config or self.get_prepared_config()
        profile = hydration["profile"]

        if not isinstance(profile, str) or profile not in config.hydration.profiles:
            raise BadRequestError(
                f"Hydration profile '{profile}' is not defined.",
                path="/hydration/profile",
                params=params,
            )

        groups = hydration.get("group")
        if groups is not None:
            self._check_groups(groups, config, params)

        return self._hydration_service.hydrate(entity, config.hydration, profile, groups)

    @staticmethod
    def _check_groups(groups: Any, config: CrudConfig, params: Dict[str, Any]) -> None:
        names = [groups] if isinstance(groups, str) else groups
        if not isinstance(names, list) or not all(isinstance(name, str) for name in names):
            raise BadRequestError(
                "Hydration group must be a group name or a list of group names.",
                path="/hydration/group",
                params=params,
            )

        unknown = [name for name in names if name not in config.hydration.groups]
        if unknown:
            raise BadRequestError(
                f"Hydration group(s) {', '.join(repr(name) for name in unknown)} not defined.",
                path="/hydration/group",
                params=params,
            )

    def _create_entity(self, params: Dict[str, Any], config: CrudConfig) -> Any:
        entity = config.create_entity(params, config, self._entity_factory)
        if not entity:
            raise EntityCreationError("Configured factory didn't create an object.")
        return entity

    def _validate(
        self,
        params: Dict[str, Any],
        entity: Any,
        config: CrudConfig,
        validator: Optional[ValidatorStrategy],
    ) -> Optional[Dict[str, Any]]:
        if not validator:
            return None

        validation_result = validator(params, entity, self._entity_validator, config)
        if not validation_result.has_errors():
            return None

        logger.info(f"{type(self).__name__}: {type(entity).__name__} rejected by validation")
        response = validation_result.to_dict()
        response["success"] = False
        return response

    def _build_response(
        self,
        entity: Any,
        params: Dict[str, Any],
        config: CrudConfig,
        operation_result: OperationResult,
    ) -> Dict[str, Any]:
        response: Dict[str, Any] = {"success": True}
        response.update(operation_result.to_dict(self._model_manager))

        if "hydration" in params:
            response["result"] = self.hydrate(entity, params, config)

        return response

    @staticmethod
    def _require_record(params: Dict[str, Any]) -> None:
        if "record" not in params:
            raise BadRequestError("'/record' is not provided", path="/record", params=params)

    @staticmethod
    def _get_single_entity(entities: List[Any], params: Dict[str, Any]) -> Any:
        if len(entities) != 1:
            raise BadRequestError(
                f"Query must return exactly one result, but {len(entities)} were returned",
                path="/filter",
                params=params,
            )
        return entities[0]

    def _run_action(
        self,
        operation: str,
        config: CrudConfig,
        action: Callable[[], Dict[str, Any]],
    ) -> Dict[str, Any]:
        logger.debug(f"{type(self).__name__}: running '{operation}' action")
        try:
            self.check_access(operation)
            return action()
        except BadRequestError:
            raise
        except Exception as e:
            response = config.exception_handler(e, operation, self._exception_handler)
            if response is None:
                raise
            return response
