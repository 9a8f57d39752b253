"""
Entity Validator.

Standard validation derived from the entity's column definitions, an
optional pydantic schema, and the entity's own validation method.
"""

import logging
from typing import Any, Dict, Optional, Type

from pydantic import BaseModel, ValidationError
from sqlalchemy import String, inspect as sa_inspect
from sqlalchemy.exc import NoInspectionAvailable

from admin_generator.validation.result import ValidationResult

logger = logging.getLogger(__name__)


BLANK_MESSAGE = "This value should not be blank."
TOO_LONG_MESSAGE = "This value is too long. It should have {limit} characters or less."


class EntityValidator:
    """
    Validates entities before they are persisted.

    Config keys used (from the controller configuration):
        ignore_standard_validator: Skip column/schema based checks.
        validation_schema: Optional pydantic model validated against column values.
        entity_validation_method: Name of a method on the entity receiving the
            ValidationResult to add its own errors (default "validate").
    """

    def validate(self, entity: Any, config: Any) -> ValidationResult:
        validation_result = ValidationResult()

        if not _config_value(config, "ignore_standard_validator", False):
            self.validate_columns(entity, validation_result)

            schema = _config_value(config, "validation_schema")
            if schema is not None:
                self.validate_schema(entity, schema, validation_result)

        method_name = _config_value(config, "entity_validation_method", "validate")
        if method_name:
            method = getattr(entity, method_name, None)
            if callable(method):
                method(validation_result)

        if validation_result.has_errors():
            logger.debug(f"{type(entity).__name__} failed validation: {validation_result.to_dict()}")

        return validation_result

    def validate_columns(self, entity: Any, validation_result: ValidationResult) -> None:
        """Check non-nullable columns are set and strings fit their length."""
        try:
            mapper = sa_inspect(type(entity))
        except NoInspectionAvailable:
            return

        for key, column in mapper.columns.items():
            value = getattr(entity, key, None)

            if value is None:
                if self._is_required(column):
                    validation_result.add_field_error(key, BLANK_MESSAGE)
                continue

            if isinstance(column.type, String) and column.type.length and isinstance(value, str):
                if len(value) > column.type.length:
                    validation_result.add_field_error(
                        key, TOO_LONG_MESSAGE.format(limit=column.type.length)
                    )

    def validate_schema(
        self,
        entity: Any,
        schema: Type[BaseModel],
        validation_result: ValidationResult,
    ) -> None:
        """Validate column values against a pydantic model, mapping errors to fields."""
        try:
            schema.model_validate(_column_values(entity))
        except ValidationError as e:
            for error in e.errors():
                location = error.get("loc") or ()
                if location:
                    validation_result.add_field_error(".".join(str(part) for part in location), error["msg"])
                else:
                    validation_result.add_general_error(error["msg"])

    @staticmethod
    def _is_required(column: Any) -> bool:
        if column.nullable:
            return False
        if column.default is not None or column.server_default is not None:
            return False
        # generated by the database
        if column.primary_key and column.autoincrement in (True, "auto"):
            return False
        return True


def _config_value(config: Any, key: str, default: Any = None) -> Any:
    if isinstance(config, dict):
        return config.get(key, default)
    return getattr(config, key, default)


def _column_values(entity: Any) -> Dict[str, Optional[Any]]:
    try:
        mapper = sa_inspect(type(entity))
    except NoInspectionAvailable:
        return dict(vars(entity))
    return {key: getattr(entity, key, None) for key in mapper.columns.keys()}
