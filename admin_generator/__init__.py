"""
Admin Generator.

Configuration-driven CRUD controllers with profile based hydration,
served over FastAPI and persisted through SQLAlchemy.
"""

from admin_generator.config import CrudConfig, DEFAULT_CONFIG, resolve_config
from admin_generator.controller import AbstractCrudController
from admin_generator.exceptions import (
    AdminGeneratorError,
    BadRequestError,
    ConfigurationError,
    EntityCreationError,
    HydrationError,
    PersistenceError,
)
from admin_generator.hydration import HydrationConfig, HydrationProfile, HydrationService
from admin_generator.persistence import (
    OperationResult,
    OperationType,
    PersistenceHandler,
    SQLAlchemyModelManager,
    SQLAlchemyPersistenceHandler,
)
from admin_generator.validation import EntityValidator, ValidationResult

__version__ = "1.0.0"

__all__ = [
    # Controller
    "AbstractCrudController",
    "CrudConfig",
    "DEFAULT_CONFIG",
    "resolve_config",
    # Hydration
    "HydrationConfig",
    "HydrationProfile",
    "HydrationService",
    # Persistence
    "OperationResult",
    "OperationType",
    "PersistenceHandler",
    "SQLAlchemyModelManager",
    "SQLAlchemyPersistenceHandler",
    # Validation
    "EntityValidator",
    "ValidationResult",
    # Exceptions
    "AdminGeneratorError",
    "BadRequestError",
    "ConfigurationError",
    "EntityCreationError",
    "HydrationError",
    "PersistenceError",
]
