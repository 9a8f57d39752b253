"""
Persistence Package.

Narrow persistence interface used by CRUD controllers, plus its
SQLAlchemy implementation.
"""

from admin_generator.persistence.handler import PersistenceHandler, SQLAlchemyPersistenceHandler
from admin_generator.persistence.model_manager import ModelManager, SQLAlchemyModelManager
from admin_generator.persistence.operation_result import OperationResult, OperationType
from admin_generator.persistence.query import (
    OPERATORS,
    apply_paging,
    apply_sorting,
    build_criteria,
    split_operator,
)

__all__ = [
    "PersistenceHandler",
    "SQLAlchemyPersistenceHandler",
    "ModelManager",
    "SQLAlchemyModelManager",
    "OperationResult",
    "OperationType",
    "OPERATORS",
    "apply_paging",
    "apply_sorting",
    "build_criteria",
    "split_operator",
]
