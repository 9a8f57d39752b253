"""
Operation Result.

Report of the entities touched by a persistence operation.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Tuple

from admin_generator.persistence.model_manager import ModelManager


class OperationType(str, Enum):
    """Kind of change applied to an entity."""

    CREATED = "created"
    UPDATED = "updated"
    REMOVED = "removed"

    def __str__(self) -> str:
        return self.value


@dataclass
class OperationResult:
    """
    Entities created, updated and removed by one persistence call.

    Serialized with `to_dict()`:

        {
            "created_models": {"blog.article": [5]},
            "id": 5,
        }
    """

    entries: List[Tuple[OperationType, type, Any]] = field(default_factory=list)

    def report_entity(self, entity_class: type, identifier: Any, operation: OperationType) -> "OperationResult":
        self.entries.append((OperationType(operation), entity_class, identifier))
        return self

    def get_entries(self, operation: OperationType) -> List[Tuple[type, Any]]:
        return [
            (entity_class, identifier)
            for entry_operation, entity_class, identifier in self.entries
            if entry_operation == operation
        ]

    @property
    def created_entities(self) -> List[Tuple[type, Any]]:
        return self.get_entries(OperationType.CREATED)

    @property
    def updated_entities(self) -> List[Tuple[type, Any]]:
        return self.get_entries(OperationType.UPDATED)

    @property
    def removed_entities(self) -> List[Tuple[type, Any]]:
        return self.get_entries(OperationType.REMOVED)

    def merge(self, other: "OperationResult") -> "OperationResult":
        """Return a new result holding the entries of both."""
        return OperationResult(entries=self.entries + other.entries)

    def to_dict(self, model_manager: ModelManager) -> Dict[str, Any]:
        result: Dict[str, Any] = {}

        for operation in OperationType:
            entries = self.get_entries(operation)
            if not entries:
                continue

            section: Dict[str, List[Any]] = {}
            for entity_class, identifier in entries:
                model_id = model_manager.generate_model_id_from_entity_class(entity_class)
                section.setdefault(model_id, []).append(identifier)
            result[f"{operation.value}_models"] = section

        if len(self.entries) == 1:
            result["id"] = self.entries[0][2]

        return result
