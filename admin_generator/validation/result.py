"""
Validation Result.

Collects field and general errors produced while validating an entity.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List


@dataclass
class ValidationResult:
    """
    Errors found while validating an entity.

    Serialized with `to_dict()`:

        {
            "field_errors": {"title": ["This value should not be blank."]},
            "general_errors": [],
        }
    """

    field_errors: Dict[str, List[str]] = field(default_factory=dict)
    general_errors: List[str] = field(default_factory=list)

    def add_field_error(self, field_name: str, message: str) -> "ValidationResult":
        self.field_errors.setdefault(field_name, []).append(message)
        return self

    def add_general_error(self, message: str) -> "ValidationResult":
        self.general_errors.append(message)
        return self

    def get_field_errors(self, field_name: str) -> List[str]:
        return list(self.field_errors.get(field_name, []))

    def has_errors(self) -> bool:
        return bool(self.field_errors or self.general_errors)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "field_errors": {name: list(messages) for name, messages in self.field_errors.items()},
            "general_errors": list(self.general_errors),
        }
