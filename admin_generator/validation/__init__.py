"""
Validation Package.
"""

from admin_generator.validation.result import ValidationResult
from admin_generator.validation.validator import EntityValidator

__all__ = ["EntityValidator", "ValidationResult"]
