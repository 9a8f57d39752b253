"""
Admin generator exceptions.

Custom exception classes for configuration, request and pipeline errors.
"""

from typing import Any, Optional


class AdminGeneratorError(Exception):
    """Base exception for admin generator errors."""
    pass


class BadRequestError(AdminGeneratorError):
    """
    Raised when a request is malformed or misses required input.

    Attributes:
        path: JSON pointer to the offending location (e.g. "/record").
        params: The request parameters as received.
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        params: Optional[dict[str, Any]] = None,
    ) -> None:
        self.path = path
        self.params = params
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {
            "success": False,
            "message": str(self),
            "path": self.path,
            "params": self.params,
        }


class ConfigurationError(AdminGeneratorError):
    """
    Raised when a controller configuration is missing or invalid.

    Examples:
        - 'entity' or 'hydration' not defined
        - Strategy slot holding a non-callable
        - Entity class that cannot be resolved
    """
    pass


class HydrationError(AdminGeneratorError):
    """Raised when an object cannot be hydrated with the given configuration."""
    pass


class EntityCreationError(AdminGeneratorError):
    """Raised when the configured factory does not produce an entity."""
    pass


class PersistenceError(AdminGeneratorError):
    """Raised when the persistence backend fails to complete an operation."""
    pass
