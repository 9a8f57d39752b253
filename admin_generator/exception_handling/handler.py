"""
Exception Handlers.

Turn exceptions raised inside CRUD actions into controlled responses.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from sqlalchemy.exc import SQLAlchemyError

from admin_generator.exceptions import PersistenceError
from admin_generator.settings import AdminGeneratorSettings, get_settings

logger = logging.getLogger(__name__)


GENERIC_ERROR_MESSAGE = "An error occurred while processing the request."


class ExceptionHandler(ABC):
    """Interface for exception handlers."""

    @abstractmethod
    def create_response(self, exception: Exception, operation: str) -> Optional[Dict[str, Any]]:
        """
        Build a response for an exception raised during `operation`.

        Returns:
            A response mapping, or None when the exception cannot be
            classified and must propagate.
        """
        pass


class DefaultExceptionHandler(ExceptionHandler):
    """
    Handles persistence/infrastructure failures.

    The exception message is only sent to the client when
    `exception.expose_message` is enabled; the exception class is added
    in debug mode.
    """

    handled_exceptions = (PersistenceError, SQLAlchemyError)

    def __init__(self, settings: Optional[AdminGeneratorSettings] = None) -> None:
        self._settings = settings or get_settings()

    def create_response(self, exception: Exception, operation: str) -> Optional[Dict[str, Any]]:
        if not isinstance(exception, self.handled_exceptions):
            return None

        logger.error(f"Operation '{operation}' failed: {exception}", exc_info=exception)

        expose = bool(self._settings.get("exception.expose_message", False))
        response: Dict[str, Any] = {
            "success": False,
            "exception": True,
            "operation": operation,
            "message": str(exception) if expose else GENERIC_ERROR_MESSAGE,
        }
        if self._settings.debug:
            response["exception_class"] = type(exception).__name__

        return response
