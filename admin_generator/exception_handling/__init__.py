"""
Exception Handling Package.
"""

from admin_generator.exception_handling.handler import (
    DefaultExceptionHandler,
    ExceptionHandler,
    GENERIC_ERROR_MESSAGE,
)

__all__ = ["DefaultExceptionHandler", "ExceptionHandler", "GENERIC_ERROR_MESSAGE"]
