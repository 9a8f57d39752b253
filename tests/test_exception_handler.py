"""
Unit Tests for the default exception handler.
"""

import logging

from sqlalchemy.exc import OperationalError

from admin_generator.config import default_handle_exception
from admin_generator.exception_handling import DefaultExceptionHandler, GENERIC_ERROR_MESSAGE
from admin_generator.exceptions import HydrationError, PersistenceError


class TestDefaultExceptionHandler:
    """Tests for DefaultExceptionHandler.create_response()."""

    def test_persistence_error_hides_message(self, make_settings):
        """Test the client only gets a generic message by default."""
        handler = DefaultExceptionHandler(make_settings())

        response = handler.create_response(PersistenceError("password=hunter2 rejected"), "update")

        assert response == {
            "success": False,
            "exception": True,
            "operation": "update",
            "message": GENERIC_ERROR_MESSAGE,
        }

    def test_expose_message(self, make_settings):
        handler = DefaultExceptionHandler(make_settings(expose_message=True))

        response = handler.create_response(PersistenceError("disk full"), "create")

        assert response["message"] == "disk full"

    def test_debug_adds_exception_class(self, make_settings):
        handler = DefaultExceptionHandler(make_settings(debug=True))

        response = handler.create_response(PersistenceError("disk full"), "create")

        assert response["exception_class"] == "PersistenceError"

    def test_sqlalchemy_errors_handled(self, make_settings):
        """Test raw SQLAlchemy errors are classified too."""
        handler = DefaultExceptionHandler(make_settings())
        error = OperationalError("SELECT 1", {}, Exception("database is locked"))

        response = handler.create_response(error, "list")

        assert response["success"] is False
        assert response["operation"] == "list"

    def test_other_errors_unclassified(self, make_settings):
        """Test unrelated exceptions return None so they propagate."""
        handler = DefaultExceptionHandler(make_settings())

        assert handler.create_response(ValueError("boom"), "create") is None
        assert handler.create_response(HydrationError("bad group"), "get") is None

    def test_failure_is_logged(self, make_settings, caplog):
        handler = DefaultExceptionHandler(make_settings())

        with caplog.at_level(logging.ERROR, logger="admin_generator.exception_handling.handler"):
            handler.create_response(PersistenceError("disk full"), "remove")

        assert "Operation 'remove' failed: disk full" in caplog.text

    def test_uses_global_settings_by_default(self, monkeypatch):
        monkeypatch.setenv("EXCEPTION_EXPOSE_MESSAGE", "true")

        response = DefaultExceptionHandler().create_response(PersistenceError("disk full"), "create")

        assert response["message"] == "disk full"

    def test_default_strategy_delegates(self, make_settings):
        """Test the default exception_handler strategy calls the handler."""
        handler = DefaultExceptionHandler(make_settings())

        assert default_handle_exception(ValueError("x"), "get", handler) is None
        assert default_handle_exception(PersistenceError("x"), "get", handler)["exception"] is True
