"""
Tests for the HTTP surface of CRUD controllers.
"""

import logging
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from admin_generator.controller import AbstractCrudController
from admin_generator.server import create_app, session_controller_factory
from admin_generator.settings import AdminGeneratorSettings

from blog_models import Tag


class TagController(AbstractCrudController):
    def get_config(self):
        return {
            "entity": Tag,
            "hydration": {"profiles": {"list": ["main"]}, "groups": {"main": ["id", "label"]}},
        }


@pytest.fixture
def client(session, make_controller, make_settings):
    """Test client serving ArticleController under /direct/articles."""

    def session_override():
        yield session

    app = create_app(
        {
            "articles": lambda request_session: make_controller(),
            "broken": lambda request_session: make_controller({"hydration": None}),
        },
        settings=make_settings(prefix="/direct"),
        session_dependency=session_override,
        configure_logging=False,
    )
    with TestClient(app) as client:
        yield client


class TestCrudRoutes:
    """Tests for the generated CRUD routes."""

    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json() == {"status": "ok", "controllers": ["articles", "broken"]}

    def test_create(self, client):
        """Test the create route returns the action response."""
        response = client.post("/direct/articles/create", json={
            "record": {"title": "Over HTTP"},
            "hydration": {"profile": "list"},
        })

        assert response.status_code == 200
        body = response.json()
        assert body["success"] is True
        assert body["created_models"] == {"blog_models.article": [body["id"]]}
        assert body["result"]["main"]["title"] == "Over HTTP"

    def test_list(self, client, articles):
        response = client.post("/direct/articles/list", json={
            "hydration": {"profile": "list"},
            "sort": [{"property": "title"}],
        })

        assert response.status_code == 200
        assert response.json()["total"] == 3
        assert [item["main"]["title"] for item in response.json()["items"]] == ["Alpha", "Beta", "Gamma"]

    def test_get_update_remove(self, client, articles):
        """Test the single-record routes."""
        article_id = articles[0].id
        selector = {"filter": {"id": article_id}, "hydration": {"profile": "detail"}}

        got = client.post("/direct/articles/get", json=selector)
        updated = client.post("/direct/articles/update", json={**selector, "record": {"title": "Changed"}})
        removed = client.post("/direct/articles/remove", json={"filter": {"id": article_id}})

        assert got.json()["result"]["author"] == {"author_name": "Ada"}
        assert updated.json()["result"]["main"]["title"] == "Changed"
        assert removed.json() == {"success": True, "removed_models": {"blog_models.article": [article_id]}, "id": article_id}

    def test_get_new_record_values(self, client):
        response = client.post("/direct/articles/get-new-record-values", json={"hydration": {"profile": "list"}})

        assert response.json()["result"]["main"]["status"] == "draft"

    def test_validation_failure_is_200(self, client):
        """Test validation errors are a regular response, not an HTTP error."""
        response = client.post("/direct/articles/create", json={"record": {"body": "untitled"}})

        assert response.status_code == 200
        assert response.json()["success"] is False


class TestErrorResponses:
    """Tests for exception to status code mapping."""

    def test_bad_request_is_400(self, client, articles):
        response = client.post("/direct/articles/get", json={
            "filter": {"id": 999},
            "hydration": {"profile": "list"},
        })

        assert response.status_code == 400
        body = response.json()
        assert body["success"] is False
        assert body["path"] == "/filter"
        assert body["params"]["filter"] == {"id": 999}

    def test_missing_record_is_400(self, client):
        response = client.post("/direct/articles/create", json={})

        assert response.status_code == 400
        assert response.json()["path"] == "/record"

    def test_unknown_hydration_profile_is_400(self, client, articles):
        response = client.post("/direct/articles/list", json={"hydration": {"profile": "missing"}})

        assert response.status_code == 400
        assert response.json()["path"] == "/hydration/profile"

    def test_configuration_error_is_500(self, client):
        response = client.post("/direct/broken/list", json={"hydration": {"profile": "list"}})

        assert response.status_code == 500
        assert response.json() == {
            "success": False,
            "message": "'hydration' configuration property is not defined.",
        }


class TestSessionControllerFactory:
    """Tests for session_controller_factory()."""

    def test_builds_controller_over_session(self, session, tags):
        controller = session_controller_factory(TagController)(session)

        assert isinstance(controller, TagController)
        assert controller.list_action({"hydration": {"profile": "list"}})["total"] == 2


class TestCreateApp:
    """Tests for create_app() wiring."""

    @patch("admin_generator.server.setup_logging")
    def test_configures_logging_from_settings(self, mock_setup_logging):
        """Test the app installs logging from the app.* settings."""
        settings = AdminGeneratorSettings(
            _config={"app": {"debug": False, "log_level": "debug", "log_dir": "/tmp/admin-logs"}},
            _loaded=True,
        )

        create_app({}, settings=settings)

        mock_setup_logging.assert_called_once_with(logging.DEBUG, "/tmp/admin-logs")

    @patch("admin_generator.server.setup_logging")
    def test_logging_can_be_left_to_host(self, mock_setup_logging, make_settings):
        create_app({}, settings=make_settings(), configure_logging=False)

        mock_setup_logging.assert_not_called()
