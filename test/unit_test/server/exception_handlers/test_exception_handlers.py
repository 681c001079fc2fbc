"""
Unit tests for server exception handlers.

Tests cover the envelope produced for unhandled exceptions, unknown routes,
request validation failures and an unavailable database.
"""

import json
from unittest.mock import Mock, patch

import pytest
from fastapi import Request
from httpx import ASGITransport, AsyncClient

from hsn_api.server.core.config import Settings
from hsn_api.server.exception_handlers.global_handler import (
    global_exception_handler,
    validation_message,
)
from hsn_api.server.main import create_app


@pytest.fixture
def mock_request():
    """Create a mock request object."""
    request = Mock(spec=Request)
    request.method = "GET"
    request.url.path = "/api/hsnweb/test"
    request.query_params = {}
    request.client = Mock()
    request.client.host = "127.0.0.1"
    request.app.state.settings = Settings(app_env="production")
    return request


class TestGlobalExceptionHandler:
    """Test suite for global exception handler."""

    async def test_exception_handler_logs_error(self, mock_request):
        """Test that exception handler logs errors."""
        exc = ValueError("Test error")

        with patch("hsn_api.server.exception_handlers.global_handler.logger") as mock_logger:
            await global_exception_handler(mock_request, exc)

            mock_logger.error.assert_called_once()
            call_args = mock_logger.error.call_args
            assert "Unhandled exception" in call_args[0][0]
            assert call_args[1]["extra"]["error_type"] == "ValueError"
            assert call_args[1]["extra"]["path"] == "/api/hsnweb/test"

    async def test_exception_handler_returns_500_envelope(self, mock_request):
        response = await global_exception_handler(mock_request, RuntimeError("boom"))
        assert response.status_code == 500

        body = json.loads(response.body)
        assert body["success"] is False
        assert body["message"] == "Internal server error"
        assert body["data"] is None
        assert len(body["error_id"]) == 12
        assert "stack" not in body

    async def test_development_includes_details(self, mock_request):
        mock_request.app.state.settings = Settings(app_env="development")

        response = await global_exception_handler(mock_request, KeyError("missing"))

        body = json.loads(response.body)
        assert body["error_type"] == "KeyError"
        assert "KeyError" in body["stack"]

    async def test_error_ids_are_unique(self, mock_request):
        first = json.loads((await global_exception_handler(mock_request, ValueError("a"))).body)
        second = json.loads((await global_exception_handler(mock_request, ValueError("b"))).body)

        assert first["error_id"] != second["error_id"]

    async def test_unhandled_route_error_through_the_app(self, settings, manager, mailer):
        app = create_app(settings=settings, manager=manager, mailer=mailer)

        @app.get("/boom")
        async def boom():
            raise RuntimeError("kaboom")

        transport = ASGITransport(app=app, raise_app_exceptions=False)
        async with AsyncClient(transport=transport, base_url="http://localhost") as client:
            response = await client.get("/boom")

        assert response.status_code == 500
        assert response.json()["message"] == "Internal server error"


class TestHttpExceptionHandler:
    async def test_unknown_route(self, client: AsyncClient):
        response = await client.get("/api/unknown")

        assert response.status_code == 404
        assert response.json() == {"success": False, "message": "Endpoint not found", "data": None}

    async def test_wrong_method(self, client: AsyncClient):
        response = await client.delete("/health")

        assert response.status_code == 405
        assert response.json()["success"] is False
        assert response.headers["allow"] == "GET"


class TestValidationMessage:
    def test_missing_body(self):
        errors = [{"type": "missing", "loc": ("body",), "msg": "Field required"}]

        assert validation_message(errors) == "Request body is required"

    def test_missing_and_blank_fields_are_listed_once(self):
        errors = [
            {"type": "missing", "loc": ("body", "name"), "msg": "Field required"},
            {"type": "blank_field", "loc": ("body", "email"), "msg": "Field is required"},
            {"type": "missing", "loc": ("body", "name"), "msg": "Field required"},
        ]

        assert validation_message(errors) == "Missing required fields: name, email"

    def test_missing_fields_win_over_invalid_email(self):
        errors = [
            {"type": "invalid_email", "loc": ("body", "email"), "msg": "Invalid email format"},
            {"type": "missing", "loc": ("body", "subject"), "msg": "Field required"},
        ]

        assert validation_message(errors) == "Missing required fields: subject"

    def test_invalid_email(self):
        errors = [{"type": "invalid_email", "loc": ("body", "email"), "msg": "Invalid email format"}]

        assert validation_message(errors) == "Invalid email format"

    def test_other_errors(self):
        errors = [
            {"type": "greater_than_equal", "loc": ("query", "page"), "msg": "Input should be >= 1"},
            {"type": "string_too_long", "loc": ("body", "name"), "msg": "String too long"},
        ]

        assert validation_message(errors) == "Invalid request: page: Input should be >= 1; name: String too long"


class TestDatabaseUnavailable:
    async def test_project_routes_answer_503(self, client: AsyncClient, app, monkeypatch):
        from hsn_api.core.database import DatabaseConnectionError

        async def refuse(project_name, env=None):
            raise DatabaseConnectionError(project_name, "connection refused")

        monkeypatch.setattr(app.state.db_manager, "init_project", refuse)

        response = await client.post("/api/hsnweb/newsletter", json={"email": "reader@example.com"})

        assert response.status_code == 503
        assert response.json() == {
            "success": False,
            "message": "Database not available. Please try again.",
            "data": None,
        }
