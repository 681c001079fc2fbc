"""
Unit tests for FastAPI application lifespan management.

Tests verify that startup bootstraps the project databases (tolerating a
failure) and that shutdown closes every connection.
"""

from hsn_api.core.database import DatabaseConnectionError, DatabaseManager
from hsn_api.server.main import lifespan


class TestLifespanStartup:
    """Test application startup lifespan events."""

    async def test_startup_bootstraps_databases(self, app, manager: DatabaseManager):
        async with lifespan(app):
            assert app.state.bootstrapper.ready is True
            assert manager.is_initialized("hsnweb")

    async def test_startup_survives_database_failure(self, app, manager: DatabaseManager, monkeypatch):
        async def refuse(project_name, env=None):
            raise DatabaseConnectionError(project_name, "connection refused")

        monkeypatch.setattr(manager, "init_project", refuse)

        async with lifespan(app):
            assert app.state.bootstrapper.ready is False
            assert manager.get_status() == {}


class TestLifespanShutdown:
    """Test application shutdown lifespan events."""

    async def test_shutdown_closes_connections(self, app, manager: DatabaseManager):
        async with lifespan(app):
            assert manager.get_status() != {}

        assert manager.get_status() == {}
        assert app.state.bootstrapper.ready is False
