"""Unit tests for the ``hsn-db-sync`` command."""

import json
from typing import Optional

import click
import pytest
from click.testing import CliRunner

from hsn_api.core.database import DatabaseConnectionError, DatabaseManager, EmbeddedDatabaseConfig, SyncOptions
from hsn_api.projects import PROJECTS
from hsn_api.scripts import sync_db


def _memory(project_name: str, env: Optional[str] = None) -> EmbeddedDatabaseConfig:
    return EmbeddedDatabaseConfig(storage=":memory:")


@pytest.fixture
def managers(monkeypatch: pytest.MonkeyPatch):
    """Record every manager the command creates; all use in-memory databases."""
    created = []

    def factory(default_env=None):
        manager = DatabaseManager(config_resolver=_memory, default_env=default_env)
        created.append(manager)
        return manager

    monkeypatch.setattr(sync_db, "DatabaseManager", factory)
    monkeypatch.setattr(sync_db, "FORCE_GRACE_SECONDS", 0)
    monkeypatch.setattr(sync_db, "setup_logging", lambda **kwargs: None)
    return created


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def _status(output: str) -> dict:
    return json.loads(output[output.index("{") : output.rindex("}") + 1])


class TestRunSync:
    async def test_syncs_and_closes(self):
        manager = DatabaseManager(config_resolver=_memory)
        hsnweb = [project for project in PROJECTS if project.name == "hsnweb"]

        ok, status = await sync_db.run_sync(hsnweb, SyncOptions(alter=True), manager=manager)

        assert ok is True
        assert status["hsnweb"].models == ["ContactSubmission", "NewsletterSubscription"]
        assert manager.get_status() == {}

    async def test_failure_is_reported(self, monkeypatch):
        manager = DatabaseManager(config_resolver=_memory)

        async def refuse(project_name, env=None):
            raise DatabaseConnectionError(project_name, "connection refused")

        monkeypatch.setattr(manager, "init_project", refuse)

        ok, status = await sync_db.run_sync(PROJECTS[:1], SyncOptions(), manager=manager)

        assert ok is False
        assert status == {}


class TestSelectProjects:
    def test_defaults_to_projects_with_models(self):
        assert [project.name for project in sync_db._select_projects(())] == ["hsnweb"]

    def test_project_without_models_is_rejected(self):
        with pytest.raises(click.BadParameter):
            sync_db._select_projects(("aihunar",))


class TestCommand:
    def test_sync_all(self, runner, managers):
        result = runner.invoke(sync_db.main, [])

        assert result.exit_code == 0, result.output
        assert "Database sync completed successfully." in result.output
        assert _status(result.output)["hsnweb"]["dialect"] == "sqlite"
        assert managers[0].get_status() == {}

    def test_env_is_forwarded(self, runner, managers):
        result = runner.invoke(sync_db.main, ["--env", "prod", "--project", "hsnweb"])

        assert result.exit_code == 0, result.output
        assert managers[0]._default_env == "prod"

    def test_force_warns(self, runner, managers):
        result = runner.invoke(sync_db.main, ["--force"])

        assert result.exit_code == 0, result.output
        assert "ALL DATA WILL BE LOST" in result.output
        assert "Press Ctrl+C within 0 seconds" in result.output

    def test_force_with_yes_skips_the_wait(self, runner, managers):
        result = runner.invoke(sync_db.main, ["--force", "--yes"])

        assert result.exit_code == 0, result.output
        assert "Press Ctrl+C" not in result.output

    def test_unknown_project(self, runner, managers):
        result = runner.invoke(sync_db.main, ["--project", "nope"])

        assert result.exit_code == 2
        assert "unknown project(s)" in result.output
        assert managers == []

    def test_failure_exits_with_1(self, runner, managers, monkeypatch):
        async def failing_run_sync(projects, options, env=None, manager=None):
            return False, {}

        monkeypatch.setattr(sync_db, "run_sync", failing_run_sync)

        result = runner.invoke(sync_db.main, [])

        assert result.exit_code == 1
        assert "Database sync failed." in result.output
