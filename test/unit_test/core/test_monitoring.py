"""
Unit tests for the Logfire monitoring module.

This test suite covers:
- Environment variable parsing
- Initialization when disabled, misconfigured or enabled
- Logging helpers and their graceful degradation
"""

import importlib
import logging
import os
import sys
from unittest.mock import MagicMock, patch

import pytest

import hsn_api.core.monitoring as monitoring


@pytest.fixture
def fresh_monitoring():
    """Reload the module with patched environment, then restore it."""

    def _reload(env):
        with patch.dict(os.environ, env, clear=False):
            return importlib.reload(monitoring)

    yield _reload
    importlib.reload(monitoring)


class TestLogfireEnvironmentConfiguration:
    """Test environment variable configuration for Logfire."""

    @pytest.mark.parametrize("value,expected", [("true", True), ("1", True), ("yes", True), ("false", False), ("no", False)])
    def test_enabled_flag(self, fresh_monitoring, value, expected):
        module = fresh_monitoring({"LOGFIRE_ENABLED": value})
        assert module.LOGFIRE_ENABLED is expected

    def test_service_name_default(self, fresh_monitoring):
        with patch.dict(os.environ, {}, clear=False):
            os.environ.pop("LOGFIRE_SERVICE_NAME", None)
            module = importlib.reload(monitoring)
        assert module.LOGFIRE_SERVICE_NAME == "hsn-api"


class TestInitializeLogfire:
    def test_disabled(self):
        with patch.object(monitoring, "LOGFIRE_ENABLED", False):
            assert monitoring.initialize_logfire() is False

    def test_enabled_without_token(self):
        with patch.object(monitoring, "LOGFIRE_ENABLED", True), patch.object(monitoring, "LOGFIRE_TOKEN", ""):
            assert monitoring.initialize_logfire() is False

    def test_enabled_with_token_instruments(self):
        fake_logfire = MagicMock()
        app = MagicMock()
        with patch.object(monitoring, "LOGFIRE_ENABLED", True), patch.object(
            monitoring, "LOGFIRE_TOKEN", "token"
        ), patch.dict(sys.modules, {"logfire": fake_logfire}):
            assert monitoring.initialize_logfire(app) is True

        fake_logfire.configure.assert_called_once()
        assert fake_logfire.configure.call_args.kwargs["service_name"] == monitoring.LOGFIRE_SERVICE_NAME
        fake_logfire.instrument_sqlalchemy.assert_called_once()
        fake_logfire.instrument_fastapi.assert_called_once_with(app=app)

    def test_configure_failure_returns_false(self):
        fake_logfire = MagicMock()
        fake_logfire.configure.side_effect = RuntimeError("bad token")
        with patch.object(monitoring, "LOGFIRE_ENABLED", True), patch.object(
            monitoring, "LOGFIRE_TOKEN", "token"
        ), patch.dict(sys.modules, {"logfire": fake_logfire}):
            assert monitoring.initialize_logfire() is False


class TestLoggingHelpers:
    def test_log_api_request(self):
        fake_logfire = MagicMock()
        with patch.dict(sys.modules, {"logfire": fake_logfire}):
            monitoring.log_api_request("GET", "/health", 200, 1.5)

        fake_logfire.info.assert_called_once_with(
            "API request completed", method="GET", path="/health", status_code=200, duration_ms=1.5
        )

    def test_log_submission(self):
        fake_logfire = MagicMock()
        with patch.dict(sys.modules, {"logfire": fake_logfire}):
            monitoring.log_submission("hsnweb", "contact", 7, email_sent=True)

        kwargs = fake_logfire.info.call_args.kwargs
        assert kwargs == {"project": "hsnweb", "kind": "contact", "record_id": 7, "email_sent": True}

    def test_log_error(self):
        fake_logfire = MagicMock()
        with patch.dict(sys.modules, {"logfire": fake_logfire}):
            monitoring.log_error("SyncError", "disk full", {"project": "hsnweb"})

        fake_logfire.error.assert_called_once_with("SyncError: disk full", project="hsnweb")

    def test_helpers_degrade_to_debug_log(self, caplog: pytest.LogCaptureFixture):
        fake_logfire = MagicMock()
        fake_logfire.info.side_effect = RuntimeError("not configured")
        fake_logfire.error.side_effect = RuntimeError("not configured")

        with caplog.at_level(logging.DEBUG, logger=monitoring.__name__), patch.dict(
            sys.modules, {"logfire": fake_logfire}
        ):
            monitoring.log_api_request("GET", "/health", 200, 1.0)
            monitoring.log_submission("hsnweb", "newsletter", 1)
            monitoring.log_error("Boom", "message")

        messages = [record.getMessage() for record in caplog.records]
        assert any("Could not log API request" in message for message in messages)
        assert any("Could not log submission" in message for message in messages)
        assert any("Could not log error" in message for message in messages)
