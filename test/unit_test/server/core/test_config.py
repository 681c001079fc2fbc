"""Unit tests for the application settings."""

import pytest
from pydantic import ValidationError

from hsn_api.server.core.config import CORSConfig, EmailConfig, Settings

SETTINGS_ENV = (
    "HOST",
    "PORT",
    "APP_ENV",
    "ALLOWED_ORIGINS",
    "MAX_BODY_BYTES",
    "LOG_LEVEL",
    "DB_ENV",
    "SMTP_HOST",
    "SMTP_PORT",
    "SMTP_SECURE",
    "SMTP_USER",
    "SMTP_PASS",
    "EMAIL_FROM",
    "EMAIL_TO",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path):
    for name in SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)
    # No stray .env file
    monkeypatch.chdir(tmp_path)


class TestDefaults:
    def test_server_defaults(self):
        settings = Settings()

        assert settings.host == "0.0.0.0"
        assert settings.port == 3001
        assert settings.is_development is True
        assert settings.max_body_bytes == 10 * 1024 * 1024
        assert settings.db_env == "local"

    def test_cors_defaults(self):
        cors = Settings().cors

        assert isinstance(cors, CORSConfig)
        assert cors.origins == ["http://localhost:3000", "http://localhost:5500"]
        assert cors.allow_credentials is True
        assert cors.allow_methods == ["GET", "POST", "PUT", "DELETE", "OPTIONS"]
        assert cors.allow_headers == ["Content-Type", "Authorization"]

    def test_email_defaults(self):
        email = Settings().email

        assert isinstance(email, EmailConfig)
        assert (email.host, email.port, email.secure) == ("smtp.gmail.com", 587, False)
        assert email.user is None
        assert email.recipient == "info@hsntech.in"


class TestEnvironment:
    def test_values_from_environment(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("PORT", "8080")
        monkeypatch.setenv("APP_ENV", "production")
        monkeypatch.setenv("ALLOWED_ORIGINS", " https://hsntech.in , ,https://www.hsntech.in")
        monkeypatch.setenv("DB_ENV", "prod")

        settings = Settings()

        assert settings.port == 8080
        assert settings.is_development is False
        assert settings.allowed_origins == ["https://hsntech.in", "https://www.hsntech.in"]
        assert settings.db_env == "prod"

    def test_email_from_environment(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("SMTP_HOST", "mail.hsntech.in")
        monkeypatch.setenv("SMTP_PORT", "465")
        monkeypatch.setenv("SMTP_SECURE", "true")
        monkeypatch.setenv("SMTP_USER", "bot")
        monkeypatch.setenv("SMTP_PASS", "secret")
        monkeypatch.setenv("EMAIL_TO", "owner@hsntech.in")

        email = Settings().email

        assert (email.host, email.port, email.secure) == ("mail.hsntech.in", 465, True)
        assert (email.user, email.password) == ("bot", "secret")
        assert email.recipient == "owner@hsntech.in"

    def test_env_file(self, tmp_path):
        (tmp_path / ".env").write_text("PORT=4000\nEMAIL_FROM=site@hsntech.in\n")

        settings = Settings()

        assert settings.port == 4000
        assert settings.email.sender == "site@hsntech.in"

    def test_invalid_db_env(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("DB_ENV", "staging")

        with pytest.raises(ValidationError):
            Settings()

    def test_field_names_are_accepted(self):
        settings = Settings(app_env="test", port=9000)

        assert settings.app_env == "test"
        assert settings.port == 9000
