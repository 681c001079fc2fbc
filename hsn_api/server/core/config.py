"""
Configuration Settings.

This module defines the application configuration using Pydantic's BaseSettings.
It automatically loads all configuration from environment variables and .env file
without explicit dotenv loading.

Per-project database settings (``<PROJECT>_<ENV>_DB_*``) are resolved by
``hsn_api.core.database.config``; only the environment switch ``DB_ENV`` is
mirrored here for the health endpoint.
"""

from typing import List, Literal, Optional

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

# =====================================================================
# Grouped Configuration Models
# =====================================================================


class EmailConfig(BaseModel):
    """SMTP notification configuration."""

    host: str = Field(default="smtp.gmail.com", alias="SMTP_HOST", description="SMTP server host")
    port: int = Field(default=587, alias="SMTP_PORT", description="SMTP server port")
    secure: bool = Field(
        default=False, alias="SMTP_SECURE", description="Use implicit TLS; STARTTLS is used otherwise"
    )
    user: Optional[str] = Field(default=None, alias="SMTP_USER", description="SMTP login user")
    password: Optional[str] = Field(default=None, alias="SMTP_PASS", description="SMTP login password")
    sender: str = Field(default="noreply@hsntech.in", alias="EMAIL_FROM", description="Sender address")
    recipient: str = Field(default="info@hsntech.in", alias="EMAIL_TO", description="Notification recipient")
    timeout: float = Field(default=30.0, alias="SMTP_TIMEOUT", description="SMTP timeout in seconds")

    model_config = {"populate_by_name": True}


class CORSConfig(BaseModel):
    """CORS configuration."""

    origins: List[str] = Field(default_factory=list, description="Allowed CORS origins")
    allow_credentials: bool = Field(default=True, description="Allow credentials in CORS requests")
    allow_methods: List[str] = Field(
        default=["GET", "POST", "PUT", "DELETE", "OPTIONS"], description="Allowed HTTP methods"
    )
    allow_headers: List[str] = Field(default=["Content-Type", "Authorization"], description="Allowed HTTP headers")


# =====================================================================
# Main Settings Class
# =====================================================================


class Settings(BaseSettings):
    """
    Application settings model.

    All properties are automatically bound from environment variables and .env file.
    Pydantic's BaseSettings handles dotenv loading automatically via model_config.
    """

    # =====================================================================
    # Pydantic Configuration
    # =====================================================================
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
        populate_by_name=True,
    )

    # =====================================================================
    # Server Configuration
    # =====================================================================
    host: str = Field(default="0.0.0.0", description="Server host address to bind to", alias="HOST")
    port: int = Field(default=3001, description="Server port number", alias="PORT")
    app_env: str = Field(
        default="development",
        description="Deployment environment (development, production)",
        alias="APP_ENV",
    )
    max_body_bytes: int = Field(
        default=10 * 1024 * 1024,
        description="Maximum accepted request body size in bytes",
        alias="MAX_BODY_BYTES",
    )
    allowed_origins_raw: str = Field(
        default="http://localhost:3000,http://localhost:5500",
        description="Comma separated list of allowed CORS origins",
        alias="ALLOWED_ORIGINS",
    )

    # =====================================================================
    # Logging Configuration
    # =====================================================================
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        alias="LOG_LEVEL",
    )
    log_format: Literal["simple", "detailed", "json"] = Field(
        default="detailed", description="Log line format", alias="LOG_FORMAT"
    )
    log_file_dir: str = Field(default="logs", description="Directory of the log file", alias="LOG_FILE_DIR")
    enable_file_logging: bool = Field(
        default=False, description="Also write logs to a file", alias="ENABLE_FILE_LOGGING"
    )

    # =====================================================================
    # Database Configuration
    # =====================================================================
    db_env: Literal["local", "prod"] = Field(
        default="local",
        description="Database environment variant used by every project",
        alias="DB_ENV",
    )

    # =====================================================================
    # Email Configuration
    # =====================================================================
    smtp_host: str = Field(default="smtp.gmail.com", alias="SMTP_HOST")
    smtp_port: int = Field(default=587, alias="SMTP_PORT")
    smtp_secure: bool = Field(default=False, alias="SMTP_SECURE")
    smtp_user: Optional[str] = Field(default=None, alias="SMTP_USER")
    smtp_pass: Optional[str] = Field(default=None, alias="SMTP_PASS")
    smtp_timeout: float = Field(default=30.0, alias="SMTP_TIMEOUT")
    email_from: str = Field(default="noreply@hsntech.in", alias="EMAIL_FROM")
    email_to: str = Field(default="info@hsntech.in", alias="EMAIL_TO")

    # =====================================================================
    # Computed Properties (Grouped Configurations)
    # =====================================================================

    @property
    def is_development(self) -> bool:
        return self.app_env == "development"

    @property
    def allowed_origins(self) -> List[str]:
        """Get the allowed CORS origins as a list."""
        return [origin.strip() for origin in self.allowed_origins_raw.split(",") if origin.strip()]

    @property
    def email(self) -> EmailConfig:
        """Get SMTP configuration from environment variables."""
        return EmailConfig.model_validate(self.model_dump(by_alias=True))

    @property
    def cors(self) -> CORSConfig:
        """Get CORS configuration."""
        return CORSConfig(origins=self.allowed_origins)


# Global settings instance
settings = Settings()
