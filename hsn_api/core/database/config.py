"""
Per-project database configuration.

This module resolves a project name and an environment tag (``local`` or
``prod``) into a validated ``DatabaseConfig``. A config is a tagged variant
over the two supported backend kinds:

- ``EmbeddedDatabaseConfig``: a file-backed SQLite database (``storage`` path).
- ``ServerDatabaseConfig``: a networked MySQL/PostgreSQL server (host, port,
  credentials and pool bounds).

Each project ships defaults for both environments. Every value can be
overridden from the environment (or ``.env``) with variables named
``<PROJECT>_<ENV>_DB_<FIELD>``, for example ``HSNWEB_PROD_DB_HOST``.
"""

from __future__ import annotations

from enum import Enum
from functools import lru_cache
from typing import Annotated, Any, Dict, List, Literal, Optional, Type, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, create_model
from pydantic_settings import BaseSettings, SettingsConfigDict

from .errors import ConfigurationError


class DatabaseEnvironment(str, Enum):
    """Database environment variant of a project."""

    LOCAL = "local"
    PROD = "prod"


class PoolConfig(BaseModel):
    """Connection pool bounds for networked databases."""

    model_config = ConfigDict(frozen=True)

    max_size: int = Field(default=5, ge=1, description="Maximum number of pooled connections")
    min_size: int = Field(default=0, ge=0, description="Minimum number of pooled connections")
    acquire_timeout_ms: int = Field(default=30000, ge=0, description="Max wait for a free connection")
    idle_timeout_ms: int = Field(default=10000, ge=0, description="Idle time before a connection is recycled")


class EmbeddedDatabaseConfig(BaseModel):
    """File-backed embedded database (SQLite)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["embedded"] = "embedded"
    dialect: Literal["sqlite"] = "sqlite"
    storage: str = Field(min_length=1, description="Database file path, or ':memory:'")
    echo: bool = Field(default=False, description="Log emitted SQL statements")


class ServerDatabaseConfig(BaseModel):
    """Networked database server (MySQL or PostgreSQL)."""

    model_config = ConfigDict(frozen=True)

    kind: Literal["server"] = "server"
    dialect: Literal["mysql", "postgresql"]
    host: str = Field(min_length=1)
    port: int = Field(gt=0, lt=65536)
    database: str = Field(min_length=1)
    username: str = Field(min_length=1)
    password: str = ""
    echo: bool = False
    pool: PoolConfig = Field(default_factory=PoolConfig)


DatabaseConfig = Annotated[
    Union[EmbeddedDatabaseConfig, ServerDatabaseConfig],
    Field(discriminator="kind"),
]

_CONFIG_ADAPTER: TypeAdapter = TypeAdapter(DatabaseConfig)


# =====================================================================
# Project defaults
# =====================================================================

_LOCAL_POOL = PoolConfig(max_size=5, min_size=0, acquire_timeout_ms=30000, idle_timeout_ms=10000)
_PROD_POOL = PoolConfig(max_size=10, min_size=2, acquire_timeout_ms=30000, idle_timeout_ms=10000)


def _local_defaults(project_name: str, echo: bool) -> Dict[str, Any]:
    return {
        "dialect": "sqlite",
        "storage": f"./data/{project_name}_local.sqlite",
        "host": "localhost",
        "port": 3306,
        "database": f"{project_name}_local",
        "username": "root",
        "password": "",
        "echo": echo,
        "pool": _LOCAL_POOL,
    }


def _prod_defaults(echo: bool) -> Dict[str, Any]:
    return {
        "dialect": "mysql",
        "host": "localhost",
        "port": 3306,
        "database": None,
        "username": None,
        "password": "",
        "echo": echo,
        "pool": _PROD_POOL,
    }


PROJECT_DEFAULTS: Dict[str, Dict[DatabaseEnvironment, Dict[str, Any]]] = {
    "hsnweb": {
        DatabaseEnvironment.LOCAL: _local_defaults("hsnweb", echo=True),
        DatabaseEnvironment.PROD: _prod_defaults(echo=True),
    },
    "aihunar": {
        DatabaseEnvironment.LOCAL: _local_defaults("aihunar", echo=True),
        DatabaseEnvironment.PROD: _prod_defaults(echo=False),
    },
}


# =====================================================================
# Environment overrides
# =====================================================================

# config attribute -> (environment variable suffix, type)
_ENV_FIELDS: Dict[str, tuple] = {
    "dialect": ("DIALECT", str),
    "storage": ("STORAGE", str),
    "host": ("HOST", str),
    "port": ("PORT", int),
    "database": ("NAME", str),
    "username": ("USER", str),
    "password": ("PASS", str),
}


class DatabaseSettings(BaseSettings):
    """Global database settings (which environment variant to use)."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
    )

    db_env: DatabaseEnvironment = Field(
        default=DatabaseEnvironment.LOCAL,
        alias="DB_ENV",
        description="Database environment variant used when none is given explicitly",
    )


class _DatabaseEnvOverrides(BaseSettings):
    """Base for the per-project ``<PROJECT>_<ENV>_DB_*`` override models."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=True,
    )


def env_prefix(project_name: str, environment: DatabaseEnvironment) -> str:
    """Return the environment variable prefix for a project/environment pair."""
    return f"{project_name.upper()}_{environment.value.upper()}_DB_"


@lru_cache(maxsize=None)
def _overrides_model(prefix: str) -> Type[_DatabaseEnvOverrides]:
    fields = {
        attr: (Optional[type_], Field(default=None, alias=f"{prefix}{suffix}"))
        for attr, (suffix, type_) in _ENV_FIELDS.items()
    }
    return create_model(f"DatabaseEnvOverrides_{prefix.rstrip('_')}", __base__=_DatabaseEnvOverrides, **fields)


def _load_overrides(project_name: str, environment: DatabaseEnvironment) -> Dict[str, Any]:
    overrides = _overrides_model(env_prefix(project_name, environment))()
    return {key: value for key, value in overrides.model_dump().items() if value is not None}


# =====================================================================
# Public API
# =====================================================================


def get_db_env() -> DatabaseEnvironment:
    """Get the current database environment (``DB_ENV``, default ``local``)."""
    return DatabaseSettings().db_env


def get_projects() -> List[str]:
    """Get all project names that have a database configuration."""
    return list(PROJECT_DEFAULTS)


def resolve_db_config(
    project_name: str,
    env: Optional[Union[str, DatabaseEnvironment]] = None,
) -> Union[EmbeddedDatabaseConfig, ServerDatabaseConfig]:
    """
    Resolve the database configuration of a project.

    Args:
        project_name: Name of the project (``hsnweb``, ``aihunar``, ...)
        env: Environment override; defaults to ``get_db_env()``

    Returns:
        The validated embedded or server configuration.

    Raises:
        ConfigurationError: If the project or environment is unknown, or the
            resolved values do not form a valid configuration.
    """
    try:
        environment = DatabaseEnvironment(env) if env is not None else get_db_env()
    except ValueError as exc:
        raise ConfigurationError(project_name, f"unknown environment '{env}'") from exc

    project_defaults = PROJECT_DEFAULTS.get(project_name)
    if project_defaults is None:
        raise ConfigurationError(project_name, "configuration not found")

    defaults = project_defaults.get(environment)
    if defaults is None:
        raise ConfigurationError(project_name, f"configuration not found for environment '{environment.value}'")

    values = {**defaults, **_load_overrides(project_name, environment)}

    if values["dialect"] == "sqlite":
        payload = {
            "kind": "embedded",
            "dialect": "sqlite",
            "storage": values.get("storage"),
            "echo": values["echo"],
        }
    else:
        payload = {
            "kind": "server",
            "dialect": values["dialect"],
            "host": values.get("host"),
            "port": values.get("port"),
            "database": values.get("database"),
            "username": values.get("username"),
            "password": values.get("password") or "",
            "echo": values["echo"],
            "pool": values["pool"],
        }

    try:
        return _CONFIG_ADAPTER.validate_python(payload)
    except ValidationError as exc:
        raise ConfigurationError(project_name, str(exc)) from exc
