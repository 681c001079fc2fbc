"""
Multi-project database layer.

Resolves per-project configuration, owns one async engine per project and
the models registered against it.
"""

from .config import (
    DatabaseConfig,
    DatabaseEnvironment,
    EmbeddedDatabaseConfig,
    PoolConfig,
    ServerDatabaseConfig,
    get_db_env,
    get_projects,
    resolve_db_config,
)
from .connection import ProjectDatabase
from .errors import (
    ConfigurationError,
    DatabaseConnectionError,
    DatabaseError,
    ModelAlreadyRegisteredError,
    NotFoundError,
    NotInitializedError,
    SyncError,
)
from .manager import DatabaseManager, ProjectStatus
from .model import ProjectModel
from .utils import SyncOptions

__all__ = [
    "ConfigurationError",
    "DatabaseConfig",
    "DatabaseConnectionError",
    "DatabaseEnvironment",
    "DatabaseError",
    "DatabaseManager",
    "EmbeddedDatabaseConfig",
    "ModelAlreadyRegisteredError",
    "NotFoundError",
    "NotInitializedError",
    "PoolConfig",
    "ProjectDatabase",
    "ProjectModel",
    "ProjectStatus",
    "ServerDatabaseConfig",
    "SyncError",
    "SyncOptions",
    "get_db_env",
    "get_projects",
    "resolve_db_config",
]
