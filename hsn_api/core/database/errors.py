"""Error types for the multi-project database layer.

Defines a small hierarchy of exceptions raised by the configuration resolver
and the ``DatabaseManager`` to signal connection failures, lookups before
initialization, unknown projects or models, and schema sync failures.
"""

from __future__ import annotations

from typing import Optional


class DatabaseError(Exception):
    """Base error for all database layer exceptions."""


class ConfigurationError(DatabaseError):
    """Raised when no valid configuration exists for a project/environment."""

    def __init__(self, project_name: str, message: str) -> None:
        self.project_name = project_name
        super().__init__(f"Database configuration error for project '{project_name}': {message}")


class DatabaseConnectionError(DatabaseError):
    """Raised when connecting to or verifying a project database fails.

    Nothing is stored for the project when this is raised, so callers may retry.
    """

    def __init__(self, project_name: str, message: str) -> None:
        self.project_name = project_name
        super().__init__(f"Database connection failed for project '{project_name}': {message}")


class NotFoundError(DatabaseError):
    """Raised when a project or a model of a project is unknown."""

    def __init__(self, project_name: str, model_name: Optional[str] = None, message: Optional[str] = None) -> None:
        self.project_name = project_name
        self.model_name = model_name
        if message is None:
            if model_name is None:
                message = f"Project '{project_name}' not found"
            else:
                message = f"Model '{model_name}' not found for project '{project_name}'"
        super().__init__(message)


class NotInitializedError(NotFoundError):
    """Raised when a project is used before ``init_project`` succeeded for it."""

    def __init__(self, project_name: str, model_name: Optional[str] = None) -> None:
        super().__init__(
            project_name,
            model_name,
            message=f"Database not initialized for project: {project_name}. Call init_project() first.",
        )


class ModelAlreadyRegisteredError(DatabaseError):
    """Raised when a model name is registered twice for the same project."""

    def __init__(self, project_name: str, model_name: str) -> None:
        self.project_name = project_name
        self.model_name = model_name
        super().__init__(
            f"Model '{model_name}' is already registered for project '{project_name}'. "
            "Pass replace=True to redefine it."
        )


class SyncError(DatabaseError):
    """Raised when schema synchronization of a project database fails."""

    def __init__(self, project_name: str, message: str) -> None:
        self.project_name = project_name
        super().__init__(f"Database sync failed for project '{project_name}': {message}")
