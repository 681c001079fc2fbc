"""
Multi-project database connection manager.

The ``DatabaseManager`` is the single authority for "is project X's database
ready, and which models does it have". It owns one ``ProjectDatabase`` per
project and, under each, a registry of model name -> model.

Usage:
    ```python
    manager = DatabaseManager()
    database = await manager.init_project("hsnweb")
    manager.register_model("hsnweb", "ContactSubmission", lambda db: ProjectModel(db, ContactSubmission))
    await manager.sync_project("hsnweb", SyncOptions(alter=True))
    ...
    await manager.close_all()
    ```

Instances are constructed explicitly and handed to whatever composes the
HTTP application or CLI; there is no module-level manager.
"""

from __future__ import annotations

from typing import Any, Callable, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict

from hsn_api.core.logging_config import get_logger
from hsn_api.core.single_flight import SingleFlight

from .config import (
    DatabaseEnvironment,
    EmbeddedDatabaseConfig,
    ServerDatabaseConfig,
    resolve_db_config,
)
from .connection import ProjectDatabase
from .errors import (
    DatabaseConnectionError,
    ModelAlreadyRegisteredError,
    NotFoundError,
    NotInitializedError,
    SyncError,
)
from .model import ProjectModel
from .utils import SyncOptions

logger = get_logger(__name__)

ConfigResolver = Callable[
    [str, Optional[Union[str, DatabaseEnvironment]]],
    Union[EmbeddedDatabaseConfig, ServerDatabaseConfig],
]
ModelDefiner = Callable[[ProjectDatabase], Any]


class ProjectStatus(BaseModel):
    """Read-only status snapshot of one initialized project."""

    model_config = ConfigDict(frozen=True)

    connected: bool = True
    dialect: str
    models: List[str]


class DatabaseManager:
    """Owns per-project database handles and their model registries."""

    def __init__(
        self,
        config_resolver: ConfigResolver = resolve_db_config,
        default_env: Optional[Union[str, DatabaseEnvironment]] = None,
    ) -> None:
        """
        Args:
            config_resolver: Maps (project, env) to a database configuration
            default_env: Environment used when ``init_project`` gets none;
                ``None`` defers to ``DB_ENV``
        """
        self._config_resolver = config_resolver
        self._default_env = default_env
        self._connections: Dict[str, ProjectDatabase] = {}
        self._models: Dict[str, Dict[str, Any]] = {}
        self._flight: SingleFlight[ProjectDatabase] = SingleFlight()

    # =====================================================================
    # Initialization
    # =====================================================================

    async def init_project(
        self,
        project_name: str,
        env: Optional[Union[str, DatabaseEnvironment]] = None,
    ) -> ProjectDatabase:
        """
        Initialize the database of a project, once.

        Returns the existing handle if the project is already initialized.
        Concurrent first calls share a single connection attempt and all see
        its outcome.

        Raises:
            ConfigurationError: No valid configuration for the project
            DatabaseConnectionError: Building the engine, connecting or verifying
                failed; nothing is stored so a later call may retry
        """
        existing = self._connections.get(project_name)
        if existing is not None:
            return existing
        return await self._flight.run(project_name, lambda: self._connect(project_name, env))

    async def _connect(
        self,
        project_name: str,
        env: Optional[Union[str, DatabaseEnvironment]],
    ) -> ProjectDatabase:
        existing = self._connections.get(project_name)
        if existing is not None:
            return existing

        config = self._config_resolver(project_name, env if env is not None else self._default_env)
        database: Optional[ProjectDatabase] = None
        try:
            database = ProjectDatabase.from_config(project_name, config)
            await database.verify()
        except Exception as exc:
            if database is not None:
                await database.dispose()
            logger.error(f"[{project_name}] Database connection failed: {exc}")
            raise DatabaseConnectionError(project_name, str(exc)) from exc

        self._connections[project_name] = database
        self._models[project_name] = {}
        logger.info(f"[{project_name}] Database connection established ({database.dialect})")
        return database

    # =====================================================================
    # Lookups
    # =====================================================================

    def get_connection(self, project_name: str) -> ProjectDatabase:
        """
        Get the handle of an initialized project.

        Raises:
            NotInitializedError: ``init_project`` never succeeded for the project
        """
        database = self._connections.get(project_name)
        if database is None:
            raise NotInitializedError(project_name)
        return database

    def is_initialized(self, project_name: str) -> bool:
        return project_name in self._connections

    def register_model(
        self,
        project_name: str,
        model_name: str,
        definer: ModelDefiner,
        replace: bool = False,
    ) -> Any:
        """
        Define a model against a project's handle and register it.

        Args:
            project_name: Initialized project
            model_name: Registry key
            definer: Called with the project's ``ProjectDatabase``; its return
                value is what gets registered
            replace: Allow overwriting an existing registration

        Returns:
            The value produced by ``definer``.

        Raises:
            NotInitializedError: The project is not initialized
            ModelAlreadyRegisteredError: ``model_name`` exists and ``replace`` is False
        """
        database = self.get_connection(project_name)
        models = self._models[project_name]
        if model_name in models and not replace:
            raise ModelAlreadyRegisteredError(project_name, model_name)

        model = definer(database)
        models[model_name] = model
        logger.debug(f"[{project_name}] Registered model {model_name}")
        return model

    def get_model(self, project_name: str, model_name: str) -> Any:
        """
        Get a registered model.

        Raises:
            NotInitializedError: The project is not initialized
            NotFoundError: The model is not registered for the project
        """
        models = self._models.get(project_name)
        if models is None:
            raise NotInitializedError(project_name, model_name)
        if model_name not in models:
            raise NotFoundError(project_name, model_name)
        return models[model_name]

    def get_models(self, project_name: str) -> Dict[str, Any]:
        """Get a copy of a project's model registry (empty if not initialized)."""
        return dict(self._models.get(project_name, {}))

    # =====================================================================
    # Schema sync
    # =====================================================================

    async def sync_project(self, project_name: str, options: SyncOptions = SyncOptions()) -> List[str]:
        """
        Synchronize the tables of a project's registered models.

        Returns:
            Columns added by ``alter`` as ``table.column``.

        Raises:
            NotInitializedError: The project is not initialized
            SyncError: The database rejected the synchronization
        """
        database = self.get_connection(project_name)
        tables = [model.table for model in self._models[project_name].values() if isinstance(model, ProjectModel)]
        try:
            added = await database.sync(tables, options)
        except Exception as exc:
            logger.error(f"[{project_name}] Database sync failed: {exc}")
            raise SyncError(project_name, str(exc)) from exc

        logger.info(
            f"[{project_name}] Database synced ({len(tables)} tables, alter={options.alter}, force={options.force})"
        )
        if added:
            logger.info(f"[{project_name}] Added columns: {', '.join(added)}")
        return added

    async def sync_all(self, options: SyncOptions = SyncOptions()) -> None:
        """Synchronize every initialized project in turn; the first failure aborts the rest."""
        for project_name in list(self._connections):
            await self.sync_project(project_name, options)

    # =====================================================================
    # Shutdown
    # =====================================================================

    async def close_project(self, project_name: str) -> None:
        """
        Close a project's connections and drop its registry (no-op if unknown).

        An ``init_project`` still in flight for the project is waited for first,
        so the handle it produces is closed too.
        """
        await self._flight.wait(project_name)
        database = self._connections.get(project_name)
        if database is None:
            return
        try:
            await database.dispose()
        finally:
            self._connections.pop(project_name, None)
            self._models.pop(project_name, None)
            logger.info(f"[{project_name}] Database connection closed")

    async def close_all(self) -> None:
        """Close every initialized project and every one still initializing."""
        for project_name in dict.fromkeys([*self._connections, *self._flight.pending()]):
            await self.close_project(project_name)

    # =====================================================================
    # Status
    # =====================================================================

    def get_status(self) -> Dict[str, ProjectStatus]:
        """Snapshot of every initialized project: dialect and model names."""
        return {
            project_name: ProjectStatus(dialect=database.dialect, models=list(self._models.get(project_name, {})))
            for project_name, database in self._connections.items()
        }
