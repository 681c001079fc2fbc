"""
Lazy database bootstrap of the HTTP application.

The bootstrapper initializes every ``auto_init`` project, registers its
models and synchronizes its schema. It runs at most once at a time: requests
arriving while a bootstrap is in flight wait for that same attempt, and a
failed attempt is retried by the next request.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

from hsn_api.core.database import DatabaseError, DatabaseManager
from hsn_api.core.logging_config import get_logger
from hsn_api.core.single_flight import SingleFlight

if TYPE_CHECKING:
    from hsn_api.projects import ProjectModule

logger = get_logger(__name__)


class DatabaseUnavailableError(Exception):
    """Raised to a request when the project databases could not be prepared."""

    def __init__(self, message: str = "Database not available. Please try again.") -> None:
        self.message = message
        super().__init__(message)


class DatabaseBootstrapper:
    """Prepares the databases of the mounted projects, once."""

    def __init__(self, manager: DatabaseManager, projects: Sequence[ProjectModule]) -> None:
        self.manager = manager
        self.projects = list(projects)
        self._flight: SingleFlight[None] = SingleFlight()
        self._ready = False

    @property
    def ready(self) -> bool:
        return self._ready

    async def ensure_ready(self) -> None:
        """
        Bootstrap the databases unless that already succeeded.

        Raises:
            DatabaseError: Initializing, registering or syncing a project failed
        """
        if self._ready:
            return
        await self._flight.run("bootstrap", self._bootstrap)

    async def _bootstrap(self) -> None:
        if self._ready:
            return
        for project in self.projects:
            if not project.auto_init:
                continue
            await self.manager.init_project(project.name)
            if project.init_models is not None:
                project.init_models(self.manager)
            await self.manager.sync_project(project.name, project.sync_options)
            logger.info(f"[{project.name}] Database ready")
        self._ready = True

    async def shutdown(self) -> None:
        """Close every project database; the next request bootstraps again.

        A bootstrap in flight is allowed to finish first so that nothing it
        opens outlives the shutdown.
        """
        await self._flight.wait("bootstrap")
        self._ready = False
        await self.manager.close_all()


async def try_bootstrap(bootstrapper: DatabaseBootstrapper) -> bool:
    """Bootstrap at startup, logging instead of raising on failure."""
    try:
        await bootstrapper.ensure_ready()
    except DatabaseError as e:
        logger.error(f"Database initialization failed: {e}", exc_info=True)
        return False
    return True
