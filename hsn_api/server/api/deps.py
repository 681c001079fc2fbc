"""
API Dependencies.

Provides the application-scoped collaborators (settings, database manager,
mailer) to endpoints, and the guard that makes sure the project databases are
ready before an ``/api`` endpoint runs.
"""

from typing import Annotated

from fastapi import Depends, Request

from hsn_api.core.database import DatabaseError, DatabaseManager
from hsn_api.core.logging_config import get_logger
from hsn_api.server.bootstrap import DatabaseBootstrapper, DatabaseUnavailableError
from hsn_api.server.core.config import Settings
from hsn_api.utils.mailer import Mailer

logger = get_logger(__name__)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_manager(request: Request) -> DatabaseManager:
    return request.app.state.db_manager


def get_mailer(request: Request) -> Mailer:
    return request.app.state.mailer


def get_bootstrapper(request: Request) -> DatabaseBootstrapper:
    return request.app.state.bootstrapper


async def ensure_database(bootstrapper: DatabaseBootstrapper = Depends(get_bootstrapper)) -> None:
    """Bootstrap the project databases on first use; 503 when that fails."""
    try:
        await bootstrapper.ensure_ready()
    except DatabaseError as e:
        logger.error(f"Failed to initialize database: {e}")
        raise DatabaseUnavailableError() from e


SettingsDep = Annotated[Settings, Depends(get_settings)]
ManagerDep = Annotated[DatabaseManager, Depends(get_manager)]
MailerDep = Annotated[Mailer, Depends(get_mailer)]
