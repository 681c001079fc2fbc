"""
Main Application Entry Point.

This module builds the FastAPI application: it configures the middleware
stack (security headers, CORS, request logging, body size limit), registers
the exception handlers and mounts the health endpoint and every project
router under ``/api/<project>``.

The ``DatabaseManager`` is created explicitly per application and kept on
``app.state.db_manager``. Project databases are bootstrapped at startup and,
if that failed, again on the first ``/api`` request.
"""

from contextlib import asynccontextmanager
from typing import Optional, Sequence

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hsn_api import __version__
from hsn_api.core.database import DatabaseManager
from hsn_api.core.logging_config import get_logger, setup_logging
from hsn_api.core.monitoring import initialize_logfire
from hsn_api.projects import PROJECTS, ProjectModule
from hsn_api.utils.mailer import Mailer

from .api import health
from .api.deps import ensure_database
from .bootstrap import DatabaseBootstrapper, try_bootstrap
from .core.config import Settings
from .core.config import settings as default_settings
from .exception_handlers import setup_exception_handlers
from .middleware import BodySizeLimitMiddleware, RequestLoggingMiddleware, SecurityHeadersMiddleware

# Initialize logging
setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifespan events.

    Startup tries to bootstrap the project databases; a failure is logged and
    left to the per-request bootstrap to retry. Shutdown closes every project
    database.
    """
    bootstrapper: DatabaseBootstrapper = app.state.bootstrapper
    settings: Settings = app.state.settings

    # Startup
    logger.info(f"Starting up HSN API (env={settings.app_env}, dbEnv={settings.db_env})...")
    if await try_bootstrap(bootstrapper):
        logger.info("Database initialized successfully")

    yield

    # Shutdown
    logger.info("Shutting down HSN API...")
    await bootstrapper.shutdown()
    logger.info("All database connections closed")


def create_app(
    settings: Optional[Settings] = None,
    manager: Optional[DatabaseManager] = None,
    projects: Optional[Sequence[ProjectModule]] = None,
    mailer: Optional[Mailer] = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Application settings, defaults to the environment
        manager: Database manager, a new one bound to ``settings.db_env`` by default
        projects: Projects to mount, defaults to every known project
        mailer: Notification mailer, defaults to one built from ``settings.email``
    """
    settings = settings or default_settings
    manager = manager or DatabaseManager(default_env=settings.db_env)
    projects = list(PROJECTS if projects is None else projects)

    app = FastAPI(
        title="HSN API",
        description="""
        HSN API Server

        Multi-project backend accepting contact form and newsletter submissions
        for the HSN websites. Each project keeps its own database.
        """,
        version=__version__,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.db_manager = manager
    app.state.mailer = mailer or Mailer(settings.email)
    app.state.bootstrapper = DatabaseBootstrapper(manager, projects)

    # Innermost first: the last middleware added wraps all others.
    app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=settings.max_body_bytes)
    cors = settings.cors
    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors.origins,
        allow_credentials=cors.allow_credentials,
        allow_methods=cors.allow_methods,
        allow_headers=cors.allow_headers,
    )
    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestLoggingMiddleware)

    setup_exception_handlers(app)

    app.include_router(health.router, tags=["health"])
    for project in projects:
        app.include_router(project.router, prefix=project.prefix, dependencies=[Depends(ensure_database)])
        logger.debug(f"Mounted project {project.name} at {project.prefix}")

    initialize_logfire(app)
    return app


app = create_app()
