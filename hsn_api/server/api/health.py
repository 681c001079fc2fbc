"""
Health Check Endpoints.

This module provides the system status endpoint used for monitoring and
deployment verification. It reports the database manager's status snapshot.
"""

from datetime import datetime, timezone

from fastapi import APIRouter

from hsn_api import __version__

from .deps import ManagerDep, SettingsDep

router = APIRouter()


@router.get(
    "/health",
    summary="Health Check",
    description="Check the operational status of the API server and its project databases.",
    response_description="Status object.",
)
async def health_check(settings: SettingsDep, manager: ManagerDep):
    """
    Health check endpoint.

    Returns a status indicator, the server version, the active database
    environment and one entry per initialized project database. Never touches
    the databases themselves.
    """
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": __version__,
        "dbEnv": settings.db_env,
        "databases": {name: status.model_dump() for name, status in manager.get_status().items()},
    }
