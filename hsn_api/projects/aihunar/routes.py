"""
AI Hunar API endpoints.

Base path: ``/api/aihunar``. The project has no persisted data yet.
"""

from fastapi import APIRouter

router = APIRouter(tags=["aihunar"])


@router.get(
    "/health",
    summary="AI Hunar Health Check",
    description="Confirm the AI Hunar API is mounted and reachable.",
)
async def health_check():
    return {
        "success": True,
        "project": "aihunar",
        "status": "ok",
        "message": "AI Hunar API is ready",
    }
