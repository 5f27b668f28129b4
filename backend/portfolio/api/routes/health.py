"""Health Check — liveness endpoint with catalog sizes.

Invariants:
    - GET /api/v1/health/ always returns 200 if the process is up
"""

import logging

from fastapi import APIRouter, Request, status

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("/", status_code=status.HTTP_200_OK)
async def health_check(request: Request):
    """Liveness check. Reports how many records each catalog holds."""
    state = request.app.state
    experiences = getattr(state, "experience_manager", None)
    projects = getattr(state, "project_manager", None)
    return {
        "status": "healthy",
        "service": "portfolio-api",
        "version": "1.0.0",
        "catalogs": {
            "experiences": len(experiences) if experiences is not None else 0,
            "projects": len(projects) if projects is not None else 0,
        },
    }
