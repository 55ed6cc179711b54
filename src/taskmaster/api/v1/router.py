"""Primary API router definition."""

from fastapi import APIRouter, Depends

from ..deps import require_user
from . import assignments, auth, backup, dashboard, students, writers

api_router = APIRouter()

api_router.include_router(auth.router)

_protected = [Depends(require_user)]
api_router.include_router(students.router, dependencies=_protected)
api_router.include_router(writers.router, dependencies=_protected)
api_router.include_router(assignments.router, dependencies=_protected)
api_router.include_router(dashboard.router, dependencies=_protected)
api_router.include_router(backup.router, dependencies=_protected)


@api_router.get("/health", tags=["health"])
async def healthcheck() -> dict[str, str]:
    """Basic health probe endpoint."""
    return {"status": "ok"}
