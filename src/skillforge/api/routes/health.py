"""Health check routes."""

from __future__ import annotations

from fastapi import APIRouter

from skillforge.api.dependencies import DataServiceDep

router = APIRouter(tags=["health"])


@router.get("/health")
def health_check(service: DataServiceDep) -> dict[str, str]:
    """Return the API status and the active persistence mode."""
    return {"status": "healthy", "persistence": service.mode}
