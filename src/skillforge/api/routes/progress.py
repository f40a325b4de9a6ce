"""Activity log, statistics and dashboard routes."""

from __future__ import annotations

from fastapi import APIRouter

from skillforge.api.dependencies import CurrentUid, DataServiceDep
from skillforge.api.schemas.requests import DashboardResponse
from skillforge.models import ActivityLogEntry, DerivedStats
from skillforge.services.dashboard import DashboardLoader

router = APIRouter(tags=["progress"])


@router.get("/activities", response_model=list[ActivityLogEntry])
async def list_activities(uid: CurrentUid, service: DataServiceDep) -> list[ActivityLogEntry]:
    return await service.list_activities(uid)


@router.get("/stats", response_model=DerivedStats)
async def get_stats(uid: CurrentUid, service: DataServiceDep) -> DerivedStats:
    """Return statistics recomputed from the user's collections."""
    return await service.get_stats(uid)


@router.get("/dashboard", response_model=DashboardResponse)
async def get_dashboard(uid: CurrentUid, service: DataServiceDep) -> DashboardResponse:
    """Load goals, roadmaps, interviews and stats in one request."""
    snapshot = await DashboardLoader(service, uid).refresh()
    return DashboardResponse(
        goals=snapshot.goals,
        roadmaps=snapshot.roadmaps,
        interviews=snapshot.interviews,
        stats=snapshot.stats,
    )
