from __future__ import annotations

import asyncio
from datetime import UTC, datetime

from skillforge.models import DerivedStats, GoalDraft
from skillforge.services.dashboard import DashboardLoader
from skillforge.services.data_service import DataService


class ExplodingService:
    """Stands in for a data service whose reads fail unexpectedly."""

    async def list_goals(self, uid: str):
        raise RuntimeError("boom")

    async def list_roadmaps(self, uid: str):
        return []

    async def list_interviews(self, uid: str):
        return []

    async def get_stats(self, uid: str):
        return DerivedStats()


def test_refresh_loads_everything(local_service: DataService) -> None:
    asyncio.run(
        local_service.create_goal("u1", GoalDraft(title="Learn SQL", target_date=datetime.now(UTC)))
    )
    loader = DashboardLoader(local_service, "u1")

    snapshot = asyncio.run(loader.refresh())

    assert [goal.title for goal in snapshot.goals] == ["Learn SQL"]
    assert snapshot.stats.total_goals == 1
    assert loader.snapshot is snapshot
    assert loader.loading is False


def test_refresh_failure_resets_to_empty(local_service: DataService) -> None:
    asyncio.run(
        local_service.create_goal("u1", GoalDraft(title="Learn SQL", target_date=datetime.now(UTC)))
    )
    loader = DashboardLoader(local_service, "u1")
    asyncio.run(loader.refresh())

    loader.service = ExplodingService()  # type: ignore[assignment]
    snapshot = asyncio.run(loader.refresh())

    assert snapshot.goals == []
    assert snapshot.stats == DerivedStats()
    assert loader.loading is False
