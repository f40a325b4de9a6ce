"""Dashboard loader: every collection plus stats fetched concurrently."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field

from skillforge.models import DerivedStats, Goal, MockInterview, Roadmap
from skillforge.services.data_service import DataService

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DashboardSnapshot:
    goals: list[Goal] = field(default_factory=list)
    roadmaps: list[Roadmap] = field(default_factory=list)
    interviews: list[MockInterview] = field(default_factory=list)
    stats: DerivedStats = field(default_factory=DerivedStats)


class DashboardLoader:
    """Holds the latest snapshot for one user; ``refresh()`` reloads it."""

    def __init__(self, service: DataService, uid: str) -> None:
        self.service = service
        self.uid = uid
        self.snapshot = DashboardSnapshot()
        self.loading = False

    async def refresh(self) -> DashboardSnapshot:
        """Reload goals, roadmaps, interviews and stats in parallel.

        An unexpected failure resets the snapshot to empty collections and
        zero stats so the dashboard always has something to render.
        """
        self.loading = True
        try:
            goals, roadmaps, interviews, stats = await asyncio.gather(
                self.service.list_goals(self.uid),
                self.service.list_roadmaps(self.uid),
                self.service.list_interviews(self.uid),
                self.service.get_stats(self.uid),
            )
            self.snapshot = DashboardSnapshot(
                goals=goals, roadmaps=roadmaps, interviews=interviews, stats=stats
            )
        except Exception:
            logger.exception("Failed to load dashboard for %s", self.uid)
            self.snapshot = DashboardSnapshot()
        finally:
            self.loading = False
        return self.snapshot
