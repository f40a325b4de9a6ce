"""Statistics aggregator.

Every figure is recomputed from the entity collections and the activity log;
nothing here performs I/O or reads stored counters.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from datetime import date, datetime, timedelta

from skillforge.models import ActivityLogEntry, DerivedStats, Goal, MockInterview, Roadmap

__all__ = [
    "DEFAULT_ACTIVITY_HOURS",
    "HOURS_PER_ACTIVITY",
    "calculate_learning_streak",
    "compute_stats",
    "estimate_weekly_hours",
]

# Rough time estimates per logged event, in hours.
HOURS_PER_ACTIVITY: dict[str, float] = {
    "roadmap_step": 2.0,
    "goal_completed": 1.0,
    "interview_completed": 0.5,
}
DEFAULT_ACTIVITY_HOURS = 0.25
WEEKLY_WINDOW = timedelta(days=7)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _local_now(now: datetime | None) -> datetime:
    if now is None:
        return datetime.now().astimezone()
    return now if now.tzinfo else now.astimezone()


def _active_days(activities: Iterable[ActivityLogEntry], now: datetime) -> set[date]:
    return {entry.timestamp.astimezone(now.tzinfo).date() for entry in activities}


def calculate_learning_streak(
    activities: Sequence[ActivityLogEntry], *, now: datetime | None = None
) -> int:
    """Count consecutive calendar days with activity, walking back from today.

    Days are taken in the timezone of ``now`` (the local zone by default).
    A day without activity ends the streak, so a user who has not logged
    anything yet today has a streak of 0.
    """
    now = _local_now(now)
    days = _active_days(activities, now)

    streak = 0
    current = now.date()
    while current in days:
        streak += 1
        current -= timedelta(days=1)
    return streak


def estimate_weekly_hours(
    activities: Sequence[ActivityLogEntry], *, now: datetime | None = None
) -> int:
    """Estimate learning hours from the last seven days of activity."""
    now = _local_now(now)
    cutoff = now - WEEKLY_WINDOW
    total = sum(
        HOURS_PER_ACTIVITY.get(entry.type, DEFAULT_ACTIVITY_HOURS)
        for entry in activities
        if entry.timestamp >= cutoff
    )
    return _round_half_up(total)


def compute_stats(
    goals: Sequence[Goal],
    roadmaps: Sequence[Roadmap],
    interviews: Sequence[MockInterview],
    activities: Sequence[ActivityLogEntry],
    *,
    now: datetime | None = None,
) -> DerivedStats:
    """Derive dashboard statistics from raw collections."""
    completed_goals = sum(1 for goal in goals if goal.completed)
    total_steps = sum(len(roadmap.steps) for roadmap in roadmaps)
    completed_steps = sum(roadmap.completed_steps for roadmap in roadmaps)
    progress = _round_half_up(completed_steps / total_steps * 100) if total_steps else 0

    scores = [interview.score for interview in interviews if interview.score is not None]
    avg_score = _round_half_up(sum(scores) / len(scores)) if scores else 0

    return DerivedStats(
        total_goals=len(goals),
        completed_goals=completed_goals,
        active_roadmaps=len(roadmaps),
        total_steps=total_steps,
        completed_steps=completed_steps,
        progress_percentage=progress,
        total_interviews=len(interviews),
        avg_interview_score=avg_score,
        learning_streak=calculate_learning_streak(activities, now=now),
        weekly_hours=estimate_weekly_hours(activities, now=now),
    )
