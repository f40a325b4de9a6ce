"""Tests for the statistics aggregator."""

from __future__ import annotations

from datetime import UTC, datetime, timedelta

from skillforge.models import (
    DerivedStats,
    Goal,
    GoalActivityMetadata,
    InterviewActivityMetadata,
    MockInterview,
    Roadmap,
    RoadmapStep,
    RoadmapStepActivityMetadata,
)
from skillforge.models.activity import (
    GoalCompletedActivity,
    GoalCreatedActivity,
    InterviewCompletedActivity,
    RoadmapStepActivity,
)
from skillforge.services.stats import calculate_learning_streak, compute_stats, estimate_weekly_hours

NOW = datetime(2025, 6, 10, 15, 0, tzinfo=UTC)


def _goal_created(when: datetime) -> GoalCreatedActivity:
    return GoalCreatedActivity(
        title="New Goal Created", timestamp=when, metadata=GoalActivityMetadata(goal_id="g")
    )


def _roadmap(total: int, completed: int) -> Roadmap:
    steps = [
        RoadmapStep(id=f"s{index}", title=f"Step {index}", order=index, completed=index < completed)
        for index in range(total)
    ]
    return Roadmap(id=f"r{total}-{completed}", title="R", skill="Python", steps=steps)


def _interview(score: int | None) -> MockInterview:
    return MockInterview(id=f"i{score}", role="Dev", questions=[], score=score)


def test_empty_input_gives_all_zero_stats() -> None:
    stats = compute_stats([], [], [], [], now=NOW)

    assert stats == DerivedStats()
    assert stats.progress_percentage == 0
    assert stats.avg_interview_score == 0


def test_streak_counts_consecutive_days() -> None:
    activities = [_goal_created(NOW - timedelta(days=offset)) for offset in (0, 1, 2)]
    assert calculate_learning_streak(activities, now=NOW) == 3


def test_streak_stops_at_first_gap() -> None:
    activities = [_goal_created(NOW), _goal_created(NOW - timedelta(days=3))]
    assert calculate_learning_streak(activities, now=NOW) == 1


def test_streak_is_zero_without_activity_today() -> None:
    activities = [_goal_created(NOW - timedelta(days=offset)) for offset in (1, 2, 3)]
    assert calculate_learning_streak(activities, now=NOW) == 0


def test_streak_counts_multiple_entries_on_one_day_once() -> None:
    activities = [_goal_created(NOW), _goal_created(NOW - timedelta(hours=2))]
    assert calculate_learning_streak(activities, now=NOW) == 1


def test_weekly_hours_uses_per_type_estimates() -> None:
    activities = [
        RoadmapStepActivity(
            title="Step",
            timestamp=NOW - timedelta(days=1),
            metadata=RoadmapStepActivityMetadata(roadmap_id="r", step_id="s"),
        ),
        GoalCompletedActivity(
            title="Goal", timestamp=NOW, metadata=GoalActivityMetadata(goal_id="g")
        ),
        InterviewCompletedActivity(
            title="Interview",
            timestamp=NOW - timedelta(days=2),
            metadata=InterviewActivityMetadata(interview_id="i", score=80),
        ),
        _goal_created(NOW - timedelta(days=6)),
        _goal_created(NOW - timedelta(days=8)),
    ]

    # 2 + 1 + 0.5 + 0.25 = 3.75
    assert estimate_weekly_hours(activities, now=NOW) == 4


def test_weekly_hours_rounds_half_up() -> None:
    activities = [_goal_created(NOW - timedelta(hours=hour)) for hour in range(2)]
    assert estimate_weekly_hours(activities, now=NOW) == 1


def test_progress_percentage_across_roadmaps() -> None:
    stats = compute_stats([], [_roadmap(6, 3), _roadmap(4, 1)], [], [], now=NOW)

    assert stats.active_roadmaps == 2
    assert stats.total_steps == 10
    assert stats.completed_steps == 4
    assert stats.progress_percentage == 40


def test_goal_counts() -> None:
    goals = [
        Goal(id="a", title="A", target_date=NOW, completed=True),
        Goal(id="b", title="B", target_date=NOW),
    ]
    stats = compute_stats(goals, [], [], [], now=NOW)

    assert stats.total_goals == 2
    assert stats.completed_goals == 1


def test_average_score_ignores_unscored_interviews() -> None:
    stats = compute_stats([], [], [_interview(80), _interview(71), _interview(None)], [], now=NOW)

    assert stats.total_interviews == 3
    assert stats.avg_interview_score == 76
