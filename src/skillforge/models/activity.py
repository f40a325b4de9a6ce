"""Activity log entries: one tagged variant per event kind.

Each kind carries its own metadata shape, so ``entry.metadata.goal_id`` is
only reachable on goal events.
"""

from __future__ import annotations

from typing import Annotated, Any, Literal

from pydantic import Field, TypeAdapter

from skillforge.models.base import CamelModel, Timestamp, utcnow

ActivityType = Literal[
    "goal_created",
    "goal_completed",
    "roadmap_created",
    "roadmap_step",
    "interview_completed",
]


class GoalActivityMetadata(CamelModel):
    goal_id: str


class RoadmapActivityMetadata(CamelModel):
    roadmap_id: str


class RoadmapStepActivityMetadata(CamelModel):
    roadmap_id: str
    step_id: str


class InterviewActivityMetadata(CamelModel):
    interview_id: str
    score: int | None = None


class _ActivityBase(CamelModel):
    id: str = ""
    title: str
    description: str = ""
    timestamp: Timestamp = Field(default_factory=utcnow)


class GoalCreatedActivity(_ActivityBase):
    type: Literal["goal_created"] = "goal_created"
    metadata: GoalActivityMetadata


class GoalCompletedActivity(_ActivityBase):
    type: Literal["goal_completed"] = "goal_completed"
    metadata: GoalActivityMetadata


class RoadmapCreatedActivity(_ActivityBase):
    type: Literal["roadmap_created"] = "roadmap_created"
    metadata: RoadmapActivityMetadata


class RoadmapStepActivity(_ActivityBase):
    type: Literal["roadmap_step"] = "roadmap_step"
    metadata: RoadmapStepActivityMetadata


class InterviewCompletedActivity(_ActivityBase):
    type: Literal["interview_completed"] = "interview_completed"
    metadata: InterviewActivityMetadata


ActivityLogEntry = Annotated[
    GoalCreatedActivity
    | GoalCompletedActivity
    | RoadmapCreatedActivity
    | RoadmapStepActivity
    | InterviewCompletedActivity,
    Field(discriminator="type"),
]

_activity_adapter: TypeAdapter[ActivityLogEntry] = TypeAdapter(ActivityLogEntry)


def parse_activity(record: dict[str, Any]) -> ActivityLogEntry:
    """Validate a raw record into the matching activity variant."""
    return _activity_adapter.validate_python(record)
