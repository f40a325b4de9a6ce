"""Entities owned by a single user identity."""

from __future__ import annotations

from typing import Literal

from pydantic import ConfigDict, Field, model_validator

from skillforge.models.base import CamelModel, Timestamp, utcnow

Difficulty = Literal["beginner", "intermediate", "advanced"]
ResourceType = Literal["video", "article", "course", "book", "practice"]
NotificationType = Literal["success", "warning", "info", "reminder"]


class UserProfile(CamelModel):
    """Identity and career details; created at first sign-in or sign-up."""

    uid: str
    email: str = ""
    display_name: str = ""
    photo_url: str | None = None
    current_role: str = ""
    target_role: str = ""
    experience: str = ""
    location: str = ""
    bio: str = ""
    skills: list[str] = Field(default_factory=list)
    created_at: Timestamp = Field(default_factory=utcnow)
    updated_at: Timestamp = Field(default_factory=utcnow)


class GoalDraft(CamelModel):
    """Fields supplied by the user when creating a goal.

    New goals always start incomplete; completion goes through an update so
    that it is recorded in the activity log.
    """

    title: str
    description: str = ""
    target_date: Timestamp
    category: str | None = None


class Goal(GoalDraft):
    id: str
    completed: bool = False
    created_at: Timestamp = Field(default_factory=utcnow)


class Resource(CamelModel):
    """External learning resource; immutable once created."""

    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    type: ResourceType = "article"
    url: str = "#"
    description: str | None = None


class RoadmapStep(CamelModel):
    id: str
    title: str
    description: str = ""
    completed: bool = False
    resources: list[Resource] = Field(default_factory=list)
    estimated_time: str = "1 week"
    order: int


class RoadmapDraft(CamelModel):
    """Roadmap shape produced by the AI gateway, before persistence."""

    title: str
    description: str = ""
    skill: str
    steps: list[RoadmapStep]
    estimated_duration: str = ""
    difficulty: Difficulty = "beginner"

    @model_validator(mode="after")
    def _check_steps_unique(self) -> RoadmapDraft:
        # Step toggles address steps by id; order drives display.
        ids = [step.id for step in self.steps]
        if len(set(ids)) != len(ids):
            raise ValueError("Roadmap step ids must be unique")
        orders = [step.order for step in self.steps]
        if len(set(orders)) != len(orders):
            raise ValueError("Roadmap step order values must be unique")
        return self


class Roadmap(RoadmapDraft):
    id: str
    created_at: Timestamp = Field(default_factory=utcnow)
    updated_at: Timestamp = Field(default_factory=utcnow)

    @property
    def completed_steps(self) -> int:
        return sum(1 for step in self.steps if step.completed)


class InterviewQuestion(CamelModel):
    id: str
    question: str
    answer: str | None = None
    feedback: str | None = None
    score: float | None = Field(default=None, ge=0, le=100)

    @property
    def is_answered(self) -> bool:
        return bool(self.answer and self.answer.strip())


class InterviewDraft(CamelModel):
    """A mock interview before it is saved."""

    role: str
    questions: list[InterviewQuestion]
    feedback: str | None = None
    score: int | None = Field(default=None, ge=0, le=100)


class MockInterview(InterviewDraft):
    id: str
    created_at: Timestamp = Field(default_factory=utcnow)


class InterviewEvaluation(CamelModel):
    feedback: str
    score: int = Field(ge=0, le=100)


class AssessmentQuestion(CamelModel):
    """Multiple-choice skill assessment question."""

    question: str
    options: list[str] = Field(min_length=2)
    correct_answer: int = Field(ge=0)
    explanation: str = ""


class NotificationDraft(CamelModel):
    type: NotificationType = "info"
    title: str
    message: str
    action_url: str | None = None


class Notification(NotificationDraft):
    id: str
    timestamp: Timestamp = Field(default_factory=utcnow)
    read: bool = False
