"""Pydantic schemas for request bodies.

Create endpoints accept the domain drafts directly (``GoalDraft``,
``RoadmapDraft``, ...); the schemas here cover partial updates and the
AI generation inputs.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import Field, field_validator

from skillforge.models import DerivedStats, Goal, InterviewQuestion, MockInterview, Roadmap
from skillforge.models.base import CamelModel
from skillforge.models.entities import Difficulty


class GoalUpdateRequest(CamelModel):
    """All fields optional; only provided fields are updated."""

    title: str | None = None
    description: str | None = None
    target_date: datetime | None = None
    completed: bool | None = None
    category: str | None = None

    @field_validator("title", "description", "target_date", "completed", mode="before")
    @classmethod
    def _reject_null(cls, value: object) -> object:
        # Omit a field to leave it unchanged; only category may be cleared.
        if value is None:
            raise ValueError("must not be null")
        return value


class StepUpdateRequest(CamelModel):
    completed: bool = Field(description="New completion state of the step")


class ProfileCreateRequest(CamelModel):
    email: str = ""
    display_name: str = ""
    photo_url: str | None = None


class ProfileUpdateRequest(CamelModel):
    """All fields optional; only provided fields are updated."""

    display_name: str | None = None
    photo_url: str | None = None
    current_role: str | None = None
    target_role: str | None = None
    experience: str | None = None
    location: str | None = None
    bio: str | None = None
    skills: list[str] | None = None


class RoadmapGenerateRequest(CamelModel):
    skill: str = Field(min_length=1)
    level: Difficulty = "beginner"
    target_role: str = Field(min_length=1)


class InterviewGenerateRequest(CamelModel):
    role: str = Field(min_length=1)
    experience: str = "junior"


class InterviewAnswersRequest(CamelModel):
    """Answered questions of a mock interview."""

    role: str = Field(min_length=1)
    questions: list[InterviewQuestion]


class AssessmentGenerateRequest(CamelModel):
    skill: str = Field(min_length=1)


class DashboardResponse(CamelModel):
    goals: list[Goal]
    roadmaps: list[Roadmap]
    interviews: list[MockInterview]
    stats: DerivedStats
