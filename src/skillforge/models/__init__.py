"""Domain models shared by the data access layer, the AI gateway and the API."""

from skillforge.models.activity import (
    ActivityLogEntry,
    ActivityType,
    GoalActivityMetadata,
    InterviewActivityMetadata,
    RoadmapActivityMetadata,
    RoadmapStepActivityMetadata,
    parse_activity,
)
from skillforge.models.entities import (
    AssessmentQuestion,
    Goal,
    GoalDraft,
    InterviewDraft,
    InterviewEvaluation,
    InterviewQuestion,
    MockInterview,
    Notification,
    NotificationDraft,
    Resource,
    Roadmap,
    RoadmapDraft,
    RoadmapStep,
    UserProfile,
)
from skillforge.models.stats import DerivedStats

__all__ = [
    "ActivityLogEntry",
    "ActivityType",
    "AssessmentQuestion",
    "DerivedStats",
    "Goal",
    "GoalActivityMetadata",
    "GoalDraft",
    "InterviewActivityMetadata",
    "InterviewDraft",
    "InterviewEvaluation",
    "InterviewQuestion",
    "MockInterview",
    "Notification",
    "NotificationDraft",
    "Resource",
    "Roadmap",
    "RoadmapActivityMetadata",
    "RoadmapDraft",
    "RoadmapStep",
    "RoadmapStepActivityMetadata",
    "UserProfile",
    "parse_activity",
]
