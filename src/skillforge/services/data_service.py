"""Data access layer for goals, roadmaps, mock interviews, activity and notifications.

All operations are coroutines over a single :class:`PersistenceProvider`,
so they behave the same in remote and local-fallback mode.

Failure policy:
- create/update/delete log the failure and raise :class:`PersistenceError`.
- list/get/stats log the failure and return an empty or default value.
- activity logging after a successful write is best-effort: failures are
  logged and never fail the primary write.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, TypedDict, TypeVar

from pydantic import ValidationError
from pydantic.alias_generators import to_camel

from skillforge.models import (
    ActivityLogEntry,
    DerivedStats,
    Goal,
    GoalActivityMetadata,
    GoalDraft,
    InterviewActivityMetadata,
    InterviewDraft,
    InterviewQuestion,
    MockInterview,
    Notification,
    NotificationDraft,
    Roadmap,
    RoadmapActivityMetadata,
    RoadmapDraft,
    RoadmapStepActivityMetadata,
    UserProfile,
    parse_activity,
)
from skillforge.models.activity import (
    GoalCompletedActivity,
    GoalCreatedActivity,
    InterviewCompletedActivity,
    RoadmapCreatedActivity,
    RoadmapStepActivity,
)
from skillforge.services.persistence import (
    PersistenceError,
    PersistenceProvider,
    select_persistence,
)
from skillforge.services.remote_backend import FirebaseRealtimeBackend, RemoteBackend
from skillforge.services.stats import compute_stats
from skillforge.storage import KeyValueStorage, LocalFallbackStore, SqlKeyValueStorage

if TYPE_CHECKING:
    from skillforge.ai.gateway import ContentGateway

logger = logging.getLogger(__name__)

__all__ = [
    "DataService",
    "GoalUpdate",
    "InterviewSaveError",
    "InvalidUpdateError",
    "PersistenceError",
    "ProfileUpdate",
    "RecordNotFoundError",
    "build_data_service",
]

T = TypeVar("T")

GOALS = "goals"
ROADMAPS = "roadmaps"
INTERVIEWS = "interviews"
ACTIVITIES = "activities"
NOTIFICATIONS = "notifications"

# Local mode keeps only the newest entries of the activity log.
ACTIVITY_LOG_LIMIT = 100

DEGRADED_INTERVIEW_FEEDBACK = (
    "Your answers were saved, but the evaluation could not be recorded. "
    "Review your answers and retake the interview for a score."
)

# Fields that can be updated on a profile / goal
_PROFILE_FIELDS = (
    "display_name",
    "photo_url",
    "current_role",
    "target_role",
    "experience",
    "location",
    "bio",
    "skills",
)
_GOAL_FIELDS = ("title", "description", "target_date", "completed", "category")


class RecordNotFoundError(LookupError):
    """Raised when an update targets a record that does not exist."""


class InvalidUpdateError(ValueError):
    """Raised when an update would leave a record failing validation."""


class InterviewSaveError(RuntimeError):
    """Raised when neither the evaluated nor the degraded interview could be saved."""


class ProfileUpdate(TypedDict, total=False):
    """Editable profile fields."""

    display_name: str
    photo_url: str | None
    current_role: str
    target_role: str
    experience: str
    location: str
    bio: str
    skills: list[str]


class GoalUpdate(TypedDict, total=False):
    """Editable goal fields."""

    title: str
    description: str
    target_date: datetime
    completed: bool
    category: str | None


def _now() -> datetime:
    return datetime.now(UTC)


def _camel_fields(data: dict[str, Any], allowed: Sequence[str]) -> dict[str, Any]:
    return {to_camel(field): data[field] for field in allowed if field in data}


class DataService:
    """Per-user CRUD over the selected persistence provider."""

    def __init__(self, persistence: PersistenceProvider) -> None:
        self.persistence = persistence

    @property
    def mode(self) -> str:
        return self.persistence.name

    async def _persist(self, description: str, operation: Awaitable[T]) -> T:
        try:
            return await operation
        except Exception as exc:
            logger.exception("Failed to %s", description)
            raise PersistenceError(f"Failed to {description}: {exc}") from exc

    async def _list(
        self,
        uid: str,
        collection: str,
        parse: Callable[[dict[str, Any]], T],
        sort_key: Callable[[T], datetime],
        *,
        sort_field: str = "createdAt",
    ) -> list[T]:
        try:
            records = await self.persistence.list_records(uid, collection, sort_field=sort_field)
        except Exception:
            logger.exception("Failed to load %s for %s", collection, uid)
            return []

        items: list[T] = []
        for record in records:
            try:
                items.append(parse(record))
            except ValidationError:
                logger.warning("Skipping invalid %s record %s", collection, record.get("id"))
        items.sort(key=sort_key, reverse=True)
        return items

    # User profile

    async def create_user_profile(
        self,
        uid: str,
        *,
        email: str = "",
        display_name: str = "",
        photo_url: str | None = None,
    ) -> UserProfile:
        """Write the default profile for a newly authenticated user."""
        profile = UserProfile(uid=uid, email=email, display_name=display_name, photo_url=photo_url)
        await self._persist(
            f"create profile for {uid}", self.persistence.set_profile(uid, profile.to_record())
        )
        logger.info("Created profile for %s (%s mode)", uid, self.mode)
        return profile

    async def get_user_profile(self, uid: str) -> UserProfile | None:
        try:
            record = await self.persistence.get_profile(uid)
        except Exception:
            logger.exception("Failed to load profile for %s", uid)
            return None
        if record is None:
            return None
        try:
            return UserProfile.model_validate({"uid": uid, **record})
        except ValidationError:
            logger.warning("Stored profile for %s is invalid", uid)
            return None

    async def update_user_profile(self, uid: str, data: ProfileUpdate) -> bool:
        """Update profile fields and stamp ``updatedAt``.

        Returns:
            False if no profile exists yet (nothing is written).
        """
        fields = _camel_fields(dict(data), _PROFILE_FIELDS)
        fields["updatedAt"] = _now()
        updated = await self._persist(
            f"update profile for {uid}", self.persistence.update_profile(uid, fields)
        )
        if not updated:
            logger.warning("No profile to update for %s", uid)
        return updated

    # Goals

    async def create_goal(self, uid: str, draft: GoalDraft) -> str:
        record = draft.to_record()
        record["completed"] = False
        record["createdAt"] = _now()
        goal_id = await self._persist(
            f"create goal for {uid}", self.persistence.add_record(uid, GOALS, record)
        )
        await self.log_activity(
            uid,
            GoalCreatedActivity(
                title="New Goal Created",
                description=f"Created goal: {draft.title}",
                metadata=GoalActivityMetadata(goal_id=goal_id),
            ),
        )
        logger.info("Goal created for %s: %s", uid, goal_id)
        return goal_id

    async def list_goals(self, uid: str) -> list[Goal]:
        return await self._list(uid, GOALS, Goal.model_validate, lambda goal: goal.created_at)

    async def update_goal(self, uid: str, goal_id: str, data: GoalUpdate) -> None:
        """Update a goal; marking it completed appends a ``goal_completed`` entry.

        The merged goal is validated before anything is written.

        Raises:
            RecordNotFoundError: If the goal does not exist.
            InvalidUpdateError: If the update would leave the goal invalid.
            PersistenceError: If the read or write fails.
        """
        fields = _camel_fields(dict(data), _GOAL_FIELDS)
        record = await self._persist(
            f"read goal {goal_id}", self.persistence.get_record(uid, GOALS, goal_id)
        )
        if record is None:
            raise RecordNotFoundError(f"Goal {goal_id} not found")
        try:
            goal = Goal.model_validate({**record, **fields, "id": goal_id})
        except ValidationError as exc:
            raise InvalidUpdateError(f"Invalid update for goal {goal_id}: {exc}") from exc
        validated = goal.to_record()
        fields = {key: validated[key] for key in fields}

        updated = await self._persist(
            f"update goal {goal_id}",
            self.persistence.update_record(uid, GOALS, goal_id, fields),
        )
        if not updated:
            raise RecordNotFoundError(f"Goal {goal_id} not found")

        if data.get("completed") is True:
            await self.log_activity(
                uid,
                GoalCompletedActivity(
                    title="Goal Completed",
                    description=f"Completed goal: {goal.title}",
                    metadata=GoalActivityMetadata(goal_id=goal_id),
                ),
            )

    async def delete_goal(self, uid: str, goal_id: str) -> bool:
        return await self._persist(
            f"delete goal {goal_id}", self.persistence.delete_record(uid, GOALS, goal_id)
        )

    # Roadmaps

    async def create_roadmap(self, uid: str, draft: RoadmapDraft) -> str:
        record = draft.to_record()
        record["createdAt"] = record["updatedAt"] = _now()
        roadmap_id = await self._persist(
            f"create roadmap for {uid}", self.persistence.add_record(uid, ROADMAPS, record)
        )
        await self.log_activity(
            uid,
            RoadmapCreatedActivity(
                title="New Roadmap Created",
                description=f"Created roadmap: {draft.title}",
                metadata=RoadmapActivityMetadata(roadmap_id=roadmap_id),
            ),
        )
        logger.info("Roadmap created for %s: %s (%d steps)", uid, roadmap_id, len(draft.steps))
        return roadmap_id

    async def list_roadmaps(self, uid: str) -> list[Roadmap]:
        return await self._list(
            uid, ROADMAPS, Roadmap.model_validate, lambda roadmap: roadmap.created_at
        )

    async def update_roadmap_step(
        self, uid: str, roadmap_id: str, step_id: str, completed: bool
    ) -> None:
        """Toggle one step and stamp the roadmap's ``updatedAt``.

        Raises:
            RecordNotFoundError: If the roadmap or step does not exist.
            PersistenceError: If the read or write fails.
        """
        record = await self._persist(
            f"read roadmap {roadmap_id}", self.persistence.get_record(uid, ROADMAPS, roadmap_id)
        )
        if record is None:
            raise RecordNotFoundError(f"Roadmap {roadmap_id} not found")
        roadmap = Roadmap.model_validate(record)

        step = next((step for step in roadmap.steps if step.id == step_id), None)
        if step is None:
            raise RecordNotFoundError(f"Step {step_id} not found in roadmap {roadmap_id}")
        step.completed = completed

        await self._persist(
            f"update roadmap {roadmap_id}",
            self.persistence.update_record(
                uid,
                ROADMAPS,
                roadmap_id,
                {"steps": [s.to_record() for s in roadmap.steps], "updatedAt": _now()},
            ),
        )

        if completed:
            await self.log_activity(
                uid,
                RoadmapStepActivity(
                    title="Roadmap Step Completed",
                    description=f"Completed: {step.title}",
                    metadata=RoadmapStepActivityMetadata(roadmap_id=roadmap_id, step_id=step_id),
                ),
            )

    async def delete_roadmap(self, uid: str, roadmap_id: str) -> bool:
        return await self._persist(
            f"delete roadmap {roadmap_id}",
            self.persistence.delete_record(uid, ROADMAPS, roadmap_id),
        )

    # Mock interviews

    async def save_mock_interview(self, uid: str, draft: InterviewDraft) -> str:
        record = draft.to_record()
        record["createdAt"] = _now()
        interview_id = await self._persist(
            f"save {draft.role} interview for {uid}",
            self.persistence.add_record(uid, INTERVIEWS, record),
        )
        await self.log_activity(
            uid,
            InterviewCompletedActivity(
                title="Mock Interview Completed",
                description=f"Completed {draft.role} interview - Score: {draft.score}/100",
                metadata=InterviewActivityMetadata(interview_id=interview_id, score=draft.score),
            ),
        )
        return interview_id

    async def complete_mock_interview(
        self,
        uid: str,
        role: str,
        questions: list[InterviewQuestion],
        gateway: ContentGateway,
    ) -> str:
        """Evaluate answers and save the interview, degrading rather than losing answers.

        Raises:
            InterviewSaveError: If even the degraded record cannot be saved.
        """
        evaluation = await gateway.evaluate_interview(questions)
        draft = InterviewDraft(
            role=role, questions=questions, feedback=evaluation.feedback, score=evaluation.score
        )
        try:
            return await self.save_mock_interview(uid, draft)
        except PersistenceError:
            logger.warning("Saving evaluated interview failed for %s; saving degraded record", uid)

        degraded = InterviewDraft(
            role=role, questions=questions, feedback=DEGRADED_INTERVIEW_FEEDBACK, score=0
        )
        try:
            return await self.save_mock_interview(uid, degraded)
        except PersistenceError as exc:
            raise InterviewSaveError(
                "Your interview could not be saved. Please try again."
            ) from exc

    async def list_interviews(self, uid: str) -> list[MockInterview]:
        return await self._list(
            uid, INTERVIEWS, MockInterview.model_validate, lambda interview: interview.created_at
        )

    async def delete_mock_interview(self, uid: str, interview_id: str) -> bool:
        return await self._persist(
            f"delete interview {interview_id}",
            self.persistence.delete_record(uid, INTERVIEWS, interview_id),
        )

    # Activity log

    async def log_activity(self, uid: str, entry: ActivityLogEntry) -> str | None:
        """Append an activity entry; failures are logged and return None."""
        try:
            return await self.persistence.add_record(
                uid, ACTIVITIES, entry.to_record(exclude={"id"}), limit=ACTIVITY_LOG_LIMIT
            )
        except Exception:
            logger.exception("Failed to log %s activity for %s", entry.type, uid)
            return None

    async def list_activities(self, uid: str) -> list[ActivityLogEntry]:
        return await self._list(
            uid, ACTIVITIES, parse_activity, lambda entry: entry.timestamp, sort_field="timestamp"
        )

    # Notifications

    async def create_notification(self, uid: str, draft: NotificationDraft) -> str:
        record = draft.to_record()
        record.update(read=False, timestamp=_now())
        return await self._persist(
            f"create notification for {uid}",
            self.persistence.add_record(uid, NOTIFICATIONS, record),
        )

    async def list_notifications(self, uid: str) -> list[Notification]:
        return await self._list(
            uid,
            NOTIFICATIONS,
            Notification.model_validate,
            lambda notification: notification.timestamp,
            sort_field="timestamp",
        )

    async def mark_notification_read(self, uid: str, notification_id: str) -> bool:
        return await self._persist(
            f"mark notification {notification_id} read",
            self.persistence.update_record(uid, NOTIFICATIONS, notification_id, {"read": True}),
        )

    async def mark_all_notifications_read(self, uid: str) -> int:
        """Mark every notification read; returns how many were unread before."""

        async def _mark_all() -> int:
            records = await self.persistence.list_records(uid, NOTIFICATIONS, sort_field="timestamp")
            await self.persistence.update_records(
                uid, NOTIFICATIONS, {record["id"]: {"read": True} for record in records}
            )
            return sum(1 for record in records if not record.get("read"))

        return await self._persist(f"mark all notifications read for {uid}", _mark_all())

    # Statistics

    async def get_stats(self, uid: str, *, now: datetime | None = None) -> DerivedStats:
        try:
            goals, roadmaps, interviews, activities = await asyncio.gather(
                self.list_goals(uid),
                self.list_roadmaps(uid),
                self.list_interviews(uid),
                self.list_activities(uid),
            )
            return compute_stats(goals, roadmaps, interviews, activities, now=now)
        except Exception:
            logger.exception("Failed to compute stats for %s", uid)
            return DerivedStats()


def build_data_service(
    backend: RemoteBackend | None = None,
    storage: KeyValueStorage | None = None,
) -> DataService:
    """Construct a service, selecting remote or local persistence once."""
    if backend is None:
        backend = FirebaseRealtimeBackend()
    local_store = LocalFallbackStore(storage or SqlKeyValueStorage())
    return DataService(select_persistence(backend, local_store))
