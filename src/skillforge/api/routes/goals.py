"""Goal routes for the API."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, HTTPException, Path, status

from skillforge.api.dependencies import CurrentUid, DataServiceDep
from skillforge.api.schemas.common import IdResponse
from skillforge.api.schemas.requests import GoalUpdateRequest
from skillforge.models import Goal, GoalDraft

router = APIRouter(prefix="/goals", tags=["goals"])


@router.get("", response_model=list[Goal])
async def list_goals(uid: CurrentUid, service: DataServiceDep) -> list[Goal]:
    """List the user's goals, newest first."""
    return await service.list_goals(uid)


@router.post("", response_model=IdResponse, status_code=status.HTTP_201_CREATED)
async def create_goal(draft: GoalDraft, uid: CurrentUid, service: DataServiceDep) -> IdResponse:
    return IdResponse(id=await service.create_goal(uid, draft))


@router.patch("/{goal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_goal(
    goal_id: Annotated[str, Path(description="Goal id")],
    data: GoalUpdateRequest,
    uid: CurrentUid,
    service: DataServiceDep,
) -> None:
    """Update a goal. Only provided fields are updated."""
    await service.update_goal(uid, goal_id, data.model_dump(exclude_unset=True))


@router.delete("/{goal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_goal(
    goal_id: Annotated[str, Path(description="Goal id")],
    uid: CurrentUid,
    service: DataServiceDep,
) -> None:
    if not await service.delete_goal(uid, goal_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Goal {goal_id} not found",
        )
