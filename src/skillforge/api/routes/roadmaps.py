"""Roadmap routes for the API."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, HTTPException, Path, status

from skillforge.api.dependencies import CurrentUid, DataServiceDep
from skillforge.api.schemas.common import IdResponse
from skillforge.api.schemas.requests import StepUpdateRequest
from skillforge.models import Roadmap, RoadmapDraft

router = APIRouter(prefix="/roadmaps", tags=["roadmaps"])


@router.get("", response_model=list[Roadmap])
async def list_roadmaps(uid: CurrentUid, service: DataServiceDep) -> list[Roadmap]:
    return await service.list_roadmaps(uid)


@router.post("", response_model=IdResponse, status_code=status.HTTP_201_CREATED)
async def create_roadmap(
    draft: RoadmapDraft, uid: CurrentUid, service: DataServiceDep
) -> IdResponse:
    """Save a roadmap, typically one returned by ``POST /api/ai/roadmap``."""
    return IdResponse(id=await service.create_roadmap(uid, draft))


@router.patch("/{roadmap_id}/steps/{step_id}", status_code=status.HTTP_204_NO_CONTENT)
async def update_roadmap_step(
    roadmap_id: Annotated[str, Path(description="Roadmap id")],
    step_id: Annotated[str, Path(description="Step id within the roadmap")],
    data: StepUpdateRequest,
    uid: CurrentUid,
    service: DataServiceDep,
) -> None:
    await service.update_roadmap_step(uid, roadmap_id, step_id, data.completed)


@router.delete("/{roadmap_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_roadmap(
    roadmap_id: Annotated[str, Path(description="Roadmap id")],
    uid: CurrentUid,
    service: DataServiceDep,
) -> None:
    if not await service.delete_roadmap(uid, roadmap_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Roadmap {roadmap_id} not found",
        )
