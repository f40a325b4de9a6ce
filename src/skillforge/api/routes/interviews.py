"""Mock interview routes for the API."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, HTTPException, Path, status

from skillforge.api.dependencies import CurrentUid, DataServiceDep, GatewayDep
from skillforge.api.schemas.common import IdResponse
from skillforge.api.schemas.requests import InterviewAnswersRequest
from skillforge.models import InterviewDraft, MockInterview

router = APIRouter(prefix="/interviews", tags=["interviews"])


@router.get("", response_model=list[MockInterview])
async def list_interviews(uid: CurrentUid, service: DataServiceDep) -> list[MockInterview]:
    return await service.list_interviews(uid)


@router.post("", response_model=IdResponse, status_code=status.HTTP_201_CREATED)
async def save_interview(
    draft: InterviewDraft, uid: CurrentUid, service: DataServiceDep
) -> IdResponse:
    """Save an already evaluated interview."""
    return IdResponse(id=await service.save_mock_interview(uid, draft))


@router.post("/complete", response_model=IdResponse, status_code=status.HTTP_201_CREATED)
async def complete_interview(
    data: InterviewAnswersRequest,
    uid: CurrentUid,
    service: DataServiceDep,
    gateway: GatewayDep,
) -> IdResponse:
    """Evaluate the answers and save the interview with its score."""
    interview_id = await service.complete_mock_interview(uid, data.role, data.questions, gateway)
    return IdResponse(id=interview_id)


@router.delete("/{interview_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_interview(
    interview_id: Annotated[str, Path(description="Interview id")],
    uid: CurrentUid,
    service: DataServiceDep,
) -> None:
    if not await service.delete_mock_interview(uid, interview_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Interview {interview_id} not found",
        )
