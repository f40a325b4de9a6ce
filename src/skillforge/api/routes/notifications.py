"""Notification routes for the API."""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, HTTPException, Path, status

from skillforge.api.dependencies import CurrentUid, DataServiceDep
from skillforge.api.schemas.common import CountResponse, IdResponse
from skillforge.models import Notification, NotificationDraft

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=list[Notification])
async def list_notifications(uid: CurrentUid, service: DataServiceDep) -> list[Notification]:
    return await service.list_notifications(uid)


@router.post("", response_model=IdResponse, status_code=status.HTTP_201_CREATED)
async def create_notification(
    draft: NotificationDraft, uid: CurrentUid, service: DataServiceDep
) -> IdResponse:
    return IdResponse(id=await service.create_notification(uid, draft))


@router.post("/read-all", response_model=CountResponse)
async def mark_all_read(uid: CurrentUid, service: DataServiceDep) -> CountResponse:
    return CountResponse(updated=await service.mark_all_notifications_read(uid))


@router.post("/{notification_id}/read", status_code=status.HTTP_204_NO_CONTENT)
async def mark_read(
    notification_id: Annotated[str, Path(description="Notification id")],
    uid: CurrentUid,
    service: DataServiceDep,
) -> None:
    if not await service.mark_notification_read(uid, notification_id):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Notification {notification_id} not found",
        )
