"""User profile routes for the API."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, status

from skillforge.api.dependencies import CurrentUid, DataServiceDep
from skillforge.api.schemas.requests import ProfileCreateRequest, ProfileUpdateRequest
from skillforge.models import UserProfile

router = APIRouter(prefix="/profile", tags=["profile"])


@router.get("", response_model=UserProfile)
async def get_profile(uid: CurrentUid, service: DataServiceDep) -> UserProfile:
    profile = await service.get_user_profile(uid)
    if profile is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found",
        )
    return profile


@router.post("", response_model=UserProfile, status_code=status.HTTP_201_CREATED)
async def create_profile(
    data: ProfileCreateRequest, uid: CurrentUid, service: DataServiceDep
) -> UserProfile:
    """Create the default profile for the current user."""
    return await service.create_user_profile(
        uid, email=data.email, display_name=data.display_name, photo_url=data.photo_url
    )


@router.patch("", response_model=UserProfile)
async def update_profile(
    data: ProfileUpdateRequest, uid: CurrentUid, service: DataServiceDep
) -> UserProfile:
    """Update the profile. Only provided fields are updated."""
    if not await service.update_user_profile(uid, data.model_dump(exclude_unset=True)):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Profile not found",
        )
    return await get_profile(uid, service)
