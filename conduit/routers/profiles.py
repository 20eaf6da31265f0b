from fastapi import APIRouter, Depends

from conduit.dependencies import (
    CurrentUser,
    get_current_user,
    get_optional_user,
    get_profile_service,
)
from conduit.exceptions import NotFoundError
from conduit.schemas import ProfileResponse
from conduit.services.profile_service import ProfileService

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get("/{username}", response_model=ProfileResponse)
async def get_profile(
    username: str,
    viewer: CurrentUser | None = Depends(get_optional_user),
    profile_service: ProfileService = Depends(get_profile_service),
):
    profile = await profile_service.get_profile(username, viewer.id if viewer else None)
    if profile is None:
        raise NotFoundError("Profile not found")
    return ProfileResponse(profile=profile)


@router.post("/{username}/follow", response_model=ProfileResponse)
async def follow(
    username: str,
    current: CurrentUser = Depends(get_current_user),
    profile_service: ProfileService = Depends(get_profile_service),
):
    return ProfileResponse(profile=await profile_service.follow(current.id, username))


@router.delete("/{username}/follow", response_model=ProfileResponse)
async def unfollow(
    username: str,
    current: CurrentUser = Depends(get_current_user),
    profile_service: ProfileService = Depends(get_profile_service),
):
    return ProfileResponse(profile=await profile_service.unfollow(current.id, username))
