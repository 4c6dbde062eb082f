# File: src/api/routers/users/profile.py

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, ConfigDict, Field

from common.dependencies.auth_dep import get_current_user
from common.dependencies.service_dep import get_user_service
from common.schemas.standard_response import StandardResponse
from common.translations.messages import get_message
from common.utils.pagination import clamp_page
from domain.users.entities.user_entity import CallerIdentity
from domain.users.services.user_service import UserService

router = APIRouter(tags=["Users"])


class ProfileUpdateRequest(BaseModel):
    name: str = Field(..., min_length=2, max_length=100, description="Display name")

    model_config = ConfigDict(str_strip_whitespace=True, extra="forbid")


@router.get(
    "/users/me",
    status_code=status.HTTP_200_OK,
    response_model=StandardResponse,
    summary="Current user's profile with points and badges"
)
async def get_profile(
    current_user: Annotated[CallerIdentity, Depends(get_current_user)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    profile = await user_service.get_profile(current_user.user_id)
    return StandardResponse.success(data=profile.model_dump(mode="json"), message=get_message("user.profile"))


@router.get(
    "/users/me/badges",
    status_code=status.HTTP_200_OK,
    response_model=StandardResponse,
    summary="Badges earned by the current user"
)
async def get_badges(
    current_user: Annotated[CallerIdentity, Depends(get_current_user)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    badges = await user_service.get_badges(current_user.user_id)
    return StandardResponse.success(data=badges, message=get_message("user.badges"))


@router.get(
    "/users/leaderboard",
    status_code=status.HTTP_200_OK,
    response_model=StandardResponse,
    summary="Users ranked by points"
)
async def get_leaderboard(
    user_service: Annotated[UserService, Depends(get_user_service)],
    page: Annotated[int, Query(ge=1)] = 1,
    page_size: Annotated[int, Query(ge=1, le=100)] = 10,
):
    page, page_size = clamp_page(page, page_size)
    leaderboard = await user_service.get_leaderboard(page=page, page_size=page_size)
    return StandardResponse.success(data=leaderboard, message=get_message("user.leaderboard"))


@router.put(
    "/users/me",
    status_code=status.HTTP_200_OK,
    response_model=StandardResponse,
    summary="Update the current user's display name",
    responses={400: {"description": "Name too short or unknown field."}}
)
async def update_profile(
    data: ProfileUpdateRequest,
    current_user: Annotated[CallerIdentity, Depends(get_current_user)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    profile = await user_service.update_profile(current_user.user_id, data.name)
    return StandardResponse.success(data=profile.model_dump(mode="json"), message=get_message("user.profile_updated"))


@router.get(
    "/users/me/stats",
    status_code=status.HTTP_200_OK,
    response_model=StandardResponse,
    summary="Report counts by status and category for the current user"
)
async def get_stats(
    current_user: Annotated[CallerIdentity, Depends(get_current_user)],
    user_service: Annotated[UserService, Depends(get_user_service)],
):
    stats = await user_service.get_stats(current_user.user_id)
    return StandardResponse.success(data=stats, message=get_message("user.stats"))
