from fastapi import APIRouter, Depends
from app.core.dependencies import get_current_user_id, get_profile_service
from app.modules.profiles.models import progress_fraction
from app.modules.profiles.schemas import (
    ProfileUpdate, ProfileResponse, PublicProfileResponse, ProgressResponse
)
from app.modules.profiles.service import ProfileService

router = APIRouter(prefix="/profiles", tags=["profiles"])


@router.get("/me", response_model=ProfileResponse)
async def get_my_profile(
    user_id: str = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service)
):
    """Get the current user's profile (missing fields are backfilled on read)"""
    return service.fetch_profile(user_id)


@router.put("/me", response_model=ProfileResponse)
async def update_my_profile(
    profile_data: ProfileUpdate,
    user_id: str = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service)
):
    """Edit name, tier, streak, weekly goal or avatar"""
    return service.update_profile(user_id, profile_data)


@router.get("/me/progress", response_model=ProgressResponse)
async def get_my_progress(
    user_id: str = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service)
):
    """Weekly progress towards the step goal"""
    profile = service.fetch_profile(user_id)
    fraction = progress_fraction(profile.weekly_step_count, profile.weekly_goal)
    return ProgressResponse(
        weekly_step_count=profile.weekly_step_count,
        weekly_goal=profile.weekly_goal,
        fraction=fraction,
        goal_reached=fraction >= 1.0,
    )


@router.get("/{user_id}", response_model=PublicProfileResponse)
async def get_profile(
    user_id: str,
    current_user_id: str = Depends(get_current_user_id),
    service: ProfileService = Depends(get_profile_service)
):
    """Get another user's public profile"""
    return service.fetch_profile(user_id)
