from fastapi import APIRouter, Depends
from app.core.dependencies import get_current_user_id, get_profile_service
from app.modules.friends.schemas import (
    FriendCodeAdd, FriendCodeResponse, FriendLinkResponse, FriendListResponse
)
from app.modules.friends.service import FriendService
from app.modules.profiles.service import ProfileService

router = APIRouter(prefix="/friends", tags=["friends"])


def get_friend_service(profiles: ProfileService = Depends(get_profile_service)) -> FriendService:
    return FriendService(profiles)


@router.get("", response_model=FriendListResponse)
async def list_friends(
    user_id: str = Depends(get_current_user_id),
    service: FriendService = Depends(get_friend_service)
):
    """Profiles of everyone the current user has added"""
    return service.list_friends(user_id)


@router.get("/code", response_model=FriendCodeResponse)
async def get_my_friend_code(
    user_id: str = Depends(get_current_user_id),
    service: FriendService = Depends(get_friend_service)
):
    """The current user's shareable friend code"""
    return FriendCodeResponse(friend_code=service.get_friend_code(user_id))


@router.post("", response_model=FriendLinkResponse)
async def add_friend_by_code(
    body: FriendCodeAdd,
    user_id: str = Depends(get_current_user_id),
    service: FriendService = Depends(get_friend_service)
):
    """Add a friend by their friend code"""
    return service.add_friend_by_code(user_id, body.friend_code)


@router.post("/{target_id}", response_model=FriendLinkResponse)
async def add_friend(
    target_id: str,
    user_id: str = Depends(get_current_user_id),
    service: FriendService = Depends(get_friend_service)
):
    """Add a friend by user id"""
    return service.add_friend(user_id, target_id)
