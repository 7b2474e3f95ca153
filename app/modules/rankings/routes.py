from fastapi import APIRouter, Depends
from app.core.dependencies import get_current_user_id, get_profile_service
from app.modules.profiles.service import ProfileService
from app.modules.rankings.schemas import LeaderboardResponse
from app.modules.rankings.service import RankingService

router = APIRouter(prefix="/rankings", tags=["rankings"])


def get_ranking_service(profiles: ProfileService = Depends(get_profile_service)) -> RankingService:
    return RankingService(profiles)


@router.get("/friends", response_model=LeaderboardResponse)
async def friends_leaderboard(
    user_id: str = Depends(get_current_user_id),
    service: RankingService = Depends(get_ranking_service)
):
    """Weekly leaderboard of the current user and their friends"""
    return service.friends_leaderboard(user_id)


@router.get("/global", response_model=LeaderboardResponse)
async def global_leaderboard(
    user_id: str = Depends(get_current_user_id),
    service: RankingService = Depends(get_ranking_service)
):
    """Weekly top steppers across all users, with the current user's position"""
    return service.global_leaderboard(user_id)
