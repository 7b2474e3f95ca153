from app.config.settings import settings
from app.modules.profiles.models import UserProfile
from app.modules.profiles.service import ProfileService
from app.modules.rankings import engine
from app.modules.rankings.schemas import LeaderboardResponse, LeaderboardScope
from typing import List, Optional
import logging

logger = logging.getLogger(__name__)


class RankingService:
    def __init__(self, profiles: ProfileService):
        self.profiles = profiles

    def _build_response(
        self,
        scope: LeaderboardScope,
        self_profile: UserProfile,
        peers: List[UserProfile],
        display_limit: Optional[int] = None
    ) -> LeaderboardResponse:
        ordered = engine.compute_leaderboard(self_profile, peers)
        rank = engine.rank_of(self_profile.id, ordered)
        gap = engine.gap_to_next_rank(ordered, rank)
        shown = ordered if display_limit is None else engine.top_n(ordered, display_limit)
        entries = engine.build_entries(shown)
        return LeaderboardResponse(
            scope=scope,
            entries=entries,
            leader=entries[0] if entries else None,
            self_rank=rank,
            self_steps=self_profile.weekly_step_count,
            gap_to_next_rank=gap,
            total_ranked=len(ordered),
        )

    def friends_leaderboard(self, user_id: str) -> LeaderboardResponse:
        """Current user plus every friend whose profile could be fetched; no display cap"""
        self_profile = self.profiles.fetch_profile(user_id)
        friends = self.profiles.fetch_profiles(self_profile.friends)
        if len(friends) < len(self_profile.friends):
            logger.info(
                f"Friends leaderboard for {user_id}: {len(self_profile.friends) - len(friends)} friend profile(s) missing"
            )
        return self._build_response(LeaderboardScope.FRIENDS, self_profile, friends)

    def global_leaderboard(self, user_id: str) -> LeaderboardResponse:
        """Current user ranked against the top profiles overall; display capped at global_leaderboard_size"""
        self_profile = self.profiles.fetch_profile(user_id)
        peers = self.profiles.fetch_top_profiles(settings.global_leaderboard_fetch_limit)
        return self._build_response(
            LeaderboardScope.GLOBAL,
            self_profile,
            peers,
            display_limit=settings.global_leaderboard_size,
        )
