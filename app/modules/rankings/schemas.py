from enum import Enum
from pydantic import BaseModel
from typing import Optional, List
from app.modules.profiles.models import Tier, AvatarChoice


class LeaderboardScope(str, Enum):
    FRIENDS = "friends"
    GLOBAL = "global"


class LeaderboardEntry(BaseModel):
    position: int
    user_id: str
    name: str
    tier: Tier
    avatar_choice: AvatarChoice
    steps: int


class LeaderboardResponse(BaseModel):
    scope: LeaderboardScope
    entries: List[LeaderboardEntry]
    leader: Optional[LeaderboardEntry] = None
    self_rank: int
    self_steps: int
    gap_to_next_rank: Optional[int] = None  # None when the current user leads
    total_ranked: int
