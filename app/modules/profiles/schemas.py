from pydantic import BaseModel, Field
from typing import Optional, List
from app.modules.profiles.models import Tier, AvatarChoice


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(default=None, max_length=80)
    tier: Optional[Tier] = None
    streak: Optional[int] = Field(default=None, ge=0)
    weekly_goal: Optional[int] = Field(default=None, gt=0)
    avatar_choice: Optional[AvatarChoice] = None


class ProfileResponse(BaseModel):
    id: str
    name: str
    tier: Tier
    streak: int
    weekly_goal: int
    weekly_step_count: int
    friend_code: Optional[str] = None
    friends: List[str]
    avatar_choice: AvatarChoice

    class Config:
        from_attributes = True


class PublicProfileResponse(BaseModel):
    """Profile as seen by other users; friend list and code are withheld"""
    id: str
    name: str
    tier: Tier
    streak: int
    weekly_step_count: int
    avatar_choice: AvatarChoice

    class Config:
        from_attributes = True


class ProgressResponse(BaseModel):
    weekly_step_count: int
    weekly_goal: int
    fraction: float
    goal_reached: bool
