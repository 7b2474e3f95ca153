from pydantic import BaseModel, Field
from typing import List
from app.modules.friends.directory import FriendLinkOutcome
from app.modules.profiles.schemas import PublicProfileResponse


class FriendCodeAdd(BaseModel):
    friend_code: str = Field(min_length=1, max_length=32)


class FriendCodeResponse(BaseModel):
    friend_code: str


class FriendLinkResponse(BaseModel):
    outcome: FriendLinkOutcome
    friend_id: str
    friends: List[str]


class FriendListResponse(BaseModel):
    friends: List[PublicProfileResponse]
    missing: int = 0  # friend ids with no profile row
