"""Friend relation updates over profile snapshots. Links are directional."""
from enum import Enum
from typing import Tuple

from app.modules.profiles.models import UserProfile


class FriendLinkOutcome(str, Enum):
    ADDED = "added"
    ALREADY_FRIENDS = "already_friends"
    SELF_REFERENCE = "self_reference"


def add_friend(profile: UserProfile, target_id: str) -> Tuple[FriendLinkOutcome, Tuple[str, ...]]:
    """
    Friend list of `profile` after following `target_id`.

    Only the requester's list grows; the target's list is left alone.
    Self references and repeated adds leave the list unchanged.
    """
    if target_id == profile.id:
        return FriendLinkOutcome.SELF_REFERENCE, profile.friends
    if target_id in profile.friends:
        return FriendLinkOutcome.ALREADY_FRIENDS, profile.friends
    return FriendLinkOutcome.ADDED, profile.friends + (target_id,)
