from app.core.exceptions import NotFoundError, InternalConsistencyError, SelfReferenceError
from app.modules.friends.codes import is_valid_friend_code
from app.modules.friends.directory import FriendLinkOutcome, add_friend
from app.modules.friends.schemas import FriendLinkResponse, FriendListResponse
from app.modules.profiles.service import ProfileService
import logging

logger = logging.getLogger(__name__)


class FriendService:
    def __init__(self, profiles: ProfileService):
        self.profiles = profiles

    def get_friend_code(self, user_id: str) -> str:
        profile = self.profiles.fetch_profile(user_id)
        if not profile.friend_code:
            raise NotFoundError("Friend code not assigned yet")
        return profile.friend_code

    def resolve_friend_code(self, code: str) -> str:
        """Profile id holding this friend code (exact, case-sensitive match)"""
        if not is_valid_friend_code(code):
            raise NotFoundError("Friend code not found")
        rows = self.profiles.find_by_friend_code(code)
        if not rows:
            raise NotFoundError("Friend code not found")
        if len(rows) > 1:
            logger.error(f"Friend code {code} is held by {len(rows)} profiles")
            raise InternalConsistencyError("Friend code is not unique")
        return rows[0]["id"]

    def add_friend(self, user_id: str, target_id: str) -> FriendLinkResponse:
        """Append target_id to the user's friend list"""
        if target_id == user_id:
            raise SelfReferenceError("You cannot add yourself as a friend")
        profile = self.profiles.fetch_profile(user_id)
        outcome, friends = add_friend(profile, target_id)
        if outcome == FriendLinkOutcome.ALREADY_FRIENDS:
            logger.debug(f"{user_id} already follows {target_id}")
            return FriendLinkResponse(outcome=outcome, friend_id=target_id, friends=list(friends))

        # Verify target exists
        self.profiles.fetch_profile(target_id)

        updated = self.profiles.write_profile_fields(user_id, {"friends": list(friends)})
        logger.info(f"{user_id} added friend {target_id}")
        return FriendLinkResponse(outcome=outcome, friend_id=target_id, friends=list(updated.friends))

    def add_friend_by_code(self, user_id: str, code: str) -> FriendLinkResponse:
        target_id = self.resolve_friend_code(code.strip())
        return self.add_friend(user_id, target_id)

    def list_friends(self, user_id: str) -> FriendListResponse:
        profile = self.profiles.fetch_profile(user_id)
        friends = self.profiles.fetch_profiles(profile.friends)
        return FriendListResponse(
            friends=[f.model_dump() for f in friends],
            missing=len(profile.friends) - len(friends),
        )
