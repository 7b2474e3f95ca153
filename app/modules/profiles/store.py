"""In-process registry of the latest profile snapshot per user, with change listeners."""
import logging
from typing import Callable, Dict, List, Optional

from app.modules.profiles.models import UserProfile

logger = logging.getLogger(__name__)

ProfileListener = Callable[[UserProfile], None]


class ProfileStore:
    def __init__(self):
        self._snapshots: Dict[str, UserProfile] = {}
        self._listeners: List[ProfileListener] = []

    def get(self, user_id: str) -> Optional[UserProfile]:
        return self._snapshots.get(user_id)

    def publish(self, profile: UserProfile) -> None:
        """Record a snapshot and notify listeners if it differs from the previous one."""
        previous = self._snapshots.get(profile.id)
        self._snapshots[profile.id] = profile
        if previous == profile:
            return
        for listener in list(self._listeners):
            try:
                listener(profile)
            except Exception as e:
                logger.error(f"Profile listener failed for {profile.id}: {e}")

    def subscribe(self, listener: ProfileListener) -> Callable[[], None]:
        """Register a listener; returns a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def clear(self) -> None:
        self._snapshots.clear()


_profile_store = ProfileStore()


def get_profile_store() -> ProfileStore:
    return _profile_store


def log_profile_change(profile: UserProfile) -> None:
    logger.debug(
        f"Profile {profile.id} updated: tier={profile.tier.value} "
        f"weekly_step_count={profile.weekly_step_count} friends={len(profile.friends)}"
    )
