from supabase import Client
from app.config.settings import settings
from app.core.exceptions import (
    StepQuestError, NotFoundError, UnavailableError, WriteError, InternalConsistencyError
)
from app.modules.friends.codes import generate_friend_code
from app.modules.profiles.models import UserProfile, profile_defaults, profile_from_row
from app.modules.profiles.schemas import ProfileUpdate
from app.modules.profiles.store import ProfileStore, get_profile_store
from typing import Any, Callable, Dict, List, Optional, Sequence
from datetime import datetime
import logging

logger = logging.getLogger(__name__)

UNIQUE_VIOLATION = "23505"


def is_unique_violation(exc: Exception, column: Optional[str] = None) -> bool:
    """True when a PostgREST error reports a unique constraint violation, optionally on one column."""
    message = str(exc).lower()
    if getattr(exc, "code", None) != UNIQUE_VIOLATION and "duplicate key" not in message:
        return False
    return column is None or column in message


class ProfileService:
    def __init__(self, supabase: Client, store: Optional[ProfileStore] = None):
        self.supabase = supabase
        self.store = store if store is not None else get_profile_store()
        self.table = settings.profiles_table

    def _to_profile(self, row: Dict[str, Any]) -> UserProfile:
        """Convert a row, patching backfilled defaults (and a missing friend code) back to the store."""
        profile, backfill = profile_from_row(row, settings.default_weekly_goal)
        if backfill:
            try:
                self.supabase.table(self.table)\
                    .update(backfill)\
                    .eq("id", profile.id)\
                    .execute()
                logger.info(f"Backfilled {sorted(backfill)} for profile {profile.id}")
            except Exception as e:
                logger.warning(f"Failed to backfill profile {profile.id}: {e}")
        if not profile.friend_code:
            try:
                row = self._write_with_unique_code(
                    lambda code: self.supabase.table(self.table)
                    .update({"friend_code": code})
                    .eq("id", profile.id)
                    .execute()
                )
                profile = profile.model_copy(update={"friend_code": row["friend_code"]})
            except StepQuestError as e:
                logger.warning(f"Failed to assign friend code to profile {profile.id}: {e.detail}")
        self.store.publish(profile)
        return profile

    def _write_with_unique_code(self, write: Callable[[str], Any]) -> Dict[str, Any]:
        """Run write(code) with fresh friend codes until the unique constraint accepts one."""
        attempts = max(settings.friend_code_max_attempts, 1)
        for attempt in range(1, attempts + 1):
            code = generate_friend_code()
            try:
                result = write(code)
            except Exception as e:
                if is_unique_violation(e, "friend_code"):
                    logger.warning(f"Friend code collision on attempt {attempt}/{attempts}")
                    continue
                raise WriteError(f"Failed to write profile: {e}")
            if not result.data:
                raise WriteError("Profile write returned no row")
            return result.data[0]
        logger.error(f"Could not generate a unique friend code after {attempts} attempts")
        raise InternalConsistencyError("Could not generate a unique friend code")

    def fetch_profile(self, user_id: str) -> UserProfile:
        """Get profile by user ID"""
        try:
            result = self.supabase.table(self.table)\
                .select("*")\
                .eq("id", user_id)\
                .limit(1)\
                .execute()
        except Exception as e:
            raise UnavailableError(f"Profile store unavailable: {e}")

        if not result.data:
            raise NotFoundError("Profile not found")
        return self._to_profile(result.data[0])

    def fetch_profiles(self, user_ids: Sequence[str]) -> List[UserProfile]:
        """Get profiles for the given IDs in input order; IDs without a row are omitted"""
        wanted = list(dict.fromkeys(i for i in user_ids if i))
        if not wanted:
            return []
        try:
            result = self.supabase.table(self.table)\
                .select("*")\
                .in_("id", wanted)\
                .execute()
        except Exception as e:
            raise UnavailableError(f"Profile store unavailable: {e}")

        by_id = {}
        for row in result.data or []:
            profile = self._to_profile(row)
            by_id[profile.id] = profile
        missing = [i for i in wanted if i not in by_id]
        if missing:
            logger.debug(f"Profiles not found, omitted: {missing}")
        return [by_id[i] for i in wanted if i in by_id]

    def fetch_top_profiles(self, limit: int) -> List[UserProfile]:
        """Profiles with the highest weekly step count, descending"""
        if limit <= 0:
            return []
        try:
            result = self.supabase.table(self.table)\
                .select("*")\
                .order("weekly_step_count", desc=True)\
                .limit(limit)\
                .execute()
        except Exception as e:
            raise UnavailableError(f"Profile store unavailable: {e}")
        return [self._to_profile(row) for row in result.data or []]

    def find_by_friend_code(self, code: str) -> List[Dict[str, Any]]:
        """Raw id rows holding this friend code (normally zero or one)"""
        try:
            result = self.supabase.table(self.table)\
                .select("id")\
                .eq("friend_code", code)\
                .execute()
        except Exception as e:
            raise UnavailableError(f"Profile store unavailable: {e}")
        return result.data or []

    def write_profile_fields(self, user_id: str, fields: Dict[str, Any]) -> UserProfile:
        """Partial update of a profile row. Failures are not retried here."""
        update_data = dict(fields)
        update_data.pop("id", None)
        update_data["updated_at"] = datetime.utcnow().isoformat()
        try:
            result = self.supabase.table(self.table)\
                .update(update_data)\
                .eq("id", user_id)\
                .execute()
        except Exception as e:
            logger.error(f"Failed to update profile {user_id}: {e}")
            raise WriteError(f"Failed to update profile: {e}")

        if not result.data:
            raise NotFoundError("Profile not found")
        return self._to_profile(result.data[0])

    def create_profile(self, user_id: str, name: str = "") -> UserProfile:
        """Insert a profile with defaults and a unique friend code"""
        row = profile_defaults(settings.default_weekly_goal)
        row["id"] = user_id
        row["name"] = name or ""

        def insert(code: str):
            return self.supabase.table(self.table)\
                .insert({**row, "friend_code": code})\
                .execute()

        created = self._write_with_unique_code(insert)
        logger.info(f"Created profile {user_id}")
        return self._to_profile(created)

    def ensure_profile(self, user_id: str, name: str = "") -> UserProfile:
        """Fetch the profile, creating it on first successful authentication"""
        try:
            return self.fetch_profile(user_id)
        except NotFoundError:
            return self.create_profile(user_id, name)

    def update_profile(self, user_id: str, profile_data: ProfileUpdate) -> UserProfile:
        """Explicit profile edit; only fields that were sent are written"""
        update_data = profile_data.model_dump(exclude_none=True, mode="json")
        if not update_data:
            return self.fetch_profile(user_id)
        return self.write_profile_fields(user_id, update_data)
