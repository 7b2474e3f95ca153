# Supabase table: users (name configurable via settings.profiles_table)
# Rows are flat field maps keyed by the Supabase Auth user id.
# Reads go through profile_from_row so older rows missing newer columns
# are backfilled with the defaults below instead of failing.

"""
Expected Supabase table structure:

users:
- id: uuid (primary key, references auth.users.id)
- name: text (not null, default: '')
- tier: text (not null, default: 'Bronze') - values: Bronze, Silver, Gold, Platinum
- streak: integer (not null, default: 0)
- weekly_goal: integer (not null, default: 20000, check > 0)
- weekly_step_count: integer (not null, default: 0, check >= 0)
- friend_code: text (unique, not null) - format LLLL-DDDD-LLL
- friends: text[] (not null, default: '{}') - directional, ids this user follows
- avatar_choice: text (not null, default: 'person.crop.circle.fill')
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)
"""
import logging
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple

from pydantic import BaseModel, ConfigDict

logger = logging.getLogger(__name__)

DEFAULT_WEEKLY_GOAL = 20000


class Tier(str, Enum):
    BRONZE = "Bronze"
    SILVER = "Silver"
    GOLD = "Gold"
    PLATINUM = "Platinum"

    @property
    def rank_value(self) -> int:
        return _TIER_ORDER.index(self)

    def __lt__(self, other):
        if not isinstance(other, Tier):
            return NotImplemented
        return self.rank_value < other.rank_value

    def __le__(self, other):
        if not isinstance(other, Tier):
            return NotImplemented
        return self.rank_value <= other.rank_value

    def __gt__(self, other):
        if not isinstance(other, Tier):
            return NotImplemented
        return self.rank_value > other.rank_value

    def __ge__(self, other):
        if not isinstance(other, Tier):
            return NotImplemented
        return self.rank_value >= other.rank_value

    @classmethod
    def parse(cls, value: Any) -> "Tier":
        """Lenient parse for values read from the store; unknown labels fall back to Bronze."""
        if isinstance(value, Tier):
            return value
        if isinstance(value, str):
            for tier in cls:
                if tier.value.lower() == value.strip().lower():
                    return tier
        logger.warning(f"Unknown tier {value!r}, using {cls.BRONZE.value}")
        return cls.BRONZE


_TIER_ORDER = [Tier.BRONZE, Tier.SILVER, Tier.GOLD, Tier.PLATINUM]


class AvatarChoice(str, Enum):
    # Symbol names rendered by the mobile client
    DEFAULT = "person.crop.circle.fill"
    WALKER = "figure.walk"
    RUNNER = "figure.run"
    HIKER = "figure.hiking"
    STAR = "star.circle.fill"

    @classmethod
    def parse(cls, value: Any) -> "AvatarChoice":
        try:
            return cls(value)
        except ValueError:
            logger.warning(f"Unknown avatar choice {value!r}, using default")
            return cls.DEFAULT


class UserProfile(BaseModel):
    """Immutable snapshot of one profile row"""
    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    tier: Tier = Tier.BRONZE
    streak: int = 0
    weekly_goal: int = DEFAULT_WEEKLY_GOAL
    weekly_step_count: int = 0
    friend_code: Optional[str] = None
    friends: Tuple[str, ...] = ()
    avatar_choice: AvatarChoice = AvatarChoice.DEFAULT


def clean_friend_ids(user_id: str, friend_ids: Iterable[str]) -> Tuple[str, ...]:
    """De-duplicate preserving order and drop any self reference."""
    seen = set()
    cleaned = []
    for friend_id in friend_ids:
        if not friend_id or friend_id == user_id or friend_id in seen:
            continue
        seen.add(friend_id)
        cleaned.append(friend_id)
    return tuple(cleaned)


def profile_defaults(default_weekly_goal: int = DEFAULT_WEEKLY_GOAL) -> Dict[str, Any]:
    return {
        "name": "",
        "tier": Tier.BRONZE.value,
        "streak": 0,
        "weekly_goal": default_weekly_goal,
        "weekly_step_count": 0,
        "friends": [],
        "avatar_choice": AvatarChoice.DEFAULT.value,
    }


def profile_from_row(
    row: Dict[str, Any],
    default_weekly_goal: int = DEFAULT_WEEKLY_GOAL,
) -> Tuple[UserProfile, Dict[str, Any]]:
    """
    Build a snapshot from a stored row.

    Returns the profile and the backfill patch: every default that had to be
    filled in because the column was absent or null. friend_code is never
    backfilled here, it needs a uniqueness-checked write.
    """
    backfill = {}
    values = {}
    for field, default in profile_defaults(default_weekly_goal).items():
        if row.get(field) is None:
            backfill[field] = default
            values[field] = default
        else:
            values[field] = row[field]

    user_id = str(row["id"])
    profile = UserProfile(
        id=user_id,
        name=str(values["name"]),
        tier=Tier.parse(values["tier"]),
        streak=max(int(values["streak"]), 0),
        weekly_goal=int(values["weekly_goal"]),
        weekly_step_count=max(int(values["weekly_step_count"]), 0),
        friend_code=row.get("friend_code"),
        friends=clean_friend_ids(user_id, values["friends"]),
        avatar_choice=AvatarChoice.parse(values["avatar_choice"]),
    )
    return profile, backfill


def profile_to_row(profile: UserProfile) -> Dict[str, Any]:
    return {
        "id": profile.id,
        "name": profile.name,
        "tier": profile.tier.value,
        "streak": profile.streak,
        "weekly_goal": profile.weekly_goal,
        "weekly_step_count": profile.weekly_step_count,
        "friend_code": profile.friend_code,
        "friends": list(profile.friends),
        "avatar_choice": profile.avatar_choice.value,
    }


def progress_fraction(step_count: int, weekly_goal: int) -> float:
    """Share of the weekly goal reached, clamped to [0, 1]. A non-positive goal counts as no progress."""
    if weekly_goal <= 0:
        return 0.0
    return min(max(step_count / weekly_goal, 0.0), 1.0)
