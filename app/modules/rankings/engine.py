"""
Leaderboard ordering over already-fetched profile snapshots.

Pure functions, no I/O. Profiles are ordered by weekly step count,
highest first; equal counts keep their input order.
"""
import logging
from typing import Dict, Iterable, List, Optional, Sequence

from app.core.exceptions import InternalConsistencyError
from app.modules.profiles.models import UserProfile
from app.modules.rankings.schemas import LeaderboardEntry

logger = logging.getLogger(__name__)


def compute_leaderboard(self_profile: UserProfile, peers: Iterable[UserProfile]) -> List[UserProfile]:
    """
    Merge self into peers and sort descending by weekly_step_count.

    Peers are de-duplicated by id, the first occurrence keeping its slot.
    Self replaces any stale peer copy of itself in place, or is appended
    when absent, so it appears exactly once.
    """
    merged: Dict[str, UserProfile] = {}
    for peer in peers:
        if peer is None or peer.id in merged:
            continue
        merged[peer.id] = peer
    merged[self_profile.id] = self_profile

    # sorted() with reverse=True keeps equal elements in input order
    return sorted(merged.values(), key=lambda p: p.weekly_step_count, reverse=True)


def rank_of(user_id: str, ordered: Sequence[UserProfile]) -> int:
    """1-based position of user_id, 0 when absent"""
    for index, profile in enumerate(ordered):
        if profile.id == user_id:
            return index + 1
    return 0


def gap_to_next_rank(ordered: Sequence[UserProfile], rank: int) -> Optional[int]:
    """
    Steps needed to overtake the profile directly above `rank`.

    None for the leader (rank <= 1) and for ranks past the end of the list.
    A negative gap means the list is not sorted and is raised as an
    InternalConsistencyError.
    """
    if rank <= 1 or rank > len(ordered):
        return None
    above = ordered[rank - 2]
    current = ordered[rank - 1]
    gap = above.weekly_step_count - current.weekly_step_count
    if gap < 0:
        logger.error(
            f"Leaderboard out of order at rank {rank}: {above.id}={above.weekly_step_count} "
            f"above {current.id}={current.weekly_step_count}"
        )
        raise InternalConsistencyError(f"Negative gap to next rank at position {rank}")
    return gap


def top_n(ordered: Sequence[UserProfile], n: int) -> List[UserProfile]:
    if n <= 0:
        return []
    return list(ordered[:n])


def build_entries(ordered: Sequence[UserProfile]) -> List[LeaderboardEntry]:
    return [
        LeaderboardEntry(
            position=index + 1,
            user_id=profile.id,
            name=profile.name,
            tier=profile.tier,
            avatar_choice=profile.avatar_choice,
            steps=profile.weekly_step_count,
        )
        for index, profile in enumerate(ordered)
    ]
