"""
Tests for RankingService against the in-memory profile table.
"""

from app.config.settings import settings
from app.modules.rankings.schemas import LeaderboardScope
from app.modules.rankings.service import RankingService


def test_friends_leaderboard(profile_service, seed):
    seed("me", steps=50000, friends=["f1", "f2"])
    seed("f1", steps=62480)
    seed("f2", steps=45320)
    seed("stranger", steps=90000)

    board = RankingService(profile_service).friends_leaderboard("me")

    assert board.scope == LeaderboardScope.FRIENDS
    assert [e.user_id for e in board.entries] == ["f1", "me", "f2"]
    assert board.self_rank == 2
    assert board.gap_to_next_rank == 12480
    assert board.leader.user_id == "f1"
    assert board.total_ranked == 3


def test_friends_leaderboard_skips_missing_friend(profile_service, seed):
    seed("me", steps=100, friends=["gone", "f1"])
    seed("f1", steps=50)

    board = RankingService(profile_service).friends_leaderboard("me")

    assert [e.user_id for e in board.entries] == ["me", "f1"]
    assert board.self_rank == 1
    assert board.gap_to_next_rank is None


def test_friends_leaderboard_without_friends(profile_service, seed):
    seed("me", steps=500)

    board = RankingService(profile_service).friends_leaderboard("me")

    assert [e.user_id for e in board.entries] == ["me"]
    assert board.self_rank == 1
    assert board.gap_to_next_rank is None


def test_global_leaderboard_caps_display(profile_service, seed):
    for i in range(15):
        seed(f"u{i:02d}", steps=1000 * (i + 1))
    seed("me", steps=4500)

    board = RankingService(profile_service).global_leaderboard("me")

    assert board.scope == LeaderboardScope.GLOBAL
    assert len(board.entries) == settings.global_leaderboard_size
    assert board.entries[0].user_id == "u14"
    assert board.total_ranked == 16
    # u00..u03 have fewer steps than me
    assert board.self_rank == 12
    assert board.gap_to_next_rank == 500
