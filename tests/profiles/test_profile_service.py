"""
Tests for ProfileService against the in-memory users table.
"""

import pytest

from app.core.exceptions import InternalConsistencyError, NotFoundError, UnavailableError, WriteError
from app.modules.friends.codes import FRIEND_CODE_PATTERN
from app.modules.profiles.models import Tier
from app.modules.profiles.schemas import ProfileUpdate
import app.modules.profiles.service as profile_service_module


def test_create_profile_defaults(profile_service, supabase):
    profile = profile_service.create_profile("u1", "Sam")

    assert profile.name == "Sam"
    assert profile.tier == Tier.BRONZE
    assert profile.streak == 0
    assert profile.weekly_goal == 20000
    assert profile.friends == ()
    assert FRIEND_CODE_PATTERN.match(profile.friend_code)
    assert supabase.users.rows[0]["friend_code"] == profile.friend_code


def test_create_profile_retries_on_code_collision(profile_service, seed, monkeypatch):
    seed("existing", friend_code="AAAA-0000-AAA")
    codes = iter(["AAAA-0000-AAA", "BBBB-1111-BBB"])
    monkeypatch.setattr(profile_service_module, "generate_friend_code", lambda: next(codes))

    profile = profile_service.create_profile("u1")

    assert profile.friend_code == "BBBB-1111-BBB"


def test_create_profile_gives_up_after_max_attempts(profile_service, seed, monkeypatch):
    seed("existing", friend_code="AAAA-0000-AAA")
    monkeypatch.setattr(profile_service_module, "generate_friend_code", lambda: "AAAA-0000-AAA")

    with pytest.raises(InternalConsistencyError):
        profile_service.create_profile("u1")


def test_create_duplicate_id_is_write_error(profile_service, seed):
    seed("u1")
    with pytest.raises(WriteError):
        profile_service.create_profile("u1")


def test_fetch_missing_profile(profile_service):
    with pytest.raises(NotFoundError):
        profile_service.fetch_profile("nobody")


def test_fetch_backfills_and_patches(profile_service, supabase):
    supabase.users.rows.append({"id": "old", "name": "Legacy", "friend_code": "OLDX-0001-ABC"})

    profile = profile_service.fetch_profile("old")

    assert profile.tier == Tier.BRONZE
    assert profile.weekly_goal == 20000
    stored = supabase.users.rows[0]
    assert stored["tier"] == "Bronze"
    assert stored["streak"] == 0
    assert stored["weekly_goal"] == 20000


def test_fetch_assigns_missing_friend_code(profile_service, supabase, seed):
    row = seed("u1")
    row["friend_code"] = None

    profile = profile_service.fetch_profile("u1")

    assert FRIEND_CODE_PATTERN.match(profile.friend_code)
    assert supabase.users.rows[0]["friend_code"] == profile.friend_code


def test_backfill_failure_does_not_fail_read(profile_service, supabase):
    supabase.users.rows.append({"id": "old", "friend_code": "OLDX-0001-ABC"})
    supabase.users.errors["update"] = RuntimeError("network down")

    profile = profile_service.fetch_profile("old")

    assert profile.id == "old"


def test_fetch_publishes_snapshot(profile_service, store, seed):
    seed("u1", steps=42)
    profile = profile_service.fetch_profile("u1")
    assert store.get("u1") == profile


def test_store_unavailable(profile_service, supabase):
    supabase.users.errors["select"] = RuntimeError("connection refused")
    with pytest.raises(UnavailableError):
        profile_service.fetch_profile("u1")


def test_fetch_profiles_partial_in_order(profile_service, seed):
    seed("a")
    seed("b")
    profiles = profile_service.fetch_profiles(["b", "ghost", "a", "b"])
    assert [p.id for p in profiles] == ["b", "a"]


def test_fetch_profiles_empty_input_skips_query(profile_service, supabase):
    assert profile_service.fetch_profiles([]) == []
    assert supabase.users.calls == []


def test_fetch_top_profiles(profile_service, seed):
    seed("a", steps=10)
    seed("b", steps=30)
    seed("c", steps=20)
    assert [p.id for p in profile_service.fetch_top_profiles(2)] == ["b", "c"]


def test_write_profile_fields(profile_service, seed):
    seed("u1")
    profile = profile_service.write_profile_fields("u1", {"weekly_step_count": 1234})
    assert profile.weekly_step_count == 1234


def test_write_failure_not_retried(profile_service, supabase, seed):
    seed("u1")
    supabase.users.errors["update"] = RuntimeError("timeout")

    with pytest.raises(WriteError):
        profile_service.write_profile_fields("u1", {"streak": 3})

    assert len([c for c in supabase.users.calls if c[0] == "update"]) == 1


def test_write_missing_profile(profile_service):
    with pytest.raises(NotFoundError):
        profile_service.write_profile_fields("ghost", {"streak": 3})


def test_update_profile_only_sent_fields(profile_service, seed):
    seed("u1", name="Sam", streak=4)

    profile = profile_service.update_profile("u1", ProfileUpdate(tier=Tier.GOLD, weekly_goal=50000))

    assert profile.tier == Tier.GOLD
    assert profile.weekly_goal == 50000
    assert profile.name == "Sam"
    assert profile.streak == 4


def test_update_rejects_zero_goal():
    with pytest.raises(ValueError):
        ProfileUpdate(weekly_goal=0)


def test_ensure_profile_creates_once(profile_service, supabase):
    first = profile_service.ensure_profile("u1", "Sam")
    second = profile_service.ensure_profile("u1", "Other")
    assert first.friend_code == second.friend_code
    assert second.name == "Sam"
    assert len(supabase.users.rows) == 1
