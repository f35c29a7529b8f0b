"""
Tests for the lock client in AssetLocker Client

Tests lock/unlock semantics, outcome mapping and local preconditions
against an in-memory lock service.
"""

from assetlocker_client.exceptions import LockServiceProtocolError
from assetlocker_client.models import LockOutcome, Scope


def test_first_writer_wins(make_client, fake_api):
    """Test that a second user cannot take a held lock"""
    alice = make_client("alice")
    bob = make_client("bob")

    assert alice.request_lock("Assets/Hero.prefab").ok

    result = bob.request_lock("Assets/Hero.prefab")
    assert result.outcome is LockOutcome.REJECTED
    assert result.holder == "alice"

    status = bob.query_single_status("Assets/Hero.prefab")
    assert status.status.locked
    assert status.status.holder == "alice"


def test_lock_is_idempotent_for_holder(lock_client, fake_api):
    """Test that locking twice succeeds and leaves a single entry"""
    first = lock_client.request_lock("Assets/Hero.prefab")
    second = lock_client.request_lock("Assets/Hero.prefab")

    assert first.ok and second.ok
    assert second.holder == "alice"

    table = lock_client.query_lock_table().table
    assert table.held_by("alice") == ["Assets/Hero.prefab"]
    assert len(table) == 1


def test_release_by_non_holder_is_rejected(make_client):
    """Test that only the holder can release a lock"""
    alice = make_client("alice")
    bob = make_client("bob")
    alice.request_lock("Assets/Level.unity")

    result = bob.release_lock("Assets/Level.unity")
    assert result.outcome is LockOutcome.REJECTED
    assert result.holder == "alice"

    # Lock stays with alice
    assert alice.query_single_status("Assets/Level.unity").status.holder == "alice"


def test_release_then_lock_by_other_user(make_client):
    """Test that a released asset can be locked by someone else"""
    alice = make_client("alice")
    bob = make_client("bob")
    alice.request_lock("Assets/Level.unity")

    assert alice.release_lock("Assets/Level.unity").ok
    assert alice.release_lock("Assets/Level.unity").ok

    result = bob.request_lock("Assets/Level.unity")
    assert result.ok
    assert result.holder == "bob"


def test_empty_path_is_precondition_failure(lock_client, fake_api):
    """Test that empty paths are refused before any request is sent"""
    for path in ("", "   ", "/", "./"):
        assert lock_client.request_lock(path).outcome is LockOutcome.PRECONDITION
        assert lock_client.release_lock(path).outcome is LockOutcome.PRECONDITION
        assert lock_client.query_single_status(path).outcome is LockOutcome.PRECONDITION

    assert fake_api.calls == []


def test_missing_identity_is_precondition_failure(make_client, fake_api):
    """Test that every operation requires a configured user"""
    anonymous = make_client(None)

    assert anonymous.request_lock("Assets/Hero.prefab").outcome is LockOutcome.PRECONDITION
    assert anonymous.release_lock("Assets/Hero.prefab").outcome is LockOutcome.PRECONDITION
    assert anonymous.query_single_status("Assets/Hero.prefab").outcome is LockOutcome.PRECONDITION

    table_result = anonymous.query_lock_table()
    assert table_result.outcome is LockOutcome.PRECONDITION
    assert table_result.table is None

    assert fake_api.calls == []


def test_unreachable_service_is_indeterminate(lock_client, fake_api, unavailable):
    """Test that transport failures never look like a lock state"""
    fake_api.fail_methods["get_lock_status"] = unavailable("timeout")
    fake_api.fail_methods["lock_asset"] = unavailable()
    fake_api.fail_methods["get_locked_assets"] = unavailable()

    status = lock_client.query_single_status("Assets/Hero.prefab")
    assert status.outcome is LockOutcome.INDETERMINATE
    assert status.status is None
    assert status.message == "timeout"

    assert lock_client.request_lock("Assets/Hero.prefab").outcome is LockOutcome.INDETERMINATE
    assert lock_client.query_lock_table().outcome is LockOutcome.INDETERMINATE


def test_malformed_answer_is_unexpected(lock_client, fake_api):
    """Test that undecodable answers are reported as unexpected"""
    fake_api.fail_methods["get_locked_assets"] = LockServiceProtocolError("Malformed response")

    result = lock_client.query_lock_table()
    assert result.outcome is LockOutcome.UNEXPECTED
    assert result.table is None


def test_paths_are_normalized(lock_client, fake_api):
    """Test that equivalent spellings of a path share one lock"""
    lock_client.request_lock("Assets\\Prefabs\\Hero.prefab")

    assert fake_api.calls[0] == ("lock", "Assets/Prefabs/Hero.prefab", "alice")
    status = lock_client.query_single_status("/Assets/Prefabs/Hero.prefab")
    assert status.resource_path == "Assets/Prefabs/Hero.prefab"
    assert status.status.is_held_by("alice")


def test_locks_are_isolated_per_branch(make_client, fake_git, fake_api):
    """Test that the same path on two branches are different locks"""
    alice = make_client("alice")
    bob = make_client("bob")

    alice.request_lock("Assets/Hero.prefab")

    fake_git.branch = "feature/boss-fight"
    assert bob.request_lock("Assets/Hero.prefab").ok

    main_table = alice.query_lock_table(Scope(fake_git.origin, "main")).table
    assert main_table.get_status("Assets/Hero.prefab").holder == "alice"

    feature_table = alice.query_lock_table().table
    assert feature_table.scope == Scope(fake_git.origin, "feature/boss-fight")
    assert feature_table.get_status("Assets/Hero.prefab").holder == "bob"


def test_lock_table_is_stamped_with_clock(lock_client, clock):
    """Test that fetched tables carry the fetch time"""
    clock.advance(42)
    table = lock_client.query_lock_table().table
    assert table.fetched_at == clock()
