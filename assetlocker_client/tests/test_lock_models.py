"""
Tests for lock models and scheduling helpers in AssetLocker Client
"""

from assetlocker_client.models import LockStatus, LockTable, Scope, normalize_resource_path
from assetlocker_client.operations import IntervalTimer, PeriodicScheduler


def test_normalize_resource_path():
    """Test that equivalent spellings map to one lock key"""
    assert normalize_resource_path("Assets\\Prefabs\\Hero.prefab") == "Assets/Prefabs/Hero.prefab"
    assert normalize_resource_path("/Assets/Hero.prefab") == "Assets/Hero.prefab"
    assert normalize_resource_path("./Assets/Hero.prefab") == "Assets/Hero.prefab"
    assert normalize_resource_path("Assets//Hero.prefab") == "Assets/Hero.prefab"
    assert normalize_resource_path("") == ""
    assert normalize_resource_path(None) == ""
    assert normalize_resource_path(".") == ""


def test_lock_table_lookups():
    """Test status lookups and per-user listings"""
    scope = Scope("origin", "main")
    source = {"b.prefab": "alice", "a.unity": "alice", "c.prefab": "bob"}
    table = LockTable(scope, source, fetched_at=5.0)

    # Later changes to the source mapping do not leak into the snapshot
    source["d.prefab"] = "carol"

    assert len(table) == 3
    assert "d.prefab" not in table
    assert table.held_by("alice") == ["a.unity", "b.prefab"]
    assert table.held_by("dave") == []
    assert table.get_status("c.prefab").is_held_by("bob")
    assert not table.get_status("missing.prefab").locked
    assert [entry.resource_path for entry in table.entries()] == ["a.unity", "b.prefab", "c.prefab"]



def test_lock_status_ownership():
    """Test that only a locked status counts as held"""
    assert LockStatus(locked=True, holder="alice").is_held_by("alice")
    assert not LockStatus(locked=True, holder="bob").is_held_by("alice")
    assert not LockStatus(locked=False, holder="alice").is_held_by("alice")
    assert not LockStatus(locked=False).is_held_by(None)

def test_interval_timer():
    """Test that a new timer is due at once and then every interval"""
    timer = IntervalTimer(10)
    assert timer.is_due(0)

    timer.reset(0)
    assert not timer.is_due(9.9)
    assert timer.is_due(10)


class CountingJob:
    def __init__(self):
        self.ticks = []

    def tick(self, now):
        self.ticks.append(now)


class BrokenJob:
    def tick(self, now):
        raise RuntimeError("job bug")


def test_scheduler_keeps_ticking_after_job_failure(clock):
    """Test that one failing job does not stop the others"""
    scheduler = PeriodicScheduler(clock=clock)
    job = CountingJob()
    scheduler.add_job(BrokenJob())
    scheduler.add_job(job)

    scheduler.tick()
    clock.advance(1)
    scheduler.tick()

    assert job.ticks == [1000.0, 1001.0]


def test_scheduler_start_and_stop(clock):
    """Test that the background loop ticks once on start and stops promptly"""
    scheduler = PeriodicScheduler(clock=clock, tick_seconds=60)
    job = CountingJob()
    scheduler.add_job(job)

    scheduler.start()
    assert scheduler.is_running
    scheduler.stop(timeout=5)

    assert not scheduler.is_running
    assert job.ticks == [1000.0]
