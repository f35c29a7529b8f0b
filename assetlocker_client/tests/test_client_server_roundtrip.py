"""
End-to-end tests for AssetLocker

Runs the client components against the real server application through
FastAPI's TestClient, with git answers supplied by the test.
"""

import pytest
from fastapi.testclient import TestClient

from assetlocker_client.api import LockServiceAPI
from assetlocker_client.managers import ConfigManager
from assetlocker_client.models import LockOutcome
from assetlocker_client.operations import LockerService
from assetlocker_server import database
from assetlocker_server.managers import DatabaseManager
from assetlocker_server.server import app


class SharedSession:
    """Per-client view of the shared TestClient; closing it leaves the server running."""

    def __init__(self, test_client):
        self.test_client = test_client

    def request(self, method, url, **kwargs):
        return self.test_client.request(method, url, **kwargs)

    def close(self):
        pass


@pytest.fixture
def server(tmp_path):
    database.db_manager = DatabaseManager(str(tmp_path / "server" / "locks.db"))
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        database.db_manager = None


@pytest.fixture
def make_service(server, tmp_path, fake_git, runner, notifier, clock, make_scheduler):
    """Factory for a LockerService per user, all talking to the same server."""
    project = tmp_path / "project"
    (project / "Assets").mkdir(parents=True)
    for name in ("P1.prefab", "P2.prefab"):
        (project / "Assets" / name).write_text("%YAML 1.1")

    def factory(user):
        config_dir = tmp_path / f"config-{user}"
        config_dir.mkdir()
        config = ConfigManager(config_dir)
        config.load_config()
        config.set("username", user)
        config.set("project_root", str(project))

        api = LockServiceAPI("http://testserver", session=SharedSession(server))
        return LockerService(config, api=api, git_provider=fake_git, notifier=notifier,
                             runner=runner, scheduler=make_scheduler(), clock=clock)
    return factory


def test_two_users_contend_for_an_asset(make_service):
    """Test locking, refusal, release and hand-over between two users"""
    alice = make_service("alice")
    bob = make_service("bob")

    assert alice.lock("Assets/P1.prefab").ok

    refused = bob.lock("Assets/P1.prefab")
    assert refused.outcome is LockOutcome.REJECTED
    assert refused.holder == "alice"

    assert bob.unlock("Assets/P1.prefab").outcome is LockOutcome.REJECTED
    assert alice.unlock("Assets/P1.prefab").ok
    assert bob.lock("Assets/P1.prefab").ok

    assert alice.status_cache.refresh_now()
    assert alice.status_cache.get_status("Assets/P1.prefab").holder == "bob"


def test_save_gate_against_server(make_service):
    """Test a mixed save batch against the real lock store"""
    alice = make_service("alice")
    bob = make_service("bob")
    alice.lock("Assets/A.prefab")
    bob.lock("Assets/C.prefab")

    result = alice.save_gate.filter_save_batch(["Assets/A.prefab", "Assets/B.prefab", "Assets/C.prefab"])

    assert result.allowed == ["Assets/A.prefab", "Assets/B.prefab"]
    assert result.rejected == {"Assets/C.prefab": "locked by bob"}
    assert bob.lock_client.query_single_status("Assets/B.prefab").status.holder == "alice"


def test_periodic_tick_refreshes_and_auto_unlocks(make_service, runner, fake_git, notifier):
    """Test one scheduler tick driving the cache and the auto-unlock engine"""
    alice = make_service("alice")
    alice.lock("Assets/P1.prefab")
    alice.lock("Assets/P2.prefab")
    fake_git.changed_paths.add("Assets/P2.prefab")
    runner.run_all()

    alice.start()
    alice.scheduler.tick()
    runner.run_all()

    assert alice.auto_unlock.last_report.released == ["Assets/P1.prefab"]
    assert notifier.messages == ["1 asset auto-unlocked: [Assets/P1.prefab]"]
    assert not alice.status_cache.get_status("Assets/P1.prefab").locked
    assert alice.status_cache.get_status("Assets/P2.prefab").holder == "alice"


def test_shutdown_runs_final_pass(make_service, fake_git):
    """Test that shutdown releases clean assets and keeps dirty ones"""
    alice = make_service("alice")
    bob = make_service("bob")

    alice.start()
    alice.lock("Assets/P1.prefab")
    alice.lock("Assets/P2.prefab")
    fake_git.changed_paths.add("Assets/P2.prefab")

    report = alice.shutdown()

    assert report.released == ["Assets/P1.prefab"]
    assert not alice.scheduler.running
    assert bob.lock("Assets/P1.prefab").ok
    assert bob.lock("Assets/P2.prefab").outcome is LockOutcome.REJECTED


def test_shutdown_without_start(make_service):
    """Test that a service that never started skips the final pass"""
    alice = make_service("alice")
    alice.lock("Assets/P1.prefab")

    assert alice.shutdown() is None
