"""
Shared fixtures for AssetLocker Client tests

Provides in-memory stand-ins for the lock service, git and identity so the
lock coordination components can be exercised without a network or a repository.
"""

import sys
from pathlib import Path

import pytest

# Add repository root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from assetlocker_client.exceptions import (
    GitCommandError,
    LockServicePreconditionError,
    LockServiceRejectedError,
    LockServiceUnavailableError
)
from assetlocker_client.models import LockActionResponse, LockStatus
from assetlocker_client.operations import LockClient, ScopeResolver


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


class FakeLockServiceAPI:
    """In-memory lock service with first-writer-wins semantics, keyed by scope."""

    def __init__(self):
        self.locks = {}
        self.calls = []
        self.fail_methods = {}
        self.base_url = "http://fake-lock-service"
        self.closed = False

    def _maybe_fail(self, method: str):
        error = self.fail_methods.get(method)
        if error is not None:
            raise error

    def _scope_locks(self, scope):
        return self.locks.setdefault((scope.origin, scope.branch), {})

    def lock_asset(self, scope, file_path, user_name):
        self.calls.append(("lock", file_path, user_name))
        self._maybe_fail("lock_asset")
        locks = self._scope_locks(scope)
        holder = locks.get(file_path)
        if holder is None:
            locks[file_path] = user_name
            return LockActionResponse(success=True, status="locked",
                                      message="Asset locked successfully", holder=user_name)
        if holder == user_name:
            return LockActionResponse(success=True, status="already_locked",
                                      message="Asset already locked by you", holder=user_name)
        raise LockServiceRejectedError(f"Asset is already locked by {holder}", holder=holder)

    def unlock_asset(self, scope, file_path, user_name):
        self.calls.append(("unlock", file_path, user_name))
        self._maybe_fail("unlock_asset")
        locks = self._scope_locks(scope)
        holder = locks.get(file_path)
        if holder is None:
            return LockActionResponse(success=True, status="not_locked", message="Asset was not locked")
        if holder != user_name:
            raise LockServiceRejectedError(f"Cannot unlock: asset is locked by {holder}", holder=holder)
        del locks[file_path]
        return LockActionResponse(success=True, status="unlocked", message="Asset unlocked successfully")

    def get_locked_assets(self, scope):
        self.calls.append(("lockedAssets", scope))
        self._maybe_fail("get_locked_assets")
        return dict(self._scope_locks(scope))

    def get_lock_status(self, scope, file_path):
        self.calls.append(("status", file_path))
        self._maybe_fail("get_lock_status")
        holder = self._scope_locks(scope).get(file_path)
        return LockStatus(locked=holder is not None, holder=holder)

    def call_count(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)

    def close(self):
        self.closed = True


class FakeGitProvider:
    def __init__(self, origin="git@example.com:studio/game.git", branch="main"):
        self.origin = origin
        self.branch = branch
        self.changed_paths = set()
        self.failing_paths = set()
        self.pushed = True

    def get_origin(self, force_refresh=False):
        return self.origin

    def get_branch(self, force_refresh=False):
        return self.branch

    def has_local_changes(self, resource_path):
        if resource_path in self.failing_paths:
            raise GitCommandError(f"Could not read git status while checking {resource_path}")
        return resource_path in self.changed_paths

    def is_pushed_to_remote(self):
        return self.pushed


class StaticIdentity:
    def __init__(self, user=None):
        self.user = user

    def current_user(self):
        if not self.user:
            raise LockServicePreconditionError("User name is not configured")
        return self.user


class ManualTaskRunner:
    """Task runner that queues work until the test runs it."""

    def __init__(self):
        self.pending = []

    def submit(self, task, name=None):
        self.pending.append(task)

    def run_all(self):
        while self.pending:
            self.pending.pop(0)()


class StubScheduler:
    """Scheduler that only ticks when the test asks it to."""

    tick_seconds = 0

    def __init__(self, clock):
        self.clock = clock
        self.jobs = []
        self.running = False

    def add_job(self, job):
        self.jobs.append(job)

    def tick(self):
        for job in self.jobs:
            job.tick(self.clock())

    def start(self):
        self.running = True

    def stop(self, timeout=None):
        self.running = False


class RecordingNotifier:
    def __init__(self):
        self.messages = []

    def notify(self, message):
        self.messages.append(message)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def fake_api():
    return FakeLockServiceAPI()


@pytest.fixture
def fake_git():
    return FakeGitProvider()


@pytest.fixture
def runner():
    return ManualTaskRunner()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def make_scheduler(clock):
    return lambda: StubScheduler(clock)


@pytest.fixture
def make_client(fake_api, fake_git, clock):
    """Factory for lock clients sharing one fake service, one per user."""
    def factory(user="alice", api=None):
        return LockClient(api or fake_api, ScopeResolver(fake_git), StaticIdentity(user), clock=clock)
    return factory


@pytest.fixture
def lock_client(make_client):
    return make_client("alice")


@pytest.fixture
def unavailable():
    """Factory for the error raised when the service cannot be reached."""
    return lambda message="Cannot connect to lock service": LockServiceUnavailableError(message)
