"""
AssetLocker Client - Auto-Unlock Engine

Releases the current user's locks once git shows the protected change is safely
shared: the asset has no uncommitted changes and the current commit is on a
remote branch.

Runs periodically while the client is live and once more, synchronously,
at shutdown. When in doubt a lock is kept: holding a lock too long only
delays teammates, releasing it too early can lose work.

Author: AssetLocker Project
"""

import logging
import threading
import time
from pathlib import Path
from typing import Callable, List, Optional

from ..exceptions import GitCommandError, LockServicePreconditionError
from ..models import AutoUnlockReport
from .scheduler import IntervalTimer, ThreadTaskRunner

# Configure logging
logger = logging.getLogger(__name__)


def format_unlock_summary(paths: List[str]) -> str:
    noun = "asset" if len(paths) == 1 else "assets"
    return f"{len(paths)} {noun} auto-unlocked: [{', '.join(paths)}]"


class AutoUnlockEngine:
    """
    Scans the current user's locks and releases the eligible ones.

    Responsibilities:
    - Run one scan at a time; periodic ticks during a scan are dropped
    - Skip assets missing on disk
    - Release only when has_local_changes is False and is_pushed_to_remote is True
    - Keep scanning when one asset's check or release fails
    - Send one summary notification per scan that released something
    """

    def __init__(self, lock_client, git_provider, project_root: Path, notifier=None,
                 status_cache=None, runner=None, clock: Callable[[], float] = time.monotonic,
                 interval_seconds: float = 60):
        """
        Initialize the engine.

        Args:
            lock_client: LockClient for the table query and releases
            git_provider: Provider of has_local_changes / is_pushed_to_remote
            project_root: Directory asset paths are relative to
            notifier: Object with notify(message) for user-visible summaries
            status_cache: Optional LockStatusCache refreshed after releases
            runner: Task runner for periodic scans (defaults to ThreadTaskRunner)
            clock: Monotonic clock for scheduling and the shutdown deadline
            interval_seconds: Seconds between periodic scans
        """
        self.lock_client = lock_client
        self.git = git_provider
        self.project_root = Path(project_root)
        self.notifier = notifier
        self.status_cache = status_cache
        self.runner = runner if runner is not None else ThreadTaskRunner()
        self.clock = clock
        self._timer = IntervalTimer(interval_seconds)
        self._scan_guard = threading.Lock()
        self.last_report: Optional[AutoUnlockReport] = None

    @property
    def is_scanning(self) -> bool:
        return self._scan_guard.locked()

    def tick(self, now: float):
        """Scheduler entry point: start a background scan when due."""
        if self._timer.is_due(now):
            self._timer.reset(now)
            self.check_now()

    def check_now(self) -> bool:
        """
        Start a background scan immediately.

        Returns:
            True if a scan was started, False if one is already running
        """
        if not self._scan_guard.acquire(blocking=False):
            logger.debug("Auto-unlock scan already running, tick dropped")
            return False

        try:
            self.runner.submit(self._run_background_scan, name="assetlocker-auto-unlock")
        except Exception:
            self._scan_guard.release()
            raise
        return True

    def _run_background_scan(self):
        try:
            self._scan()
        except Exception:
            logger.exception("Auto-unlock scan failed")
        finally:
            self._scan_guard.release()

    def run_scan(self) -> AutoUnlockReport:
        """
        Run a scan on the calling thread.

        Returns:
            AutoUnlockReport; ran is False if another scan was already running
        """
        if not self._scan_guard.acquire(blocking=False):
            logger.debug("Auto-unlock scan already running")
            return AutoUnlockReport(ran=False)
        try:
            return self._scan()
        finally:
            self._scan_guard.release()

    def run_shutdown_pass(self, timeout_seconds: float = 30) -> AutoUnlockReport:
        """
        Run the final scan before the process exits.

        Waits for a running periodic scan to finish, then scans once with the
        same rule. Assets not reached before the deadline keep their locks.

        Args:
            timeout_seconds: Upper bound for waiting plus scanning

        Returns:
            AutoUnlockReport of the final pass
        """
        deadline = self.clock() + timeout_seconds
        logger.info("Running auto-unlock check before exit")

        if not self._scan_guard.acquire(timeout=max(timeout_seconds, 0)):
            logger.warning("Auto-unlock check on exit skipped: previous scan did not finish in time")
            return AutoUnlockReport(ran=False)
        try:
            return self._scan(deadline=deadline, refresh_cache=False)
        finally:
            self._scan_guard.release()

    def is_eligible(self, resource_path: str) -> bool:
        """
        Check whether an asset's lock can be released.

        Raises:
            GitCommandError: If git cannot answer
        """
        if self.git.has_local_changes(resource_path):
            return False
        return self.git.is_pushed_to_remote()

    def _scan(self, deadline: Optional[float] = None, refresh_cache: bool = True) -> AutoUnlockReport:
        report = AutoUnlockReport()

        try:
            user = self.lock_client.current_user()
        except LockServicePreconditionError as e:
            logger.info(f"Auto-unlock skipped: {e}")
            report.ran = False
            self.last_report = report
            return report

        table_result = self.lock_client.query_lock_table()
        if not table_result.ok or table_result.table is None:
            logger.warning(f"Auto-unlock skipped: could not fetch locks ({table_result.message})")
            report.ran = False
            self.last_report = report
            return report

        my_locked_files = table_result.table.held_by(user)
        logger.debug(f"Auto-unlock checking {len(my_locked_files)} lock(s) held by {user}")

        for index, asset_path in enumerate(my_locked_files):
            if deadline is not None and self.clock() >= deadline:
                remaining = my_locked_files[index:]
                logger.warning(f"Auto-unlock deadline reached, {len(remaining)} lock(s) left in place")
                report.skipped.extend(remaining)
                break

            # Skip files that don't exist
            if not (self.project_root / asset_path).exists():
                report.skipped.append(asset_path)
                continue

            try:
                can_unlock = self.is_eligible(asset_path)
            except (GitCommandError, OSError) as e:
                logger.warning(f"Could not check {asset_path} for auto-unlock: {e}")
                report.failed[asset_path] = str(e)
                continue

            if not can_unlock:
                report.skipped.append(asset_path)
                continue

            result = self.lock_client.release_lock(asset_path)
            if result.ok:
                report.released.append(asset_path)
            else:
                report.failed[asset_path] = result.message

        if report.released:
            self._announce(report.released)
            if refresh_cache and self.status_cache is not None:
                self.status_cache.request_refresh()

        self.last_report = report
        return report

    def _announce(self, released: List[str]):
        message = format_unlock_summary(released)
        if self.notifier is None:
            logger.info(message)
        else:
            try:
                self.notifier.notify(message)
            except Exception:
                logger.exception("Failed to deliver auto-unlock notification")
