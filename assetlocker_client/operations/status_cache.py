"""
AssetLocker Client - Lock Status Cache

Keeps the most recently fetched lock table of the current scope so the CLI
and other readers can answer "who holds this asset" without a request per check.

Author: AssetLocker Project
"""

import logging
import threading
import time
from enum import Enum
from typing import Callable, List, Optional

from ..models import LockOutcome, LockStatus, LockTable, TableResult, normalize_resource_path
from .scheduler import IntervalTimer, ThreadTaskRunner

# Configure logging
logger = logging.getLogger(__name__)


class CacheState(Enum):
    IDLE = "idle"
    REFRESHING = "refreshing"


class LockStatusCache:
    """
    Periodically refreshed snapshot of the lock table.

    Responsibilities:
    - Refresh on a fixed interval when ticked by the scheduler
    - Run at most one refresh at a time; extra requests are coalesced
    - Replace the snapshot atomically on success and notify observers
    - Keep the previous snapshot when a refresh fails
    """

    def __init__(self, lock_client, runner=None, clock: Callable[[], float] = time.monotonic,
                 refresh_interval_seconds: float = 10):
        """
        Initialize the cache.

        Args:
            lock_client: LockClient used to fetch the table
            runner: Task runner for refresh work (defaults to ThreadTaskRunner)
            clock: Monotonic clock used for scheduling and age
            refresh_interval_seconds: Seconds between periodic refreshes
        """
        self.lock_client = lock_client
        self.runner = runner if runner is not None else ThreadTaskRunner()
        self.clock = clock
        self._timer = IntervalTimer(refresh_interval_seconds)

        self._guard = threading.Lock()
        self._state = CacheState.IDLE
        self._table: Optional[LockTable] = None
        self._observers: List[Callable[[LockTable], None]] = []
        self.last_error: Optional[str] = None

    # ==================== Observers ====================

    def add_observer(self, callback: Callable[[LockTable], None]):
        """Register a callback invoked with the new table after each successful refresh."""
        self._observers.append(callback)

    def remove_observer(self, callback: Callable[[LockTable], None]):
        if callback in self._observers:
            self._observers.remove(callback)

    # ==================== Reads ====================

    @property
    def state(self) -> CacheState:
        return self._state

    def snapshot(self) -> Optional[LockTable]:
        """Get the current table, or None if no refresh has succeeded yet."""
        return self._table

    def get_status(self, resource_path: str) -> Optional[LockStatus]:
        """
        Look up an asset in the cached table.

        Returns:
            LockStatus, or None if nothing has been fetched yet (state unknown)
        """
        table = self._table
        if table is None:
            return None
        return table.get_status(normalize_resource_path(resource_path))

    def age(self) -> Optional[float]:
        """Seconds since the cached table was fetched, or None if empty."""
        table = self._table
        if table is None:
            return None
        return self.clock() - table.fetched_at

    # ==================== Refresh ====================

    def tick(self, now: float):
        """Scheduler entry point: start a refresh when the interval has elapsed."""
        if self._timer.is_due(now):
            self.request_refresh()

    def request_refresh(self) -> bool:
        """
        Start a background refresh.

        Returns:
            True if a refresh was started, False if one is already in flight
        """
        with self._guard:
            if self._state is CacheState.REFRESHING:
                logger.debug("Lock status refresh already in progress, request coalesced")
                return False
            self._state = CacheState.REFRESHING
            self._timer.reset(self.clock())

        try:
            self.runner.submit(self._refresh, name="assetlocker-refresh")
        except Exception:
            with self._guard:
                self._state = CacheState.IDLE
            raise
        return True

    def refresh_now(self) -> bool:
        """
        Refresh on the calling thread.

        Returns:
            True if the table was replaced, False if the refresh failed or
            another refresh was already in flight
        """
        with self._guard:
            if self._state is CacheState.REFRESHING:
                return False
            self._state = CacheState.REFRESHING
            self._timer.reset(self.clock())

        return self._refresh()

    def _refresh(self) -> bool:
        try:
            result = self.lock_client.query_lock_table()
        except Exception as e:
            logger.exception("Unexpected error while refreshing lock status")
            result = TableResult(LockOutcome.UNEXPECTED, None, str(e))
        return self._apply(result)

    def _apply(self, result: TableResult) -> bool:
        """Single write path into the cached table."""
        updated_table = None
        with self._guard:
            try:
                if result.ok and result.table is not None:
                    self._table = result.table
                    self.last_error = None
                    updated_table = result.table
                else:
                    self.last_error = result.message
                    logger.warning(f"Failed to update lock status, keeping previous data: {result.message}")
            finally:
                self._state = CacheState.IDLE

        if updated_table is None:
            return False

        for callback in list(self._observers):
            try:
                callback(updated_table)
            except Exception:
                logger.exception("Lock status observer failed")
        return True
