"""
AssetLocker Client - Operations Package

This package contains the lock coordination components: scope resolution,
the lock client, the status cache, the save gate and the auto-unlock engine.
"""

from .scope_resolver import ScopeResolver
from .lock_client import LockClient, outcome_for
from .scheduler import IntervalTimer, ThreadTaskRunner, PeriodicScheduler
from .status_cache import LockStatusCache, CacheState
from .save_gate import SaveGate, REASON_INDETERMINATE, REASON_NOT_ACQUIRED, locked_by_reason
from .auto_unlock import AutoUnlockEngine, format_unlock_summary
from .notifier import LogNotifier
from .locker_service import LockerService

__all__ = [
    'ScopeResolver',
    'LockClient',
    'outcome_for',
    'IntervalTimer',
    'ThreadTaskRunner',
    'PeriodicScheduler',
    'LockStatusCache',
    'CacheState',
    'SaveGate',
    'REASON_INDETERMINATE',
    'REASON_NOT_ACQUIRED',
    'locked_by_reason',
    'AutoUnlockEngine',
    'format_unlock_summary',
    'LogNotifier',
    'LockerService'
]
