"""
AssetLocker Client - Models Package

Contains data models and enumerations used by the client.

Author: AssetLocker Project
"""

from .lock_models import (
    LockOutcome,
    Scope,
    LockStatus,
    UNLOCKED,
    LockEntry,
    LockTable,
    LockResult,
    StatusResult,
    TableResult,
    SaveGateResult,
    AutoUnlockReport,
    normalize_resource_path
)
from .wire_models import LockedAssetsResponse, LockStatusResponse, LockActionResponse

__all__ = [
    'LockOutcome',
    'Scope',
    'LockStatus',
    'UNLOCKED',
    'LockEntry',
    'LockTable',
    'LockResult',
    'StatusResult',
    'TableResult',
    'SaveGateResult',
    'AutoUnlockReport',
    'normalize_resource_path',
    'LockedAssetsResponse',
    'LockStatusResponse',
    'LockActionResponse'
]
