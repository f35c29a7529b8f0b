"""
AssetLocker Server - API Models Package

This package contains Pydantic models for all API endpoints.
"""

from .lock_responses import LockActionResponse, LockStatusResponse, LockedAssetsResponse

__all__ = [
    'LockActionResponse',
    'LockStatusResponse',
    'LockedAssetsResponse',
]
