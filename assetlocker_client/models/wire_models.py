"""
AssetLocker Client - Wire Models

Pydantic models describing the JSON bodies returned by the lock service.
Field names follow the service's wire format.

Author: AssetLocker Project
"""

from typing import Dict, Optional

from pydantic import BaseModel


class LockedAssetsResponse(BaseModel):
    """Body of GET /lockedAssets. Locks is None when the service had no usable data."""
    Locks: Optional[Dict[str, str]] = None


class LockStatusResponse(BaseModel):
    """Body of GET /status."""
    Locked: bool
    User: Optional[str] = None


class LockActionResponse(BaseModel):
    """Body of POST /lock and POST /unlock."""
    success: bool
    status: str = ""
    message: str = ""
    holder: Optional[str] = None
