"""
AssetLocker Server - Lock API Models

Pydantic models for the lock, unlock, status and locked-assets endpoints.
Field names of the query responses follow the established wire format.
"""

from typing import Dict, Optional

from pydantic import BaseModel


class LockActionResponse(BaseModel):
    success: bool
    status: str
    message: str
    holder: Optional[str] = None


class LockStatusResponse(BaseModel):
    Locked: bool
    User: Optional[str] = None


class LockedAssetsResponse(BaseModel):
    Locks: Dict[str, str]
