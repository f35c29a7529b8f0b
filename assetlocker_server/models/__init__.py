"""
AssetLocker Server - Models Package

This package contains all data models for the AssetLocker server:
- database: SQLAlchemy database models
- api: API endpoint Pydantic models
- infrastructure: Dataclass models for store decisions
"""

from .database import Base, AssetLock
from .api import LockActionResponse, LockStatusResponse, LockedAssetsResponse
from .infrastructure import LockDecision

__all__ = [
    'Base',
    'AssetLock',
    'LockActionResponse',
    'LockStatusResponse',
    'LockedAssetsResponse',
    'LockDecision',
]
