"""
AssetLocker Server - Database Models Package

This package contains all SQLAlchemy database model definitions.
"""

from .base import Base
from .asset_lock import AssetLock

__all__ = [
    'Base',
    'AssetLock',
]
