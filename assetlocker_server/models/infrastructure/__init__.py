"""
AssetLocker Server - Infrastructure Models Package

This package contains dataclass models for infrastructure components.
"""

from .lock_decision import (
    LockDecision,
    STATUS_LOCKED,
    STATUS_ALREADY_LOCKED,
    STATUS_UNLOCKED,
    STATUS_NOT_LOCKED,
    STATUS_LOCKED_BY_OTHER,
)

__all__ = [
    'LockDecision',
    'STATUS_LOCKED',
    'STATUS_ALREADY_LOCKED',
    'STATUS_UNLOCKED',
    'STATUS_NOT_LOCKED',
    'STATUS_LOCKED_BY_OTHER',
]
