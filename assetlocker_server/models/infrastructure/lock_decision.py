"""
AssetLocker Server - Lock Decision Model

Dataclass for the store's answer to a lock or unlock request.
"""

from dataclasses import dataclass
from typing import Optional

# Decision statuses reported to clients
STATUS_LOCKED = "locked"
STATUS_ALREADY_LOCKED = "already_locked"
STATUS_UNLOCKED = "unlocked"
STATUS_NOT_LOCKED = "not_locked"
STATUS_LOCKED_BY_OTHER = "locked_by_other"


@dataclass
class LockDecision:
    """
    Outcome of a lock/unlock request against the store
    """
    success: bool
    status: str
    message: str
    holder: Optional[str] = None
