"""
AssetLocker Client - Lock Service Rejected Error Exception

Exception raised when the lock service refuses a request, typically because
the asset is held by another user.

Author: AssetLocker Project
"""

from typing import Optional

from .api_error import LockServiceError


class LockServiceRejectedError(LockServiceError):
    """Exception for a well-formed refusal from the lock service."""

    def __init__(self, message: str, holder: Optional[str] = None):
        super().__init__(message)
        self.holder = holder
