"""
AssetLocker Client - Lock Service Protocol Error Exception

Exception raised when the lock service answers with a payload that cannot be
decoded at all or with a status the client does not understand.

Author: AssetLocker Project
"""

from .api_error import LockServiceError


class LockServiceProtocolError(LockServiceError):
    """Exception for malformed or unexpected server responses."""
    pass
