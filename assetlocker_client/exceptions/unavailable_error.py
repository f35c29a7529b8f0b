"""
AssetLocker Client - Lock Service Unavailable Error Exception

Exception raised when the lock state cannot be determined: the service is
unreachable, the request timed out, the server failed, or the response carried
no usable data.

Author: AssetLocker Project
"""

from .api_error import LockServiceError


class LockServiceUnavailableError(LockServiceError):
    """Exception for indeterminate lock state (transport or server failure)."""
    pass
