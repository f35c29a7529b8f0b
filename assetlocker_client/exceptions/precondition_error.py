"""
AssetLocker Client - Lock Service Precondition Error Exception

Exception raised before any network call when a local requirement is not met
(no user name configured, empty asset path).

Author: AssetLocker Project
"""

from .api_error import LockServiceError


class LockServicePreconditionError(LockServiceError):
    """Exception for violated local preconditions."""
    pass
