"""
AssetLocker Client - Lock Service Error Exception

Base exception class for all lock service errors.

Author: AssetLocker Project
"""


class LockServiceError(Exception):
    """Base exception for lock service errors."""
    pass
