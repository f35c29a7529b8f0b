"""
AssetLocker Client - Exceptions Package

Contains all exception classes for the AssetLocker client.

Author: AssetLocker Project
"""

from .api_error import LockServiceError
from .unavailable_error import LockServiceUnavailableError
from .rejected_error import LockServiceRejectedError
from .precondition_error import LockServicePreconditionError
from .protocol_error import LockServiceProtocolError
from .git_error import GitCommandError

__all__ = [
    'LockServiceError',
    'LockServiceUnavailableError',
    'LockServiceRejectedError',
    'LockServicePreconditionError',
    'LockServiceProtocolError',
    'GitCommandError'
]
