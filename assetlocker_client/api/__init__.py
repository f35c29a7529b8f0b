"""
AssetLocker Client - API Package

This package contains the lock service communication classes.
"""

from .lock_service_api import LockServiceAPI

__all__ = ['LockServiceAPI']
