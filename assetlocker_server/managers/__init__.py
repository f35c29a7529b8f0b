"""
AssetLocker Server - Managers Package

This package contains manager classes for database operations.
"""

from .database_manager import DatabaseManager

__all__ = ['DatabaseManager']
