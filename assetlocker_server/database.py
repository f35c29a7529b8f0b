"""
AssetLocker Server - Database Module

This module exports the global db_manager instance for use across the application.
"""

from typing import Optional

from .managers.database_manager import DatabaseManager

# Global database manager instance
# Initialized in server.py lifespan handler (or by tests before the app starts)
db_manager: Optional[DatabaseManager] = None
