"""
Shared fixtures for AssetLocker Server tests

Each test gets its own SQLite lock store in a temporary directory.
"""

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Add repository root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent.parent))

from assetlocker_server import database
from assetlocker_server.managers import DatabaseManager
from assetlocker_server.server import app


@pytest.fixture
def db_manager(tmp_path):
    manager = DatabaseManager(str(tmp_path / "database" / "locks.db"))
    manager.InitializeDatabase()
    yield manager
    manager.Dispose()


@pytest.fixture
def client(db_manager):
    """TestClient running the app against the temporary lock store."""
    database.db_manager = db_manager
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        database.db_manager = None
