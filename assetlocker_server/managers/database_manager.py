"""
AssetLocker Server - Database Manager

This module manages database connection and initialization.
"""

import logging
from pathlib import Path

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from ..models.database import Base

logger = logging.getLogger(__name__)


class DatabaseManager:
    """
    Manages database connection, initialization, and sessions
    """

    def __init__(self, db_path: str = "database/assetlocker.db"):
        """
        Initialize database manager

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path

        # Ensure database directory exists
        db_dir = Path(db_path).parent
        if db_dir and str(db_dir) != '.':
            db_dir.mkdir(parents=True, exist_ok=True)

        # Requests are served from worker threads, so connections must not be pinned to one thread
        self.engine = create_engine(
            f"sqlite:///{db_path}",
            echo=False,
            connect_args={"check_same_thread": False}
        )
        self.SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=self.engine, expire_on_commit=False)

    def InitializeDatabase(self) -> None:
        """
        Initialize the database
        Creates tables if they don't exist
        """
        Base.metadata.create_all(bind=self.engine)
        logger.info(f"Database ready at {Path(self.db_path).absolute()}")

    def GetSession(self):
        """
        Get a new database session

        Returns:
            SQLAlchemy session (caller must close it)
        """
        return self.SessionLocal()

    def Dispose(self) -> None:
        """Close all pooled connections"""
        self.engine.dispose()
