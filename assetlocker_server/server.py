"""
AssetLocker Server - Main FastAPI Application

This module contains the main FastAPI application for the AssetLocker server.
It serves the lock endpoints used by clients to coordinate exclusive editing
of shared assets.
"""

import argparse
import logging
from logging.handlers import RotatingFileHandler
from datetime import datetime
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
import uvicorn

from . import __version__
from . import database
from .managers.database_manager import DatabaseManager

logger = logging.getLogger(__name__)


def ConfigureLogging(logs_dir: Path = Path("logs"), level: int = logging.INFO) -> None:
    """
    Configure logging to write to both console and a rotating file

    Args:
        logs_dir: Directory for log files (created if missing)
        level: Root log level
    """
    logs_dir.mkdir(parents=True, exist_ok=True)

    # Create log filename with timestamp
    log_filename = logs_dir / f"assetlocker-server-{datetime.now().strftime('%Y-%m-%d')}.log"

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            # Console handler
            logging.StreamHandler(),
            # File handler with rotation (max 10MB per file, keep 10 backup files)
            RotatingFileHandler(
                log_filename,
                maxBytes=10 * 1024 * 1024,  # 10MB
                backupCount=10,
                encoding='utf-8'
            )
        ]
    )


# ==================== Lifespan Events ====================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    FastAPI lifespan event handler for startup and shutdown
    Manages database initialization and cleanup
    """
    # Startup
    logger.info("AssetLocker Server starting up...")

    # A manager installed beforehand (custom path, tests) is kept
    if database.db_manager is None:
        database.db_manager = DatabaseManager()

    database.db_manager.InitializeDatabase()
    logger.info("Server startup complete")

    yield

    # Shutdown
    logger.info("AssetLocker Server shutting down...")
    database.db_manager.Dispose()
    logger.info("Shutdown complete")


# ==================== FastAPI Application ====================

app = FastAPI(
    title="AssetLocker Server",
    description="Lock store coordinating exclusive editing of shared assets",
    version=__version__,
    lifespan=lifespan
)


# ==================== Include Routers ====================

from .routes import status, locks

app.include_router(status.router)
app.include_router(locks.router)


# ==================== Main Entry Point ====================

def main(argv=None):
    """
    Run the server using uvicorn
    """
    parser = argparse.ArgumentParser(description='AssetLocker lock store server')
    parser.add_argument('--host', default='0.0.0.0', help='Interface to bind (default: 0.0.0.0)')
    parser.add_argument('--port', type=int, default=8000, help='Port to listen on (default: 8000)')
    parser.add_argument('--db-path', default='database/assetlocker.db', help='SQLite database file')
    parser.add_argument('--log-dir', default='logs', help='Directory for server log files')
    args = parser.parse_args(argv)

    ConfigureLogging(Path(args.log_dir))
    database.db_manager = DatabaseManager(args.db_path)

    logger.info(f"Starting AssetLocker Server on {args.host}:{args.port}...")

    # host="0.0.0.0" allows connections from other machines on the network
    uvicorn.run(
        app,
        host=args.host,
        port=args.port,
        reload=False,
        log_level="info"
    )


if __name__ == "__main__":
    main()
