"""
AssetLocker Server - Lock Store

This module holds the authoritative asset locks. Every lock belongs to an
origin/branch scope; within a scope an asset has at most one holder and the
first writer wins.
"""

import logging
from datetime import datetime, timezone
from pathlib import PurePosixPath
from typing import Dict, Optional

from sqlalchemy.exc import IntegrityError

from .models.database import AssetLock
from .models.infrastructure import (
    LockDecision,
    STATUS_LOCKED,
    STATUS_ALREADY_LOCKED,
    STATUS_UNLOCKED,
    STATUS_NOT_LOCKED,
    STATUS_LOCKED_BY_OTHER,
)

logger = logging.getLogger(__name__)


def NormalizeFilePath(file_path: str) -> str:
    """
    Normalize an asset path to its lock key
    Forward slashes, no leading separator, no "./" segments

    Returns:
        Normalized path, or empty string if nothing is left
    """
    cleaned = (file_path or "").replace("\\", "/").strip().lstrip("/")
    if not cleaned:
        return ""
    normalized = str(PurePosixPath(cleaned))
    return "" if normalized == "." else normalized


def _FindLock(session, origin: str, branch: str, file_path: str) -> Optional[AssetLock]:
    return (
        session.query(AssetLock)
        .filter(
            AssetLock.origin == origin,
            AssetLock.branch == branch,
            AssetLock.file_path == file_path
        )
        .first()
    )


def _HeldDecision(existing: AssetLock, username: str) -> LockDecision:
    """Decision for a lock request on an asset that already has a holder"""
    if existing.holder == username:
        return LockDecision(True, STATUS_ALREADY_LOCKED, "Asset already locked by you", username)
    return LockDecision(
        False,
        STATUS_LOCKED_BY_OTHER,
        f"Asset is already locked by {existing.holder}",
        existing.holder
    )


def AcquireLock(db_manager, origin: str, branch: str, file_path: str, username: str) -> LockDecision:
    """
    Attempt to lock an asset for a user

    Locking an asset the user already holds succeeds without creating a second entry.

    Args:
        db_manager: DatabaseManager instance
        origin: Remote origin of the scope
        branch: Branch of the scope
        file_path: Normalized asset path
        username: Requesting user

    Returns:
        LockDecision
    """
    session = db_manager.GetSession()
    try:
        existing = _FindLock(session, origin, branch, file_path)
        if existing is not None:
            return _HeldDecision(existing, username)

        session.add(AssetLock(
            origin=origin,
            branch=branch,
            file_path=file_path,
            holder=username,
            locked_at_utc=datetime.now(timezone.utc)
        ))
        try:
            session.commit()
        except IntegrityError:
            # Another request inserted the same asset first
            session.rollback()
            winner = _FindLock(session, origin, branch, file_path)
            if winner is None:
                logger.warning(f"Lock on {file_path} changed hands while locking, reporting conflict")
                return LockDecision(False, STATUS_LOCKED_BY_OTHER, "Asset lock changed concurrently, try again")
            return _HeldDecision(winner, username)

        logger.info(f"Lock acquired by user '{username}' on {file_path} ({origin}@{branch})")
        return LockDecision(True, STATUS_LOCKED, "Asset locked successfully", username)

    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def ReleaseLock(db_manager, origin: str, branch: str, file_path: str, username: str) -> LockDecision:
    """
    Release a user's lock on an asset

    Releasing an asset that is not locked succeeds; releasing an asset held by
    someone else fails and leaves the lock in place.

    Args:
        db_manager: DatabaseManager instance
        origin: Remote origin of the scope
        branch: Branch of the scope
        file_path: Normalized asset path
        username: Requesting user

    Returns:
        LockDecision
    """
    session = db_manager.GetSession()
    try:
        existing = _FindLock(session, origin, branch, file_path)
        if existing is None:
            return LockDecision(True, STATUS_NOT_LOCKED, "Asset was not locked")

        if existing.holder != username:
            return LockDecision(
                False,
                STATUS_LOCKED_BY_OTHER,
                f"Cannot unlock: asset is locked by {existing.holder}",
                existing.holder
            )

        session.delete(existing)
        session.commit()
        logger.info(f"Lock released by user '{username}' on {file_path} ({origin}@{branch})")
        return LockDecision(True, STATUS_UNLOCKED, "Asset unlocked successfully")

    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def GetLockTable(db_manager, origin: str, branch: str) -> Dict[str, str]:
    """
    Get every lock in a scope

    Returns:
        Mapping of asset path to holder
    """
    session = db_manager.GetSession()
    try:
        locks = (
            session.query(AssetLock)
            .filter(AssetLock.origin == origin, AssetLock.branch == branch)
            .all()
        )
        return {lock.file_path: lock.holder for lock in locks}
    finally:
        session.close()


def GetLockHolder(db_manager, origin: str, branch: str, file_path: str) -> Optional[str]:
    """
    Get the holder of a single asset

    Returns:
        Username of the holder, or None if the asset is not locked
    """
    session = db_manager.GetSession()
    try:
        existing = _FindLock(session, origin, branch, file_path)
        return existing.holder if existing is not None else None
    finally:
        session.close()
