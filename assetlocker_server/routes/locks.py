"""
AssetLocker Server - Lock Endpoints

This module contains the endpoints used by clients to lock and unlock assets
and to query lock state. Lock and unlock take form fields; queries take
query parameters.
"""

import logging
from typing import Optional, Tuple

from fastapi import APIRouter, Form, HTTPException, Query, status
from fastapi.responses import JSONResponse

from .. import database
from ..lock_store import AcquireLock, ReleaseLock, GetLockTable, GetLockHolder, NormalizeFilePath
from ..models.api import LockActionResponse, LockStatusResponse, LockedAssetsResponse
from ..models.infrastructure import LockDecision


# Create logger
logger = logging.getLogger(__name__)

# Create router instance
router = APIRouter()


def _GetDatabaseManager():
    if database.db_manager is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Lock store is not initialized"
        )
    return database.db_manager


def _ValidateScope(branch: str, origin: str) -> Tuple[str, str]:
    branch = (branch or "").strip()
    origin = (origin or "").strip()
    if not branch or not origin:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="branch and origin are required"
        )
    return branch, origin


def _ValidateFilePath(file_path: str) -> str:
    normalized = NormalizeFilePath(file_path)
    if not normalized:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="filePath is required"
        )
    return normalized


def _ValidateUser(user_name: str) -> str:
    user_name = (user_name or "").strip()
    if not user_name:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="userName is required"
        )
    return user_name


def _DecisionResponse(decision: LockDecision):
    """
    Build the HTTP answer for a lock decision
    Accepted requests return 200, refusals return 409 with the same body shape
    """
    body = LockActionResponse(
        success=decision.success,
        status=decision.status,
        message=decision.message,
        holder=decision.holder
    )
    if decision.success:
        return body
    return JSONResponse(status_code=status.HTTP_409_CONFLICT, content=body.model_dump())


# ==================== Lock Mutation Endpoints ====================

@router.post("/lock", response_model=LockActionResponse, tags=["Locks"])
async def lock_asset(
    branch: str = Form(...),
    origin: str = Form(...),
    filePath: str = Form(...),
    userName: str = Form(...)
):
    """
    Lock an asset for a user

    Args:
        branch: Branch of the scope
        origin: Remote origin of the scope
        filePath: Asset path
        userName: Requesting user

    Returns:
        LockActionResponse (200 when locked or already locked by the user, 409 when held by another user)
    """
    db_manager = _GetDatabaseManager()
    branch, origin = _ValidateScope(branch, origin)
    file_path = _ValidateFilePath(filePath)
    user_name = _ValidateUser(userName)

    decision = AcquireLock(db_manager, origin, branch, file_path, user_name)
    if not decision.success:
        logger.info(f"Lock on {file_path} refused for '{user_name}': {decision.message}")
    return _DecisionResponse(decision)


@router.post("/unlock", response_model=LockActionResponse, tags=["Locks"])
async def unlock_asset(
    branch: str = Form(...),
    origin: str = Form(...),
    filePath: str = Form(...),
    userName: str = Form(...)
):
    """
    Unlock an asset held by a user

    Returns:
        LockActionResponse (200 when unlocked or not locked, 409 when held by another user)
    """
    db_manager = _GetDatabaseManager()
    branch, origin = _ValidateScope(branch, origin)
    file_path = _ValidateFilePath(filePath)
    user_name = _ValidateUser(userName)

    decision = ReleaseLock(db_manager, origin, branch, file_path, user_name)
    if not decision.success:
        logger.info(f"Unlock of {file_path} refused for '{user_name}': {decision.message}")
    return _DecisionResponse(decision)


# ==================== Lock Query Endpoints ====================

@router.get("/lockedAssets", response_model=LockedAssetsResponse, tags=["Locks"])
async def get_locked_assets(
    branch: str = Query(...),
    origin: str = Query(...),
    filePath: Optional[str] = Query(None)
):
    """
    Get every lock in a scope

    filePath is accepted for compatibility and ignored.

    Returns:
        LockedAssetsResponse mapping asset paths to holders
    """
    db_manager = _GetDatabaseManager()
    branch, origin = _ValidateScope(branch, origin)

    return LockedAssetsResponse(Locks=GetLockTable(db_manager, origin, branch))


@router.get("/status", response_model=LockStatusResponse, tags=["Locks"])
async def get_lock_status(
    branch: str = Query(...),
    origin: str = Query(...),
    filePath: str = Query(...)
):
    """
    Get the lock status of a single asset

    Returns:
        LockStatusResponse with Locked flag and holder
    """
    db_manager = _GetDatabaseManager()
    branch, origin = _ValidateScope(branch, origin)
    file_path = _ValidateFilePath(filePath)

    holder = GetLockHolder(db_manager, origin, branch, file_path)
    return LockStatusResponse(Locked=holder is not None, User=holder)
