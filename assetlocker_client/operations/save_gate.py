"""
AssetLocker Client - Save Gate

Decides which assets of a save batch may be written. An asset may be saved
when the current user holds its lock, or when it is free and the lock can be
taken now. Everything else is held back with a reason.

Author: AssetLocker Project
"""

import logging
from typing import Iterable, Optional, Tuple

from ..exceptions import LockServicePreconditionError
from ..models import LockOutcome, SaveGateResult, normalize_resource_path

# Configure logging
logger = logging.getLogger(__name__)

REASON_INDETERMINATE = "status indeterminate"
REASON_NOT_ACQUIRED = "could not acquire lock"


def locked_by_reason(holder: Optional[str]) -> str:
    return f"locked by {holder}"


class SaveGate:
    """
    Filters save batches by lock ownership.

    Locks taken here are kept after the save; they are released later by the
    user or by the auto-unlock engine.
    """

    def __init__(self, lock_client, status_cache=None,
                 guarded_extensions: Tuple[str, ...] = (".prefab", ".unity")):
        """
        Initialize the save gate.

        Args:
            lock_client: LockClient for status queries and implicit locks
            status_cache: Optional LockStatusCache refreshed after implicit locks
            guarded_extensions: Lower-case extensions that require a lock (empty = all files)
        """
        self.lock_client = lock_client
        self.status_cache = status_cache
        self.guarded_extensions = tuple(ext.lower() for ext in guarded_extensions)

    def is_guarded(self, resource_path: str) -> bool:
        if not self.guarded_extensions:
            return True
        return resource_path.lower().endswith(self.guarded_extensions)

    def filter_save_batch(self, paths: Iterable[str]) -> SaveGateResult:
        """
        Split a save batch into allowed and rejected assets.

        Args:
            paths: Asset paths about to be written

        Returns:
            SaveGateResult with allowed paths (in input order), rejected paths
            mapped to a reason, and the paths locked during this call
        """
        result = SaveGateResult()

        for path in paths:
            normalized = normalize_resource_path(path)

            if normalized and not self.is_guarded(normalized):
                result.allowed.append(path)
                continue

            reason = self._check_path(path, result)
            if reason is None:
                result.allowed.append(path)
            else:
                result.rejected[path] = reason
                logger.warning(f"Save of {path} blocked: {reason}")

        if result.implicitly_locked and self.status_cache is not None:
            self.status_cache.request_refresh()

        return result

    def _check_path(self, path: str, result: SaveGateResult) -> Optional[str]:
        """Return None when the asset may be saved, otherwise the rejection reason."""
        status_result = self.lock_client.query_single_status(path)

        if status_result.outcome is LockOutcome.PRECONDITION:
            return status_result.message or REASON_INDETERMINATE
        if not status_result.ok or status_result.status is None:
            return REASON_INDETERMINATE

        status = status_result.status

        if not status.locked:
            lock_result = self.lock_client.request_lock(path)
            if not lock_result.ok:
                return REASON_NOT_ACQUIRED
            logger.info(f"Implicitly locked {status_result.resource_path} for saving")
            result.implicitly_locked.append(path)
            return None

        try:
            current_user = self.lock_client.current_user()
        except LockServicePreconditionError as e:
            return str(e)

        if status.is_held_by(current_user):
            return None

        return locked_by_reason(status.holder)
