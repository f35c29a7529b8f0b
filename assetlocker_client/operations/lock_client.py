"""
AssetLocker Client - Lock Client

Issues lock, unlock, table and status requests for the current user in the
current scope, and reports every answer as a result object.

Each call is a single request: no retries, no batching across assets.
Failures are reported with an outcome that tells "the service said no"
apart from "the lock state is unknown".

Author: AssetLocker Project
"""

import logging
import time
from typing import Callable, Optional

from ..exceptions import (
    LockServiceError,
    LockServiceUnavailableError,
    LockServiceRejectedError,
    LockServicePreconditionError,
    LockServiceProtocolError
)
from ..models import (
    LockOutcome,
    LockResult,
    LockTable,
    Scope,
    StatusResult,
    TableResult,
    normalize_resource_path
)

# Configure logging
logger = logging.getLogger(__name__)


def outcome_for(error: LockServiceError) -> LockOutcome:
    """Map a lock service exception onto the outcome reported to callers."""
    if isinstance(error, LockServiceRejectedError):
        return LockOutcome.REJECTED
    if isinstance(error, LockServicePreconditionError):
        return LockOutcome.PRECONDITION
    if isinstance(error, LockServiceProtocolError):
        return LockOutcome.UNEXPECTED
    if isinstance(error, LockServiceUnavailableError):
        return LockOutcome.INDETERMINATE
    return LockOutcome.UNEXPECTED


class LockClient:
    """
    Lock operations for the current user.

    Responsibilities:
    - Resolve scope and identity before each request
    - Refuse empty paths and missing identity before touching the network
    - Report accepted / rejected / indeterminate / precondition / unexpected outcomes
    """

    def __init__(self, api, scope_resolver, identity_provider,
                 clock: Callable[[], float] = time.monotonic):
        """
        Initialize lock client.

        Args:
            api: LockServiceAPI instance
            scope_resolver: ScopeResolver supplying the current Scope
            identity_provider: IdentityProvider supplying the current user
            clock: Clock used to timestamp fetched lock tables
        """
        self.api = api
        self.scope_resolver = scope_resolver
        self.identity = identity_provider
        self.clock = clock

    def current_user(self) -> str:
        """
        Raises:
            LockServicePreconditionError: If no user name is configured
        """
        return self.identity.current_user()

    def current_scope(self) -> Scope:
        return self.scope_resolver.current_scope()

    def _require_path(self, resource_path: str) -> str:
        normalized = normalize_resource_path(resource_path)
        if not normalized:
            raise LockServicePreconditionError("Asset path cannot be empty")
        return normalized

    def request_lock(self, resource_path: str) -> LockResult:
        """
        Lock an asset for the current user.

        Succeeds when the asset is free or already held by the current user.

        Args:
            resource_path: Asset path relative to the project root

        Returns:
            LockResult (ACCEPTED, REJECTED with the holder, or a failure outcome)
        """
        path = normalize_resource_path(resource_path)
        try:
            path = self._require_path(resource_path)
            user = self.current_user()
            scope = self.current_scope()

            answer = self.api.lock_asset(scope, path, user)
            logger.info(f"Locked {path} for {user} ({scope}): {answer.message}")
            return LockResult(LockOutcome.ACCEPTED, path, answer.message, holder=answer.holder or user)

        except LockServiceRejectedError as e:
            logger.warning(f"Lock on {path} rejected: {e}")
            return LockResult(LockOutcome.REJECTED, path, str(e), holder=e.holder)
        except LockServiceError as e:
            logger.error(f"Lock on {path} failed: {e}")
            return LockResult(outcome_for(e), path, str(e))

    def release_lock(self, resource_path: str) -> LockResult:
        """
        Release an asset held by the current user.

        Succeeds when the asset is held by the current user or already free;
        fails without side effects when someone else holds it.

        Args:
            resource_path: Asset path relative to the project root

        Returns:
            LockResult
        """
        path = normalize_resource_path(resource_path)
        try:
            path = self._require_path(resource_path)
            user = self.current_user()
            scope = self.current_scope()

            answer = self.api.unlock_asset(scope, path, user)
            logger.info(f"Unlocked {path} for {user} ({scope}): {answer.message}")
            return LockResult(LockOutcome.ACCEPTED, path, answer.message)

        except LockServiceRejectedError as e:
            logger.warning(f"Unlock of {path} rejected: {e}")
            return LockResult(LockOutcome.REJECTED, path, str(e), holder=e.holder)
        except LockServiceError as e:
            logger.error(f"Unlock of {path} failed: {e}")
            return LockResult(outcome_for(e), path, str(e))

    def query_lock_table(self, scope: Optional[Scope] = None) -> TableResult:
        """
        Fetch the complete lock table of a scope.

        Args:
            scope: Scope to query (defaults to the current scope)

        Returns:
            TableResult holding either a complete LockTable or a failure outcome
        """
        try:
            # Identity is required for every call, even read-only ones
            self.current_user()
            if scope is None:
                scope = self.current_scope()

            locks = self.api.get_locked_assets(scope)
            table = LockTable(scope=scope, locks=locks, fetched_at=self.clock())
            logger.debug(f"Fetched {len(table)} lock(s) for {scope}")
            return TableResult(LockOutcome.ACCEPTED, table)

        except LockServiceError as e:
            logger.error(f"Failed to fetch lock table: {e}")
            return TableResult(outcome_for(e), None, str(e))

    def query_single_status(self, resource_path: str) -> StatusResult:
        """
        Fetch the lock status of one asset.

        Args:
            resource_path: Asset path relative to the project root

        Returns:
            StatusResult; status is only set when the outcome is ACCEPTED
        """
        path = normalize_resource_path(resource_path)
        try:
            path = self._require_path(resource_path)
            self.current_user()
            scope = self.current_scope()

            status = self.api.get_lock_status(scope, path)
            return StatusResult(LockOutcome.ACCEPTED, path, status)

        except LockServiceError as e:
            logger.error(f"Error checking lock status for {path}: {e}")
            return StatusResult(outcome_for(e), path, None, str(e))
