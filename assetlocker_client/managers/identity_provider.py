"""
AssetLocker Client - Identity Provider

Supplies the user name sent with every lock request.

Author: AssetLocker Project
"""

import logging

from ..exceptions import LockServicePreconditionError

logger = logging.getLogger(__name__)


class IdentityProvider:
    """Reads and stores the current user's name in the client configuration."""

    def __init__(self, config_manager):
        self.config = config_manager

    def current_user(self) -> str:
        """
        Get the configured user name.

        Returns:
            Non-empty user name

        Raises:
            LockServicePreconditionError: If no user name is configured
        """
        name = self.config.get("username")
        if not name or not str(name).strip():
            raise LockServicePreconditionError(
                "User name is not configured - run 'assetlocker set-user <name>' first"
            )
        return str(name).strip()

    def has_user(self) -> bool:
        name = self.config.get("username")
        return bool(name and str(name).strip())

    def set_user(self, name: str):
        """
        Store a new user name.

        Raises:
            LockServicePreconditionError: If name is empty
        """
        name = (name or "").strip()
        if not name:
            raise LockServicePreconditionError("User name cannot be empty")

        self.config.set("username", name)
        logger.info(f"User name set to: {name}")
