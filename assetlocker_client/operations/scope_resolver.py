"""
AssetLocker Client - Scope Resolver

Derives the origin/branch namespace that qualifies every lock request.

Author: AssetLocker Project
"""

import logging

from ..models import Scope

logger = logging.getLogger(__name__)


class ScopeResolver:
    """Builds the current Scope from the version-control provider on every call."""

    def __init__(self, git_provider):
        self.git = git_provider
        self._last_scope = None

    def current_scope(self) -> Scope:
        scope = Scope(origin=self.git.get_origin(), branch=self.git.get_branch())
        if scope != self._last_scope:
            if self._last_scope is not None:
                logger.info(f"Lock scope changed from {self._last_scope} to {scope}")
            self._last_scope = scope
        return scope
