"""
AssetLocker Client - Locker Service

Wires the lock client, status cache, save gate and auto-unlock engine to the
configured lock service, git repository and identity, and owns their
start/shutdown sequence.

Author: AssetLocker Project
"""

import logging
import time
from typing import Callable, Optional

from ..api import LockServiceAPI
from ..managers import GitProvider, IdentityProvider
from ..models import AutoUnlockReport, LockResult
from .auto_unlock import AutoUnlockEngine
from .lock_client import LockClient
from .notifier import LogNotifier
from .save_gate import SaveGate
from .scheduler import PeriodicScheduler
from .scope_resolver import ScopeResolver
from .status_cache import LockStatusCache

# Configure logging
logger = logging.getLogger(__name__)


class LockerService:
    """
    One lock coordination session for a project.

    Responsibilities:
    - Build every component from the client configuration
    - Tick the status cache and auto-unlock engine in the background
    - Refresh the cache after lock changes while running (one-shot commands leave no background work)
    - Run the final auto-unlock pass on shutdown
    """

    def __init__(self, config_manager, api=None, git_provider=None, notifier=None,
                 runner=None, scheduler=None, clock: Callable[[], float] = time.monotonic):
        """
        Initialize the service.

        Args:
            config_manager: Loaded ConfigManager
            api: Optional LockServiceAPI (built from config when omitted)
            git_provider: Optional GitProvider (built for the project root when omitted)
            notifier: Sink for auto-unlock summaries (LogNotifier by default)
            runner: Task runner shared by the cache and auto-unlock engine
            scheduler: Optional PeriodicScheduler
            clock: Monotonic clock shared by all components
        """
        self.config = config_manager
        self.project_root = config_manager.get_project_root()
        self.shutdown_timeout = float(config_manager.get("shutdown_timeout_seconds", 30))

        self.api = api if api is not None else LockServiceAPI(
            config_manager.get_service_url(),
            verify_ssl=config_manager.get("verify_ssl", True),
            timeout=float(config_manager.get("request_timeout_seconds", 10))
        )
        self.git = git_provider if git_provider is not None else GitProvider(self.project_root, clock=clock)
        self.identity = IdentityProvider(config_manager)
        self.scope_resolver = ScopeResolver(self.git)

        self.lock_client = LockClient(self.api, self.scope_resolver, self.identity, clock=clock)
        self.status_cache = LockStatusCache(
            self.lock_client,
            runner=runner,
            clock=clock,
            refresh_interval_seconds=float(config_manager.get("refresh_interval_seconds", 10))
        )
        # The cache is attached to the gate and the engine only while running
        self.save_gate = SaveGate(
            self.lock_client,
            guarded_extensions=config_manager.get_guarded_extensions()
        )
        self.auto_unlock = AutoUnlockEngine(
            self.lock_client,
            self.git,
            self.project_root,
            notifier=notifier if notifier is not None else LogNotifier(),
            runner=runner,
            clock=clock,
            interval_seconds=float(config_manager.get("auto_unlock_interval_seconds", 60))
        )

        self.scheduler = scheduler if scheduler is not None else PeriodicScheduler(clock=clock)
        self.scheduler.add_job(self.status_cache)
        self.scheduler.add_job(self.auto_unlock)
        self._started = False

    def start(self):
        """Start background refresh and auto-unlock ticks."""
        logger.info(f"Starting lock coordination for {self.project_root} against {self.api.base_url}")
        self._attach_cache(True)
        self.scheduler.start()
        self._started = True

    def shutdown(self) -> Optional[AutoUnlockReport]:
        """
        Stop background work and run the final auto-unlock pass.

        In-flight refreshes are abandoned; the final pass runs to completion or
        until shutdown_timeout_seconds elapse.

        Returns:
            Report of the final pass, or None if the service was never started
        """
        if not self._started:
            self.api.close()
            return None

        logger.info("Shutting down lock coordination")
        self.scheduler.stop(timeout=self.scheduler.tick_seconds * 2)
        self._started = False
        self._attach_cache(False)

        report = self.auto_unlock.run_shutdown_pass(self.shutdown_timeout)
        if report.released:
            logger.info(f"Auto-unlocked {len(report.released)} asset(s) on exit")

        self.api.close()
        return report

    @property
    def is_running(self) -> bool:
        return self._started

    def _attach_cache(self, enabled: bool):
        """Hand the status cache to the save gate and auto-unlock engine, or take it back."""
        cache = self.status_cache if enabled else None
        self.save_gate.status_cache = cache
        self.auto_unlock.status_cache = cache

    def lock(self, resource_path: str) -> LockResult:
        result = self.lock_client.request_lock(resource_path)
        if result.ok and self._started:
            self.status_cache.request_refresh()
        return result

    def unlock(self, resource_path: str) -> LockResult:
        result = self.lock_client.release_lock(resource_path)
        if result.ok and self._started:
            self.status_cache.request_refresh()
        return result

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_value, traceback):
        self.shutdown()
        return False
