"""
AssetLocker Client - Scheduler Module

Background tick loop and task runner shared by the status cache and the
auto-unlock engine.

A single scheduler thread calls tick(now) on every registered job. Jobs never
do network work on that thread; they hand it to a task runner so a slow
request cannot delay other jobs.

Author: AssetLocker Project
"""

import logging
import threading
import time
from typing import Callable, List, Optional

# Configure logging
logger = logging.getLogger(__name__)


class IntervalTimer:
    """Tracks when a periodic job is next due. A new timer is due immediately."""

    def __init__(self, interval_seconds: float):
        self.interval_seconds = interval_seconds
        self._next_due: Optional[float] = None

    def is_due(self, now: float) -> bool:
        return self._next_due is None or now >= self._next_due

    def reset(self, now: float):
        self._next_due = now + self.interval_seconds


class ThreadTaskRunner:
    """Runs each submitted task on its own daemon thread."""

    def submit(self, task: Callable[[], None], name: Optional[str] = None) -> threading.Thread:
        thread = threading.Thread(target=task, name=name, daemon=True)
        thread.start()
        return thread


class PeriodicScheduler:
    """
    Cooperative tick loop.

    Responsibilities:
    - Call tick(now) on every registered job at a fixed cadence
    - Keep ticking when a job raises (the error is logged)
    - Stop promptly on shutdown
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic, tick_seconds: float = 1.0):
        """
        Initialize scheduler.

        Args:
            clock: Monotonic clock passed to jobs
            tick_seconds: Delay between ticks
        """
        self.clock = clock
        self.tick_seconds = tick_seconds
        self._jobs: List = []
        self._stop_event = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def add_job(self, job):
        """Register an object exposing tick(now)."""
        self._jobs.append(job)

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def tick(self):
        now = self.clock()
        for job in list(self._jobs):
            try:
                job.tick(now)
            except Exception:
                logger.exception(f"Scheduled job {type(job).__name__} failed")

    def _run(self):
        logger.debug("Scheduler started")
        self.tick()
        while not self._stop_event.wait(self.tick_seconds):
            self.tick()
        logger.debug("Scheduler stopped")

    def start(self):
        if self.is_running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name="assetlocker-scheduler", daemon=True)
        self._thread.start()

    def stop(self, timeout: Optional[float] = None):
        """Stop ticking. Tasks already handed to a runner are not waited for."""
        self._stop_event.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout)
        self._thread = None
