"""
AssetLocker Client - Notifiers

Sinks for user-visible messages such as auto-unlock summaries.

Author: AssetLocker Project
"""

import logging
import sys

logger = logging.getLogger(__name__)


class LogNotifier:
    """Writes notifications to the log and, optionally, to a console stream."""

    def __init__(self, echo: bool = False, stream=None):
        self.echo = echo
        self.stream = stream

    def notify(self, message: str):
        logger.info(f"[AssetLocker] {message}")
        if self.echo:
            print(message, file=self.stream or sys.stdout)
