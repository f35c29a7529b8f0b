"""
AssetLocker Client - CLI Mode Module

Implements the command-line interface: explicit lock/unlock, status queries,
the save gate for editor hooks, auto-unlock and the long-running watch mode.
Logs to a timestamped file next to the configuration.

Author: AssetLocker Project
"""

import sys
import logging
import signal
import threading
from pathlib import Path
from datetime import datetime
from typing import Dict, List, Optional

from .api import LockServiceAPI
from .managers import ConfigManager, IdentityProvider
from .exceptions import LockServiceError, LockServicePreconditionError
from .models import LockOutcome
from .operations import LockerService, LogNotifier


# Exit codes
EXIT_SUCCESS = 0
EXIT_FAILURE = 1
EXIT_CONFIG_ERROR = 2
EXIT_IDENTITY_ERROR = 3

LOG_DIR_NAME = ".assetlocker"

# Signals that end watch mode through the normal shutdown path
STOP_SIGNALS = tuple(getattr(signal, name) for name in ("SIGTERM", "SIGHUP") if hasattr(signal, name))


def setup_cli_logging(config_manager: ConfigManager) -> Path:
    """
    Setup logging for CLI mode with timestamped log file.

    Creates log file with format: assetlocker-YYYY-MM-DD-HH-MM-SS.log
    in ".assetlocker/logs" next to the configuration file.

    Args:
        config_manager: ConfigManager instance for log settings

    Returns:
        Path to the created log file
    """
    # Get log level from config
    log_level = config_manager.get("log_level", "INFO")

    # Create timestamped log filename
    timestamp = datetime.now().strftime("%Y-%m-%d-%H-%M-%S")
    log_filename = f"assetlocker-{timestamp}.log"

    # Create logs subdirectory if it doesn't exist
    log_dir = config_manager.base_dir / LOG_DIR_NAME / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)

    log_file = log_dir / log_filename

    # Console only shows problems; command output is printed separately
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(logging.WARNING)

    # Configure logging
    logging.basicConfig(
        level=getattr(logging, str(log_level).upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.FileHandler(log_file, encoding='utf-8'),
            console_handler
        ]
    )

    logger = logging.getLogger(__name__)
    logger.info(f"AssetLocker CLI - Log file: {log_file}")
    logger.info(f"Log level: {log_level}")

    return log_file


def cleanup_old_logs(config_manager: ConfigManager, current_log: Path):
    """
    Delete log files older than retention period.

    Args:
        config_manager: ConfigManager instance for retention settings
        current_log: Path to current log file (don't delete this)
    """
    logger = logging.getLogger(__name__)
    retention_days = config_manager.get("log_retention_days", 30)

    if retention_days <= 0:
        return  # Retention disabled

    log_dir = current_log.parent
    cutoff_time = datetime.now().timestamp() - (retention_days * 86400)

    deleted_count = 0
    for log_file in log_dir.glob("assetlocker-*.log"):
        if log_file == current_log:
            continue  # Don't delete current log

        try:
            if log_file.stat().st_mtime < cutoff_time:
                log_file.unlink()
                deleted_count += 1
        except OSError as e:
            logger.warning(f"Failed to delete old log file {log_file}: {e}")

    if deleted_count > 0:
        logger.info(f"Deleted {deleted_count} old log file(s)")


def exit_code_for(outcome: LockOutcome) -> int:
    if outcome is LockOutcome.ACCEPTED:
        return EXIT_SUCCESS
    if outcome is LockOutcome.PRECONDITION:
        return EXIT_IDENTITY_ERROR
    return EXIT_FAILURE


# ==================== Commands ====================

def cmd_lock(service: LockerService, paths: List[str]) -> int:
    exit_code = EXIT_SUCCESS
    for path in paths:
        result = service.lock(path)
        if result.ok:
            print(f"Locked: {result.resource_path} ({result.message})")
        else:
            print(f"Lock failed: {result.resource_path}: {result.message}")
            exit_code = max(exit_code, exit_code_for(result.outcome))
    return exit_code


def cmd_unlock(service: LockerService, paths: List[str]) -> int:
    exit_code = EXIT_SUCCESS
    for path in paths:
        result = service.unlock(path)
        if result.ok:
            print(f"Unlocked: {result.resource_path} ({result.message})")
        else:
            print(f"Unlock failed: {result.resource_path}: {result.message}")
            exit_code = max(exit_code, exit_code_for(result.outcome))
    return exit_code


def cmd_status(service: LockerService, paths: List[str]) -> int:
    exit_code = EXIT_SUCCESS
    for path in paths:
        result = service.lock_client.query_single_status(path)
        if not result.ok:
            print(f"{result.resource_path}: status indeterminate ({result.message})")
            exit_code = max(exit_code, exit_code_for(result.outcome))
            continue

        status = result.status
        if not status.locked:
            print(f"{result.resource_path}: unlocked")
        elif status.is_held_by(service.identity.current_user()):
            print(f"{result.resource_path}: locked by you")
        else:
            print(f"{result.resource_path}: locked by {status.holder}")
    return exit_code


def cmd_list(service: LockerService) -> int:
    if not service.status_cache.refresh_now():
        print(f"Could not fetch locks: {service.status_cache.last_error}")
        return EXIT_FAILURE

    table = service.status_cache.snapshot()
    current_user = service.identity.current_user()
    print(f"Locks on {table.scope} ({len(table)}):")
    for entry in table.entries():
        marker = "*" if entry.holder == current_user else " "
        print(f" {marker} {entry.resource_path}  [{entry.holder}]")
    return EXIT_SUCCESS


def cmd_save(service: LockerService, paths: List[str]) -> int:
    result = service.save_gate.filter_save_batch(paths)
    for path in result.allowed:
        print(f"OK      {path}")
    for path, reason in result.rejected.items():
        print(f"BLOCKED {path}: {reason}")
    return EXIT_SUCCESS if result.all_allowed else EXIT_FAILURE


def cmd_auto_unlock(service: LockerService) -> int:
    report = service.auto_unlock.run_scan()
    if not report.ran:
        print("Auto-unlock check did not run (see log for details)")
        return EXIT_FAILURE
    if not report.released:
        print("No locks were eligible for auto-unlock")
    for path, reason in report.failed.items():
        print(f"Could not auto-unlock {path}: {reason}")
    return EXIT_SUCCESS


def install_stop_handlers(stop_event: threading.Event) -> Dict[int, object]:
    """
    Route termination signals (SIGTERM, and SIGHUP where available) to stop_event.

    Signal handlers can only be installed from the main thread; elsewhere
    nothing is installed.

    Returns:
        Previous handlers, for restore_signal_handlers
    """
    logger = logging.getLogger(__name__)
    if threading.current_thread() is not threading.main_thread():
        return {}

    def handle_stop_signal(signum, frame):
        logger.info(f"Received signal {signum}, stopping watch")
        stop_event.set()

    previous = {}
    for signum in STOP_SIGNALS:
        previous[signum] = signal.signal(signum, handle_stop_signal)
    return previous


def restore_signal_handlers(previous: Dict[int, object]):
    for signum, handler in previous.items():
        if handler is not None:
            signal.signal(signum, handler)


def cmd_ping(config_manager: ConfigManager) -> int:
    api = LockServiceAPI(
        config_manager.get_service_url(),
        verify_ssl=config_manager.get("verify_ssl", True),
        timeout=float(config_manager.get("request_timeout_seconds", 10))
    )
    try:
        health = api.check_health()
    finally:
        api.close()

    print(f"{api.base_url}: {health.get('status', 'unknown')} (version {health.get('version', 'unknown')})")
    return EXIT_SUCCESS


def cmd_watch(service: LockerService, stop_event: Optional[threading.Event] = None) -> int:
    logger = logging.getLogger(__name__)
    stop_event = stop_event or threading.Event()
    previous_handlers = install_stop_handlers(stop_event)

    service.start()
    print("Watching locks - press Ctrl+C to stop")
    try:
        while not stop_event.wait(1.0):
            pass
    except KeyboardInterrupt:
        logger.info("Watch stopped by user (Ctrl+C)")
    finally:
        try:
            report = service.shutdown()
            if report is not None and report.released:
                print(f"Auto-unlocked {len(report.released)} asset(s) on exit")
        finally:
            restore_signal_handlers(previous_handlers)
    return EXIT_SUCCESS


def run_cli_command(command: str, paths: Optional[List[str]] = None, user_name: Optional[str] = None,
                    config_dir: Optional[str] = None) -> int:
    """
    Execute a CLI command.

    Process:
    1. Load configuration
    2. Setup logging to timestamped file
    3. Handle identity commands, or build the locker service
    4. Execute requested command
    5. Return appropriate exit code

    Args:
        command: Command name (lock, unlock, status, list, save, auto-unlock, watch, ping, set-user, whoami)
        paths: Asset paths for lock/unlock/status/save
        user_name: New user name for set-user
        config_dir: Directory holding assetlocker.json (defaults to the current directory)

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    logger = None
    paths = paths or []
    service = None

    try:
        config_mgr = ConfigManager(Path(config_dir) if config_dir else None)
        config_mgr.load_config()
        log_file = setup_cli_logging(config_mgr)
        logger = logging.getLogger(__name__)

        # Cleanup old logs
        cleanup_old_logs(config_mgr, log_file)

        logger.info(f"Starting AssetLocker CLI: {command}")

        identity = IdentityProvider(config_mgr)
        if command == "set-user":
            identity.set_user(user_name)
            print(f"User name set to: {identity.current_user()}")
            return EXIT_SUCCESS
        if command == "whoami":
            print(identity.current_user())
            return EXIT_SUCCESS
        if command == "ping":
            return cmd_ping(config_mgr)

        if not identity.has_user():
            logger.error("No user name configured")
            print("No user name configured. Run 'assetlocker set-user <name>' first.", file=sys.stderr)
            return EXIT_IDENTITY_ERROR

        service = LockerService(config_mgr, notifier=LogNotifier(echo=True))

        if command == "lock":
            return cmd_lock(service, paths)
        elif command == "unlock":
            return cmd_unlock(service, paths)
        elif command == "status":
            return cmd_status(service, paths)
        elif command == "list":
            return cmd_list(service)
        elif command == "save":
            return cmd_save(service, paths)
        elif command == "auto-unlock":
            return cmd_auto_unlock(service)
        elif command == "watch":
            exit_code = cmd_watch(service)
            service = None  # watch already shut the service down
            return exit_code
        else:
            logger.error(f"Unknown command: {command}")
            return EXIT_FAILURE

    except LockServicePreconditionError as e:
        if logger:
            logger.error(f"Precondition failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_IDENTITY_ERROR

    except LockServiceError as e:
        if logger:
            logger.error(f"Lock service error: {e}")
        print(f"Lock service error: {e}", file=sys.stderr)
        return EXIT_FAILURE

    except (OSError, ValueError) as e:
        if logger:
            logger.error(f"Configuration error: {e}")
        print(f"Configuration error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR

    except KeyboardInterrupt:
        if logger:
            logger.warning("Operation cancelled by user (Ctrl+C)")
        else:
            print("\nOperation cancelled by user", file=sys.stderr)
        return EXIT_FAILURE

    except Exception as e:
        if logger:
            logger.exception(f"Unexpected error: {e}")
        else:
            print(f"Unexpected error: {e}", file=sys.stderr)
        return EXIT_FAILURE

    finally:
        if service is not None:
            service.api.close()
