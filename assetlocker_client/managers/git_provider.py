"""
AssetLocker Client - Git Provider

Answers the version-control questions the lock core needs: which branch and
remote the project is on, whether an asset has uncommitted changes, and whether
the current commit has reached a remote branch.

Author: AssetLocker Project
"""

import logging
import subprocess
import time
from pathlib import Path
from typing import Callable, List, Optional

from ..exceptions import GitCommandError
from ..models import normalize_resource_path

# Configure logging
logger = logging.getLogger(__name__)

UNKNOWN = "unknown"


class GitProvider:
    """
    Runs git commands in the project root.

    Responsibilities:
    - Report current branch and origin URL (cached for CACHE_TIMEOUT_SECONDS)
    - Detect uncommitted changes to a single asset
    - Detect whether HEAD is contained in any remote-tracking branch
    """

    CACHE_TIMEOUT_SECONDS = 30

    def __init__(self, project_root: Path, clock: Callable[[], float] = time.monotonic,
                 command_timeout: float = 15.0):
        """
        Initialize git provider.

        Args:
            project_root: Working directory for git commands
            clock: Monotonic clock used for the branch/origin cache
            command_timeout: Seconds before a git command is abandoned
        """
        self.project_root = Path(project_root)
        self.clock = clock
        self.command_timeout = command_timeout

        self._cached_branch: Optional[str] = None
        self._cached_origin: Optional[str] = None
        self._branch_updated_at = 0.0
        self._origin_updated_at = 0.0

    def _execute_git_command(self, args: List[str], strip: bool = True) -> Optional[str]:
        """
        Run a git command.

        Args:
            args: Arguments after "git"
            strip: Whether to trim surrounding whitespace from the output

        Returns:
            Command output, or None if git failed or could not be started
        """
        command = ["git"] + list(args)
        logger.debug(f"Running: {' '.join(command)}")

        try:
            completed = subprocess.run(
                command,
                cwd=str(self.project_root),
                capture_output=True,
                text=True,
                timeout=self.command_timeout
            )
        except FileNotFoundError:
            logger.error("git executable not found on PATH")
            return None
        except subprocess.TimeoutExpired:
            logger.error(f"git command timed out after {self.command_timeout}s: {' '.join(args)}")
            return None
        except OSError as e:
            logger.error(f"Failed to run git {' '.join(args)}: {e}")
            return None

        if completed.returncode != 0:
            error_msg = (completed.stderr or "").strip()
            if error_msg:
                logger.warning(f"Git command error: {error_msg}")
            return None

        output = completed.stdout or ""
        return output.strip() if strip else output

    def _is_stale(self, cached_value: Optional[str], updated_at: float, force_refresh: bool) -> bool:
        if cached_value is None or force_refresh:
            return True
        return self.clock() - updated_at > self.CACHE_TIMEOUT_SECONDS

    def get_branch(self, force_refresh: bool = False) -> str:
        """
        Get the current branch name.

        Returns:
            Branch name, or "unknown" if it cannot be determined
        """
        if self._is_stale(self._cached_branch, self._branch_updated_at, force_refresh):
            output = self._execute_git_command(["rev-parse", "--abbrev-ref", "HEAD"])
            self._cached_branch = output if output else UNKNOWN
            self._branch_updated_at = self.clock()

        return self._cached_branch

    def get_origin(self, force_refresh: bool = False) -> str:
        """
        Get the URL of the "origin" remote.

        Returns:
            Remote URL, or "unknown" if it cannot be determined
        """
        if self._is_stale(self._cached_origin, self._origin_updated_at, force_refresh):
            output = self._execute_git_command(["config", "--get", "remote.origin.url"])
            self._cached_origin = output if output else UNKNOWN
            self._origin_updated_at = self.clock()

        return self._cached_origin

    def get_repo_root(self) -> Optional[Path]:
        output = self._execute_git_command(["rev-parse", "--show-toplevel"])
        if not output:
            return None
        return Path(output)

    def to_repo_relative_path(self, resource_path: str) -> str:
        """
        Convert a project-relative asset path into a path relative to the repository root.

        The project root may be a subdirectory of the repository (a Unity project
        inside a larger repo), in which case the prefix is added.

        Args:
            resource_path: Normalized asset path relative to the project root

        Returns:
            Repository-relative path with forward slashes
        """
        repo_root = self.get_repo_root()
        if repo_root is None:
            return resource_path

        absolute = (self.project_root / resource_path).resolve()
        try:
            relative = absolute.relative_to(repo_root.resolve())
        except ValueError:
            logger.warning(f"Path is outside git repository: {absolute}")
            return resource_path

        return relative.as_posix()

    def has_local_changes(self, resource_path: str) -> bool:
        """
        Check whether an asset has uncommitted changes (staged, unstaged or untracked).

        A dirty submodule or untracked directory containing the asset also counts.

        Args:
            resource_path: Asset path relative to the project root

        Returns:
            True if git reports a change for the asset

        Raises:
            GitCommandError: If git status cannot be read
        """
        normalized = normalize_resource_path(resource_path)
        if not normalized:
            return False

        repo_relative = self.to_repo_relative_path(normalized)

        output = self._execute_git_command(["status", "--porcelain", "-z", "-uall"], strip=False)
        if output is None:
            raise GitCommandError(f"Could not read git status while checking {normalized}")

        target = repo_relative.casefold()
        for changed_path in parse_porcelain_paths(output):
            changed = changed_path.rstrip("/").casefold()
            if target == changed or target.startswith(changed + "/"):
                logger.debug(f"{normalized} has local changes ({changed_path})")
                return True

        return False

    def is_pushed_to_remote(self) -> bool:
        """
        Check whether the current commit is contained in at least one remote-tracking branch.

        Returns:
            True if pushed, False if not pushed or if it cannot be determined
        """
        local_commit = self._execute_git_command(["rev-parse", "HEAD"])
        if not local_commit:
            return False

        remote_branches = self._execute_git_command(["branch", "-r", "--contains", local_commit])
        return bool(remote_branches)


def parse_porcelain_paths(output: str) -> List[str]:
    """
    Extract the paths from "git status --porcelain -z" output.

    Each entry is "XY path"; renames and copies are followed by an extra
    entry holding the original path, which is reported as well.

    Args:
        output: Raw NUL-separated porcelain output

    Returns:
        List of repository-relative paths
    """
    paths = []
    entries = output.split("\0")
    index = 0

    while index < len(entries):
        entry = entries[index]
        index += 1
        if len(entry) < 4:
            continue

        status = entry[:2]
        paths.append(entry[3:])

        if status[0] in ("R", "C") and index < len(entries):
            paths.append(entries[index])
            index += 1

    return paths
