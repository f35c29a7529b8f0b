"""
AssetLocker Client - Lock Models

Contains the data model shared by the lock client, the status cache,
the save gate and the auto-unlock engine.

Author: AssetLocker Project
"""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import PurePosixPath
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional


class LockOutcome(Enum):
    """
    Enum representing the outcome of a call against the lock service.

    States:
    - ACCEPTED: The service confirmed the request (or returned the data asked for)
    - REJECTED: The service refused the request (asset held by another user)
    - INDETERMINATE: Lock state is unknown (unreachable, timeout, server error)
    - PRECONDITION: A local requirement failed before any network call
    - UNEXPECTED: The service answered with something that cannot be decoded
    """
    ACCEPTED = "accepted"
    REJECTED = "rejected"
    INDETERMINATE = "indeterminate"
    PRECONDITION = "precondition"
    UNEXPECTED = "unexpected"


@dataclass(frozen=True)
class Scope:
    """Coordination namespace that qualifies every lock request."""
    origin: str
    branch: str

    def __str__(self) -> str:
        return f"{self.origin}@{self.branch}"


@dataclass(frozen=True)
class LockStatus:
    """Lock state of a single asset, derived from a lock table or a point query."""
    locked: bool
    holder: Optional[str] = None

    def is_held_by(self, user: str) -> bool:
        return self.locked and self.holder == user


UNLOCKED = LockStatus(locked=False)


@dataclass(frozen=True)
class LockEntry:
    resource_path: str
    holder: str


@dataclass(frozen=True)
class LockTable:
    """
    Immutable snapshot of every lock in one scope.

    fetched_at is the clock reading taken when the snapshot was received,
    so the owner can report the age of the data.
    """
    scope: Scope
    locks: Mapping[str, str]
    fetched_at: float = 0.0

    def __post_init__(self):
        # Freeze a private copy so callers can never mutate a published snapshot
        object.__setattr__(self, "locks", MappingProxyType(dict(self.locks)))

    def get_status(self, resource_path: str) -> LockStatus:
        holder = self.locks.get(resource_path)
        if holder is None:
            return UNLOCKED
        return LockStatus(locked=True, holder=holder)

    def held_by(self, user: str) -> List[str]:
        """Return the asset paths held by user, sorted."""
        return sorted(path for path, holder in self.locks.items() if holder == user)

    def entries(self) -> List[LockEntry]:
        return [LockEntry(path, holder) for path, holder in sorted(self.locks.items())]

    def __len__(self) -> int:
        return len(self.locks)

    def __contains__(self, resource_path: object) -> bool:
        return resource_path in self.locks


@dataclass(frozen=True)
class LockResult:
    """Result of a lock or unlock request."""
    outcome: LockOutcome
    resource_path: str
    message: str = ""
    holder: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome is LockOutcome.ACCEPTED


@dataclass(frozen=True)
class StatusResult:
    """
    Three-valued result of a single status query.

    status is only set when outcome is ACCEPTED; any other outcome means the
    lock state is unknown and must not be read as free or taken.
    """
    outcome: LockOutcome
    resource_path: str
    status: Optional[LockStatus] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.outcome is LockOutcome.ACCEPTED


@dataclass(frozen=True)
class TableResult:
    """Result of a full lock table query."""
    outcome: LockOutcome
    table: Optional[LockTable] = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.outcome is LockOutcome.ACCEPTED


@dataclass
class SaveGateResult:
    """Paths allowed to be saved, and rejected paths mapped to the reason."""
    allowed: List[str] = field(default_factory=list)
    rejected: Dict[str, str] = field(default_factory=dict)
    implicitly_locked: List[str] = field(default_factory=list)

    @property
    def all_allowed(self) -> bool:
        return not self.rejected


@dataclass
class AutoUnlockReport:
    """Summary of one auto-unlock scan."""
    released: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    failed: Dict[str, str] = field(default_factory=dict)
    ran: bool = True


def normalize_resource_path(path: str) -> str:
    """
    Normalize an asset path to the form used as a lock key.

    Converts backslashes to forward slashes and removes leading separators
    and "./" segments, so "Assets\\Hero.prefab", "/Assets/Hero.prefab" and
    "./Assets/Hero.prefab" all map to "Assets/Hero.prefab".

    Args:
        path: Asset path as provided by the caller

    Returns:
        Normalized path, or empty string if nothing is left
    """
    if path is None:
        return ""

    cleaned = str(path).replace("\\", "/").strip()
    cleaned = cleaned.lstrip("/")
    if not cleaned:
        return ""

    normalized = str(PurePosixPath(cleaned))
    if normalized == ".":
        return ""
    return normalized
