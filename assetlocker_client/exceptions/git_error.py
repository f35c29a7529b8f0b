"""
AssetLocker Client - Git Command Error Exception

Exception raised when a git command needed for a correctness decision fails.

Author: AssetLocker Project
"""


class GitCommandError(Exception):
    """Exception for failed git invocations."""
    pass
