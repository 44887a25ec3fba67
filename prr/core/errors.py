"""Exit codes for CLI commands.

The numeric values are process exit codes and must stay stable:
- 0: Success
- 1: User error (bad input, invalid configuration)
- 2: Environment error (gh missing, not authenticated, not a git repo)
- 4: Network error (GitHub API unreachable)
- 5: I/O error (file not found, permission denied)
"""

from enum import IntEnum

__all__ = ["ErrorCode"]


class ErrorCode(IntEnum):
    """Exit codes for CLI commands."""

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    NETWORK_ERROR = 4
    IO_ERROR = 5

