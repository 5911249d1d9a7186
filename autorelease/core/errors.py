"""Error codes for CLI exit status.

These values are used as process exit codes and should remain stable:
- 0: Success
- 1: User error (missing or invalid configuration, non-semver tag)
- 2: Environment error (not running against a tag push)
- 4: Network error (GitHub API failure)
- 5: I/O error (cannot write step outputs)
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
