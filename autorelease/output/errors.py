"""Error presentation utilities.

Centralized error formatting and exit code mapping for consistent UX.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from autorelease.core.config import ConfigError
from autorelease.core.errors import ErrorCode
from autorelease.output.console import Style
from autorelease.services.release.errors import (
    InvalidVersion,
    NotATagRef,
    RangeNotFound,
    ReleaseError,
    RemoteFailed,
)

if TYPE_CHECKING:
    from autorelease.output.console import ConsoleProtocol

__all__ = ["print_config_error", "print_release_error", "release_error_exit_code"]


def print_config_error(error: ConfigError, console: ConsoleProtocol) -> None:
    console.error(error.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)


def print_release_error(error: ReleaseError, console: ConsoleProtocol) -> None:
    """Print release error to console with appropriate formatting."""
    match error:
        case NotATagRef(ref=ref):
            console.error(f"not a tag ref: {ref or '(empty)'}")
            console.print(
                "hint: run on a tag push, or set auto_release_tag for a rolling release",
                Style.DIM,
            )
        case InvalidVersion(tag=tag):
            console.error(f"tag is not a semantic version: {tag}")
        case RangeNotFound(ref=ref):
            console.error(f"commit range base not found: {ref}")
        case RemoteFailed(operation=operation, error=http_error):
            console.error(f"{operation} failed: {http_error}")
            for issue in http_error.issues:
                field = f" ({issue.field})" if issue.field else ""
                console.print(f"  {issue.resource}: {issue.code}{field}", Style.DIM)


def release_error_exit_code(error: ReleaseError) -> int:
    """Get exit code for a release error."""
    match error:
        case NotATagRef():
            return int(ErrorCode.ENV_ERROR)
        case InvalidVersion():
            return int(ErrorCode.USER_ERROR)
        case RangeNotFound() | RemoteFailed():
            return int(ErrorCode.NETWORK_ERROR)
