"""Predicates for the remote conditions a release run recovers from.

Each condition is decided in exactly one place so callers never inspect
status codes or messages themselves.
"""

from __future__ import annotations

from autorelease.github.http import HttpError

__all__ = [
    "is_not_found",
    "is_reference_exists",
    "is_reference_missing",
    "is_release_exists",
]


def is_not_found(error: HttpError) -> bool:
    return error.status == 404


# The git refs API reports both ref conditions as a bare 422 message with no
# issue list, so these two fall back to matching the message.


def is_reference_exists(error: HttpError) -> bool:
    return error.status == 422 and error.message == "Reference already exists"


def is_reference_missing(error: HttpError) -> bool:
    """Deleting an absent ref answers 422 rather than 404."""
    if is_not_found(error):
        return True
    return error.status == 422 and error.message == "Reference does not exist"


def is_release_exists(error: HttpError) -> bool:
    if error.status != 422:
        return False
    return any(
        issue.resource == "Release" and issue.code == "already_exists" for issue in error.issues
    )
