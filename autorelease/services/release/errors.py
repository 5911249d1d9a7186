from __future__ import annotations

from dataclasses import dataclass

from autorelease.github.http import HttpError


@dataclass(frozen=True, slots=True)
class NotATagRef:
    """Explicit mode was started from something other than a tag push."""

    ref: str


@dataclass(frozen=True, slots=True)
class InvalidVersion:
    """The tag being released is not a semantic version."""

    tag: str


@dataclass(frozen=True, slots=True)
class RangeNotFound:
    """The base of the commit range does not exist on the remote.

    Recovered by comparing from the start of history instead.
    """

    ref: str


@dataclass(frozen=True, slots=True)
class RemoteFailed:
    operation: str
    error: HttpError


ReleaseError = NotATagRef | InvalidVersion | RangeNotFound | RemoteFailed
