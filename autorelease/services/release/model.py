from __future__ import annotations

from dataclasses import dataclass

from autorelease.github.remote import PullRequest


@dataclass(frozen=True, slots=True)
class Commit:
    """A classified, non-merge commit from the release range."""

    sha: str
    author: str
    html_url: str
    header: str
    type: str | None
    scope: str | None
    subject: str | None
    is_breaking: bool
    # Sorted ascending by number.
    pull_requests: tuple[PullRequest, ...] = ()


@dataclass(frozen=True, slots=True)
class ReleaseTagPair:
    """The tag being released and the one it follows.

    ``previous`` is None when no earlier release exists and the range starts
    at the beginning of history.
    """

    previous: str | None
    current: str


@dataclass(frozen=True, slots=True)
class ReleaseHandle:
    id: int
    upload_url: str


# Returned in dry-run mode, where no release is created.
DRY_RUN_HANDLE = ReleaseHandle(id=-1, upload_url="")


@dataclass(frozen=True, slots=True)
class ReleaseOutputs:
    tag: str
    prev_tag: str
    release_id: int
    upload_url: str

    def items(self) -> tuple[tuple[str, str], ...]:
        """Output names and values, in export order."""
        return (
            ("tag", self.tag),
            ("prev_tag", self.prev_tag),
            ("release_id", str(self.release_id)),
            ("upload_url", self.upload_url),
        )
