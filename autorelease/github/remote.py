"""The remote operations a release run needs from a source-control host.

Refs are named the way the git data API names them, without the ``refs/``
prefix: ``heads/main``, ``tags/v1.2.0``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol

from autorelease.core.result import Result
from autorelease.github.http import HttpError

__all__ = [
    "GitHubRemote",
    "PullRequest",
    "ReleaseDraft",
    "RemoteCommit",
    "RemoteRelease",
]


@dataclass(frozen=True, slots=True)
class RemoteCommit:
    sha: str
    message: str
    author_name: str | None
    html_url: str


@dataclass(frozen=True, slots=True)
class PullRequest:
    number: int
    html_url: str


@dataclass(frozen=True, slots=True)
class ReleaseDraft:
    """Fields sent when creating or updating a release."""

    tag_name: str
    name: str
    body: str
    draft: bool
    prerelease: bool


@dataclass(frozen=True, slots=True)
class RemoteRelease:
    id: int
    tag_name: str
    name: str
    body: str
    draft: bool
    prerelease: bool
    upload_url: str


class GitHubRemote(Protocol):
    def get_ref(self, ref: str) -> Result[str, HttpError]:
        """Resolve a ref to the sha it points at (404 when absent)."""
        ...

    def create_ref(self, ref: str, sha: str) -> Result[None, HttpError]:
        """Create a ref (422 "Reference already exists" when present)."""
        ...

    def update_ref(self, ref: str, sha: str, *, force: bool = True) -> Result[None, HttpError]:
        ...

    def delete_ref(self, ref: str) -> Result[None, HttpError]:
        ...

    def list_tags(self) -> Result[list[str], HttpError]:
        """All tag names, across every page."""
        ...

    def compare_commits(self, base: str, head: str) -> Result[list[RemoteCommit], HttpError]:
        """Commits in ``base...head``, oldest first (404 when base is unknown)."""
        ...

    def list_commits(self, head: str) -> Result[list[RemoteCommit], HttpError]:
        """Every commit reachable from head, oldest first."""
        ...

    def list_pull_requests(self, sha: str) -> Result[list[PullRequest], HttpError]:
        ...

    def get_release_by_tag(self, tag: str) -> Result[RemoteRelease, HttpError]:
        """The published release for tag (404 when absent or still a draft)."""
        ...

    def list_releases(self) -> Result[list[RemoteRelease], HttpError]:
        """Every release, drafts included, across every page."""
        ...

    def create_release(self, draft: ReleaseDraft) -> Result[RemoteRelease, HttpError]:
        ...

    def update_release(
        self, release_id: int, draft: ReleaseDraft
    ) -> Result[RemoteRelease, HttpError]:
        ...

    def delete_release(self, release_id: int) -> Result[None, HttpError]:
        ...
