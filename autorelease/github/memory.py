"""In-memory ``GitHubRemote`` for tests and local rehearsal.

Models a single linear branch history plus refs, pull requests and
releases, and answers with the same status codes and messages as the REST
API for the conditions a release run cares about.
"""

from __future__ import annotations

import hashlib
from dataclasses import replace

from autorelease.core.result import Err, Ok, Result
from autorelease.github.http import HttpError, ValidationIssue
from autorelease.github.remote import PullRequest, ReleaseDraft, RemoteCommit, RemoteRelease

__all__ = ["InMemoryRemote", "MUTATING_OPERATIONS"]

MUTATING_OPERATIONS = frozenset(
    {"create_ref", "update_ref", "delete_ref", "create_release", "update_release", "delete_release"}
)


def _not_found(what: str) -> HttpError:
    return HttpError(url=f"memory://{what}", status=404, message="Not Found")


def _unprocessable(what: str, message: str) -> HttpError:
    return HttpError(url=f"memory://{what}", status=422, message=message)


class InMemoryRemote:
    """A fake repository implementing ``GitHubRemote``.

    Usage:
        remote = InMemoryRemote(branch="main")
        sha = remote.add_commit("feat: add X", author="Ada")
        remote.add_tag("v1.0.0", sha)
    """

    def __init__(self, *, branch: str = "master", owner: str = "octo", repo: str = "demo") -> None:
        self.branch = branch
        self.slug = f"{owner}/{repo}"
        self.web_base = f"https://github.com/{self.slug}"
        self.history: list[RemoteCommit] = []
        self.refs: dict[str, str] = {}
        self.pulls: dict[str, list[PullRequest]] = {}
        self.releases: dict[str, RemoteRelease] = {}
        self.failures: dict[str, HttpError] = {}
        self.calls: list[str] = []
        self._next_release_id = 1000

    # -- test setup ---------------------------------------------------------

    def add_commit(
        self,
        message: str,
        *,
        author: str | None = "Octo Cat",
        pull_numbers: tuple[int, ...] = (),
    ) -> str:
        """Append a commit to the branch and move its head ref."""
        seed = f"{len(self.history)}:{message}".encode()
        sha = hashlib.sha1(seed).hexdigest()
        self.history.append(
            RemoteCommit(
                sha=sha,
                message=message,
                author_name=author,
                html_url=f"{self.web_base}/commit/{sha}",
            )
        )
        self.pulls[sha] = [
            PullRequest(number=n, html_url=f"{self.web_base}/pull/{n}") for n in pull_numbers
        ]
        self.refs[f"heads/{self.branch}"] = sha
        return sha

    def add_tag(self, name: str, sha: str) -> None:
        self.refs[f"tags/{name}"] = sha

    def fail(self, operation: str, error: HttpError) -> None:
        """Make every later call to ``operation`` answer with error."""
        self.failures[operation] = error

    @property
    def mutations(self) -> list[str]:
        return [c for c in self.calls if c in MUTATING_OPERATIONS]

    def _enter(self, operation: str) -> HttpError | None:
        self.calls.append(operation)
        return self.failures.get(operation)

    def _index_of(self, ref: str) -> int | None:
        sha = self.refs.get(f"tags/{ref}") or self.refs.get(f"heads/{ref}") or ref
        for i, commit in enumerate(self.history):
            if commit.sha == sha:
                return i
        return None

    # -- refs ---------------------------------------------------------------

    def get_ref(self, ref: str) -> Result[str, HttpError]:
        if (failure := self._enter("get_ref")) is not None:
            return Err(failure)
        if ref not in self.refs:
            return Err(_not_found(ref))
        return Ok(self.refs[ref])

    def create_ref(self, ref: str, sha: str) -> Result[None, HttpError]:
        if (failure := self._enter("create_ref")) is not None:
            return Err(failure)
        if ref in self.refs:
            return Err(_unprocessable(ref, "Reference already exists"))
        self.refs[ref] = sha
        return Ok(None)

    def update_ref(self, ref: str, sha: str, *, force: bool = True) -> Result[None, HttpError]:
        if (failure := self._enter("update_ref")) is not None:
            return Err(failure)
        if ref not in self.refs:
            return Err(_unprocessable(ref, "Reference does not exist"))
        self.refs[ref] = sha
        return Ok(None)

    def delete_ref(self, ref: str) -> Result[None, HttpError]:
        if (failure := self._enter("delete_ref")) is not None:
            return Err(failure)
        if ref not in self.refs:
            return Err(_unprocessable(ref, "Reference does not exist"))
        del self.refs[ref]
        return Ok(None)

    def list_tags(self) -> Result[list[str], HttpError]:
        if (failure := self._enter("list_tags")) is not None:
            return Err(failure)
        return Ok([r.removeprefix("tags/") for r in self.refs if r.startswith("tags/")])

    # -- commits ------------------------------------------------------------

    def compare_commits(self, base: str, head: str) -> Result[list[RemoteCommit], HttpError]:
        if (failure := self._enter("compare_commits")) is not None:
            return Err(failure)
        base_index = self._index_of(base)
        head_index = self._index_of(head)
        if base_index is None or head_index is None:
            return Err(_not_found(f"compare/{base}...{head}"))
        return Ok(self.history[base_index + 1 : head_index + 1])

    def list_commits(self, head: str) -> Result[list[RemoteCommit], HttpError]:
        if (failure := self._enter("list_commits")) is not None:
            return Err(failure)
        head_index = self._index_of(head)
        if head_index is None:
            return Err(_not_found(f"commits?sha={head}"))
        return Ok(self.history[: head_index + 1])

    def list_pull_requests(self, sha: str) -> Result[list[PullRequest], HttpError]:
        if (failure := self._enter("list_pull_requests")) is not None:
            return Err(failure)
        return Ok(list(self.pulls.get(sha, [])))

    # -- releases -----------------------------------------------------------

    def _find_release(self, release_id: int) -> RemoteRelease | None:
        for release in self.releases.values():
            if release.id == release_id:
                return release
        return None

    def get_release_by_tag(self, tag: str) -> Result[RemoteRelease, HttpError]:
        if (failure := self._enter("get_release_by_tag")) is not None:
            return Err(failure)
        release = self.releases.get(tag)
        if release is None or release.draft:
            return Err(_not_found(f"releases/tags/{tag}"))
        return Ok(release)

    def list_releases(self) -> Result[list[RemoteRelease], HttpError]:
        if (failure := self._enter("list_releases")) is not None:
            return Err(failure)
        return Ok(list(self.releases.values()))

    def create_release(self, draft: ReleaseDraft) -> Result[RemoteRelease, HttpError]:
        if (failure := self._enter("create_release")) is not None:
            return Err(failure)
        if draft.tag_name in self.releases:
            return Err(
                HttpError(
                    url="memory://releases",
                    status=422,
                    message="Validation Failed",
                    issues=(
                        ValidationIssue(
                            resource="Release", code="already_exists", field="tag_name"
                        ),
                    ),
                )
            )
        release_id = self._next_release_id
        self._next_release_id += 1
        release = RemoteRelease(
            id=release_id,
            tag_name=draft.tag_name,
            name=draft.name,
            body=draft.body,
            draft=draft.draft,
            prerelease=draft.prerelease,
            upload_url=(
                f"https://uploads.github.com/repos/{self.slug}/releases/{release_id}"
                "/assets{?name,label}"
            ),
        )
        self.releases[draft.tag_name] = release
        return Ok(release)

    def update_release(
        self, release_id: int, draft: ReleaseDraft
    ) -> Result[RemoteRelease, HttpError]:
        if (failure := self._enter("update_release")) is not None:
            return Err(failure)
        current = self._find_release(release_id)
        if current is None:
            return Err(_not_found(f"releases/{release_id}"))
        updated = replace(
            current,
            tag_name=draft.tag_name,
            name=draft.name,
            body=draft.body,
            draft=draft.draft,
            prerelease=draft.prerelease,
        )
        del self.releases[current.tag_name]
        self.releases[draft.tag_name] = updated
        return Ok(updated)

    def delete_release(self, release_id: int) -> Result[None, HttpError]:
        if (failure := self._enter("delete_release")) is not None:
            return Err(failure)
        current = self._find_release(release_id)
        if current is None:
            return Err(_not_found(f"releases/{release_id}"))
        del self.releases[current.tag_name]
        return Ok(None)
