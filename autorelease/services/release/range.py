from __future__ import annotations

import re

from autorelease.core.config import ReleaseConfig
from autorelease.core.result import Err, Ok, Result
from autorelease.github.errors import is_not_found
from autorelease.github.remote import GitHubRemote, RemoteCommit
from autorelease.output.console import ConsoleProtocol
from autorelease.services.release.classifier import classify
from autorelease.services.release.errors import (
    NotATagRef,
    RangeNotFound,
    ReleaseError,
    RemoteFailed,
)
from autorelease.services.release.model import Commit, ReleaseTagPair
from autorelease.services.release.semver import find_previous_tag

UNKNOWN_AUTHOR = "Unknown Author"

_TAG_REF_RE = re.compile(r"^(?:refs/)?tags/(.+)$")


def tag_from_ref(ref: str) -> str | None:
    """``refs/tags/v1.2.0`` -> ``v1.2.0``; None for branch or empty refs."""
    m = _TAG_REF_RE.match(ref)
    return m.group(1) if m else None


def resolve_previous_tag(remote: GitHubRemote, current: str) -> Result[str | None, ReleaseError]:
    tags = remote.list_tags()
    if isinstance(tags, Err):
        return Err(RemoteFailed(operation="list tags", error=tags.error))
    return find_previous_tag(tags.value, current)


def resolve_tag_pair(
    remote: GitHubRemote, config: ReleaseConfig
) -> Result[ReleaseTagPair, ReleaseError]:
    if config.auto_release_tag is not None:
        # The range starts where the rolling tag pointed last time.
        tag = config.auto_release_tag
        return Ok(ReleaseTagPair(previous=tag, current=tag))

    current = tag_from_ref(config.ref)
    if current is None:
        return Err(NotATagRef(ref=config.ref))

    if config.previous_tag is not None:
        return Ok(ReleaseTagPair(previous=config.previous_tag, current=current))

    previous = resolve_previous_tag(remote, current)
    if isinstance(previous, Err):
        return previous
    return Ok(ReleaseTagPair(previous=previous.value, current=current))


def _build_commit(
    remote: GitHubRemote, raw: RemoteCommit, console: ConsoleProtocol
) -> Result[Commit | None, ReleaseError]:
    classified = classify(raw.message)
    if classified is None:
        console.info(f"Skipping merge commit {raw.sha}")
        return Ok(None)

    pulls = remote.list_pull_requests(raw.sha)
    if isinstance(pulls, Err):
        return Err(RemoteFailed(operation=f"list pull requests for {raw.sha}", error=pulls.error))

    return Ok(
        Commit(
            sha=raw.sha,
            author=raw.author_name or UNKNOWN_AUTHOR,
            html_url=raw.html_url,
            header=classified.header,
            type=classified.type,
            scope=classified.scope,
            subject=classified.subject,
            is_breaking=classified.is_breaking,
            pull_requests=tuple(sorted(pulls.value, key=lambda pr: pr.number)),
        )
    )


def resolve_previous_ref(remote: GitHubRemote, previous: str) -> Result[str, ReleaseError]:
    """The commit sha the previous tag points at."""
    ref = f"tags/{previous}"
    base = remote.get_ref(ref)
    if isinstance(base, Err):
        if is_not_found(base.error):
            return Err(RangeNotFound(ref=previous))
        return Err(RemoteFailed(operation=f"get ref {ref}", error=base.error))
    return base


def _list_range(
    remote: GitHubRemote, previous: str | None, head: str
) -> Result[list[RemoteCommit], ReleaseError]:
    if previous is None:
        listed = remote.list_commits(head)
        if isinstance(listed, Err):
            return Err(RemoteFailed(operation=f"list commits up to {head}", error=listed.error))
        return listed

    base = resolve_previous_ref(remote, previous)
    if isinstance(base, Err):
        return base

    compared = remote.compare_commits(previous, head)
    if isinstance(compared, Err):
        if is_not_found(compared.error):
            return Err(RangeNotFound(ref=previous))
        return Err(
            RemoteFailed(operation=f"compare {previous}...{head}", error=compared.error)
        )
    return compared


def fetch_range(
    remote: GitHubRemote,
    previous: str | None,
    head: str,
    console: ConsoleProtocol,
) -> Result[list[Commit], ReleaseError]:
    """Classified, non-merge commits in ``previous...head``, in range order.

    Pull request lookups are issued one commit at a time, in order.
    """
    start = previous or "repository start"
    console.info(f"Retrieving commits between {start} and {head}")
    raw = _list_range(remote, previous, head)
    if isinstance(raw, Err):
        return raw

    commits: list[Commit] = []
    for item in raw.value:
        console.info(f"Processing commit {item.sha}")
        built = _build_commit(remote, item, console)
        if isinstance(built, Err):
            return built
        if built.value is not None:
            commits.append(built.value)

    console.info(f"Retrieved {len(commits)} commits between {start} and {head}")
    return Ok(commits)


def collect_commits(
    remote: GitHubRemote,
    previous: str | None,
    head: str,
    console: ConsoleProtocol,
) -> Result[list[Commit], ReleaseError]:
    """fetch_range, falling back to the start of history when the base is gone."""
    result = fetch_range(remote, previous, head, console)
    if isinstance(result, Err) and isinstance(result.error, RangeNotFound):
        console.info(
            f'Tag "{result.error.ref}" does not exist yet; assuming this is the first release'
        )
        return fetch_range(remote, None, head, console)
    return result
