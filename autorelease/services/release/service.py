"""One release run, from branch head to exported outputs.

States advance strictly in this order; a failure stops the run where it is:

    INIT -> HEAD_RESOLVED -> TAGS_RESOLVED -> CHANGELOG_BUILT
         -> [ROLLING_TAG_RECONCILED] -> RELEASE_RECONCILED -> OUTPUTS_EXPORTED

The rolling tag is only touched after the changelog is built, so the range
still starts where the tag pointed on the previous run.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from autorelease.core.config import ReleaseConfig
from autorelease.core.result import Err, Ok, Result
from autorelease.github.remote import GitHubRemote, ReleaseDraft
from autorelease.output.console import ConsoleProtocol, Style
from autorelease.services.release.changelog import render_changelog
from autorelease.services.release.errors import ReleaseError, RemoteFailed
from autorelease.services.release.model import ReleaseOutputs, ReleaseTagPair
from autorelease.services.release.range import collect_commits, resolve_tag_pair
from autorelease.services.release.reconcile import (
    create_or_update_release,
    create_or_update_tag,
    delete_release_and_tag,
)


class RunState(Enum):
    INIT = "init"
    HEAD_RESOLVED = "head_resolved"
    TAGS_RESOLVED = "tags_resolved"
    CHANGELOG_BUILT = "changelog_built"
    ROLLING_TAG_RECONCILED = "rolling_tag_reconciled"
    RELEASE_RECONCILED = "release_reconciled"
    OUTPUTS_EXPORTED = "outputs_exported"


@dataclass(frozen=True, slots=True)
class ReleasePlan:
    """Everything decided before the remote is written to."""

    head_sha: str
    tags: ReleaseTagPair
    title: str
    changelog: str


StateListener = Callable[[RunState], None]


def _ignore(_state: RunState) -> None:
    return None


def resolve_head(
    remote: GitHubRemote, config: ReleaseConfig, console: ConsoleProtocol
) -> Result[str, ReleaseError]:
    ref = f"heads/{config.branch}"
    head = remote.get_ref(ref)
    if isinstance(head, Err):
        return Err(RemoteFailed(operation=f"get ref {ref}", error=head.error))
    console.info(f"Head of {config.branch} is {head.value}")
    return head


def release_title(config: ReleaseConfig, tag: str) -> str:
    if config.rolling and config.auto_release_title is not None:
        return config.auto_release_title
    return tag


def plan_release(
    remote: GitHubRemote,
    config: ReleaseConfig,
    console: ConsoleProtocol,
    *,
    on_state: StateListener = _ignore,
) -> Result[ReleasePlan, ReleaseError]:
    """Resolve head, tags and changelog without writing anything."""
    console.header("Resolving release range")
    head = resolve_head(remote, config, console)
    if isinstance(head, Err):
        return head
    on_state(RunState.HEAD_RESOLVED)

    tags = resolve_tag_pair(remote, config)
    if isinstance(tags, Err):
        return tags
    console.info(f"Releasing {tags.value.current} (previous: {tags.value.previous or 'none'})")
    on_state(RunState.TAGS_RESOLVED)

    commits = collect_commits(remote, tags.value.previous, head.value, console)
    if isinstance(commits, Err):
        return commits
    changelog = render_changelog(commits.value)
    console.header("Changelog")
    console.print(changelog, Style.DIM)
    on_state(RunState.CHANGELOG_BUILT)

    return Ok(
        ReleasePlan(
            head_sha=head.value,
            tags=tags.value,
            title=release_title(config, tags.value.current),
            changelog=changelog,
        )
    )


def run_release(
    remote: GitHubRemote,
    config: ReleaseConfig,
    console: ConsoleProtocol,
    *,
    on_state: StateListener = _ignore,
) -> Result[ReleaseOutputs, ReleaseError]:
    """Create or refresh the release for the configured tag.

    Args:
        remote: Repository host to read from and write to.
        config: Validated run settings.
        console: Progress output.
        on_state: Called with each state as it is reached.

    Returns:
        Ok(ReleaseOutputs) for export, or the first error encountered.
    """
    on_state(RunState.INIT)
    planned = plan_release(remote, config, console, on_state=on_state)
    if isinstance(planned, Err):
        return planned
    plan = planned.value
    tag = plan.tags.current

    console.header("Reconciling release")
    if config.rolling:
        deleted = delete_release_and_tag(remote, tag, console, dry_run=config.dry_run)
        if isinstance(deleted, Err):
            return deleted
        moved = create_or_update_tag(remote, tag, plan.head_sha, console, dry_run=config.dry_run)
        if isinstance(moved, Err):
            return moved
        on_state(RunState.ROLLING_TAG_RECONCILED)

    draft = ReleaseDraft(
        tag_name=tag,
        name=plan.title,
        body=plan.changelog,
        draft=config.is_draft,
        prerelease=config.is_prerelease,
    )
    handle = create_or_update_release(remote, draft, console, dry_run=config.dry_run)
    if isinstance(handle, Err):
        return handle
    on_state(RunState.RELEASE_RECONCILED)

    return Ok(
        ReleaseOutputs(
            tag=tag,
            prev_tag=plan.tags.previous or "",
            release_id=handle.value.id,
            upload_url=handle.value.upload_url,
        )
    )
