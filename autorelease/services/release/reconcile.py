"""Bring remote tag and release state in line with the run.

Every operation reads current state first and branches on presence, so a
re-run converges instead of failing. In dry-run mode the reads still happen
and the would-be action is reported, but nothing is written.
"""

from __future__ import annotations

from typing import Literal

from autorelease.core.result import Err, Ok, Result
from autorelease.github.errors import (
    is_not_found,
    is_reference_exists,
    is_reference_missing,
    is_release_exists,
)
from autorelease.github.remote import GitHubRemote, ReleaseDraft, RemoteRelease
from autorelease.output.console import ConsoleProtocol
from autorelease.services.release.errors import ReleaseError, RemoteFailed
from autorelease.services.release.model import DRY_RUN_HANDLE, ReleaseHandle

TagAction = Literal["created", "updated", "skipped"]


def find_release(remote: GitHubRemote, tag: str) -> Result[RemoteRelease | None, ReleaseError]:
    """The release for tag, drafts included; Ok(None) when there is none.

    The by-tag lookup only answers for published releases, so a miss is
    confirmed against the full release list.
    """
    found = remote.get_release_by_tag(tag)
    if isinstance(found, Ok):
        return Ok(found.value)
    if not is_not_found(found.error):
        return Err(RemoteFailed(operation=f"get release for {tag}", error=found.error))

    listed = remote.list_releases()
    if isinstance(listed, Err):
        return Err(RemoteFailed(operation="list releases", error=listed.error))
    for release in listed.value:
        if release.tag_name == tag:
            return Ok(release)
    return Ok(None)


def delete_release_and_tag(
    remote: GitHubRemote,
    tag: str,
    console: ConsoleProtocol,
    *,
    dry_run: bool = False,
) -> Result[None, ReleaseError]:
    """Remove the release attached to a rolling tag, then the tag itself."""
    console.info(f'Searching for release corresponding to the "{tag}" tag')
    found = find_release(remote, tag)
    if isinstance(found, Err):
        return found
    release = found.value
    if release is None:
        console.info(f'No release for "{tag}"; nothing to delete')
    elif dry_run:
        console.info(f"dry run: would delete release {release.id}")
    else:
        deleted = remote.delete_release(release.id)
        if isinstance(deleted, Err) and not is_not_found(deleted.error):
            return Err(RemoteFailed(operation=f"delete release {release.id}", error=deleted.error))
        console.success(f"Deleted release {release.id}")

    ref = f"tags/{tag}"
    if dry_run:
        console.info(f"dry run: would delete ref {ref}")
        return Ok(None)

    removed = remote.delete_ref(ref)
    if isinstance(removed, Err):
        if not is_reference_missing(removed.error):
            return Err(RemoteFailed(operation=f"delete ref {ref}", error=removed.error))
        console.info(f'Tag "{tag}" does not exist; nothing to delete')
    else:
        console.success(f'Deleted tag "{tag}"')
    return Ok(None)


def create_or_update_tag(
    remote: GitHubRemote,
    tag: str,
    sha: str,
    console: ConsoleProtocol,
    *,
    dry_run: bool = False,
) -> Result[TagAction, ReleaseError]:
    """Point a tag at sha, creating it or force-moving it."""
    ref = f"tags/{tag}"
    existing = remote.get_ref(ref)
    if isinstance(existing, Err) and not is_not_found(existing.error):
        return Err(RemoteFailed(operation=f"get ref {ref}", error=existing.error))
    exists = isinstance(existing, Ok)

    if dry_run:
        verb = "move" if exists else "create"
        console.info(f'dry run: would {verb} tag "{tag}" at {sha}')
        return Ok("skipped")

    if not exists:
        console.info(f'Creating release tag "{tag}" at {sha}')
        created = remote.create_ref(ref, sha)
        if isinstance(created, Ok):
            console.success(f'Created release tag "{tag}"')
            return Ok("created")
        if not is_reference_exists(created.error):
            return Err(RemoteFailed(operation=f"create ref {ref}", error=created.error))
        console.info(f'Tag "{tag}" appeared meanwhile; updating it instead')

    console.info(f'Updating release tag "{tag}" to {sha}')
    updated = remote.update_ref(ref, sha, force=True)
    if isinstance(updated, Err):
        return Err(RemoteFailed(operation=f"update ref {ref}", error=updated.error))
    console.success(f'Updated release tag "{tag}"')
    return Ok("updated")


def _handle(release: RemoteRelease) -> ReleaseHandle:
    return ReleaseHandle(id=release.id, upload_url=release.upload_url)


def _update(
    remote: GitHubRemote,
    release_id: int,
    draft: ReleaseDraft,
    console: ConsoleProtocol,
) -> Result[ReleaseHandle, ReleaseError]:
    console.info(f'Updating release {release_id} for the "{draft.tag_name}" tag')
    updated = remote.update_release(release_id, draft)
    if isinstance(updated, Err):
        return Err(RemoteFailed(operation=f"update release {release_id}", error=updated.error))
    console.success(f"Updated release {updated.value.id}: {updated.value.upload_url}")
    return Ok(_handle(updated.value))


def create_or_update_release(
    remote: GitHubRemote,
    draft: ReleaseDraft,
    console: ConsoleProtocol,
    *,
    dry_run: bool = False,
) -> Result[ReleaseHandle, ReleaseError]:
    """Make the release for draft.tag_name match draft.

    Returns the release id and upload URL, or DRY_RUN_HANDLE in dry-run mode.
    """
    tag = draft.tag_name
    existing = find_release(remote, tag)
    if isinstance(existing, Err):
        return existing
    current = existing.value

    if dry_run:
        if current is not None:
            console.info(f"dry run: would update release {current.id}")
        else:
            console.info(f'dry run: would create a release for the "{tag}" tag')
        return Ok(DRY_RUN_HANDLE)

    if current is not None:
        return _update(remote, current.id, draft, console)

    console.info(f'Creating new release for the "{tag}" tag')
    created = remote.create_release(draft)
    if isinstance(created, Ok):
        console.success(f"Created release {created.value.id}: {created.value.upload_url}")
        return Ok(_handle(created.value))
    if not is_release_exists(created.error):
        return Err(RemoteFailed(operation=f"create release for {tag}", error=created.error))

    console.info(f'A release for "{tag}" appeared meanwhile; updating it instead')
    refetched = find_release(remote, tag)
    if isinstance(refetched, Err):
        return refetched
    if refetched.value is None:
        return Err(RemoteFailed(operation=f"create release for {tag}", error=created.error))
    return _update(remote, refetched.value.id, draft, console)
