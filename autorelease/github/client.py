"""GitHub REST implementation of ``GitHubRemote``.

Payloads are validated at this boundary; a response that does not have the
expected shape becomes an ``HttpError`` with status 0.
"""

from __future__ import annotations

from urllib.parse import quote

from autorelease.core.config import DEFAULT_API_URL, RepoSlug
from autorelease.core.result import Err, Ok, Result
from autorelease.core.structured import (
    StrDict,
    as_obj_list,
    as_str_dict,
    get_bool,
    get_int,
    get_list,
    get_raw_str,
    get_str,
    get_table,
)
from autorelease.github.http import HttpClient, HttpError
from autorelease.github.remote import PullRequest, ReleaseDraft, RemoteCommit, RemoteRelease

__all__ = ["RestRemote"]

_PER_PAGE = 100


def _bad_payload(url: str, what: str) -> HttpError:
    return HttpError(url=url, status=0, message=f"unexpected {what} payload")


def _parse_commit(item: object) -> RemoteCommit | None:
    d = as_str_dict(item)
    if d is None:
        return None

    sha = get_str(d, "sha")
    commit_tbl = get_table(d, "commit")
    if sha is None or commit_tbl is None:
        return None

    message = get_raw_str(commit_tbl, "message") or ""
    author_tbl = get_table(commit_tbl, "author")
    author = get_str(author_tbl, "name") if author_tbl is not None else None

    return RemoteCommit(
        sha=sha,
        message=message,
        author_name=author,
        html_url=get_str(d, "html_url") or "",
    )


def _parse_release(data: StrDict) -> RemoteRelease | None:
    release_id = get_int(data, "id")
    if release_id is None:
        return None
    return RemoteRelease(
        id=release_id,
        tag_name=get_str(data, "tag_name") or "",
        name=get_str(data, "name") or "",
        body=get_raw_str(data, "body") or "",
        draft=get_bool(data, "draft") or False,
        prerelease=get_bool(data, "prerelease") or False,
        upload_url=get_str(data, "upload_url") or "",
    )


def _release_payload(draft: ReleaseDraft) -> dict[str, object]:
    return {
        "tag_name": draft.tag_name,
        "name": draft.name,
        "body": draft.body,
        "draft": draft.draft,
        "prerelease": draft.prerelease,
    }


class RestRemote:
    """GitHubRemote backed by the REST API of a single repository."""

    def __init__(self, http: HttpClient, repo: RepoSlug, *, api_url: str = DEFAULT_API_URL) -> None:
        self._http = http
        self._base = f"{api_url.rstrip('/')}/repos/{repo.owner}/{repo.name}"

    # -- refs ---------------------------------------------------------------

    def get_ref(self, ref: str) -> Result[str, HttpError]:
        url = f"{self._base}/git/ref/{quote(ref, safe='/')}"
        obj = self._http.get_json(url)
        if isinstance(obj, Err):
            return obj

        data = as_str_dict(obj.value)
        target = get_table(data, "object") if data is not None else None
        sha = get_str(target, "sha") if target is not None else None
        if sha is None:
            return Err(_bad_payload(url, "ref"))
        return Ok(sha)

    def create_ref(self, ref: str, sha: str) -> Result[None, HttpError]:
        url = f"{self._base}/git/refs"
        result = self._http.send_json("POST", url, {"ref": f"refs/{ref}", "sha": sha})
        if isinstance(result, Err):
            return result
        return Ok(None)

    def update_ref(self, ref: str, sha: str, *, force: bool = True) -> Result[None, HttpError]:
        url = f"{self._base}/git/refs/{quote(ref, safe='/')}"
        result = self._http.send_json("PATCH", url, {"sha": sha, "force": force})
        if isinstance(result, Err):
            return result
        return Ok(None)

    def delete_ref(self, ref: str) -> Result[None, HttpError]:
        return self._http.delete(f"{self._base}/git/refs/{quote(ref, safe='/')}")

    def list_tags(self) -> Result[list[str], HttpError]:
        url = f"{self._base}/tags?per_page={_PER_PAGE}"
        pages = self._http.get_pages(url)
        if isinstance(pages, Err):
            return pages

        names: list[str] = []
        for page in pages.value:
            items = as_obj_list(page)
            if items is None:
                return Err(_bad_payload(url, "tags"))
            for item in items:
                d = as_str_dict(item)
                name = get_str(d, "name") if d is not None else None
                if name is not None:
                    names.append(name)
        return Ok(names)

    # -- commits ------------------------------------------------------------

    def compare_commits(self, base: str, head: str) -> Result[list[RemoteCommit], HttpError]:
        url = (
            f"{self._base}/compare/{quote(base, safe='/')}...{quote(head, safe='/')}"
            f"?per_page={_PER_PAGE}"
        )
        pages = self._http.get_pages(url)
        if isinstance(pages, Err):
            return pages

        out: list[RemoteCommit] = []
        for page in pages.value:
            data = as_str_dict(page)
            items = get_list(data, "commits") if data is not None else None
            if items is None:
                return Err(_bad_payload(url, "compare"))
            for item in items:
                commit = _parse_commit(item)
                if commit is not None:
                    out.append(commit)
        return Ok(out)

    def list_commits(self, head: str) -> Result[list[RemoteCommit], HttpError]:
        url = f"{self._base}/commits?sha={quote(head, safe='')}&per_page={_PER_PAGE}"
        pages = self._http.get_pages(url)
        if isinstance(pages, Err):
            return pages

        newest_first: list[RemoteCommit] = []
        for page in pages.value:
            items = as_obj_list(page)
            if items is None:
                return Err(_bad_payload(url, "commits"))
            for item in items:
                commit = _parse_commit(item)
                if commit is not None:
                    newest_first.append(commit)
        # Match the compare endpoint, which lists oldest first.
        return Ok(list(reversed(newest_first)))

    def list_pull_requests(self, sha: str) -> Result[list[PullRequest], HttpError]:
        url = f"{self._base}/commits/{sha}/pulls?per_page={_PER_PAGE}"
        pages = self._http.get_pages(url)
        if isinstance(pages, Err):
            return pages

        out: list[PullRequest] = []
        for page in pages.value:
            items = as_obj_list(page)
            if items is None:
                return Err(_bad_payload(url, "pull requests"))
            for item in items:
                d = as_str_dict(item)
                if d is None:
                    continue
                number = get_int(d, "number")
                if number is None:
                    continue
                out.append(PullRequest(number=number, html_url=get_str(d, "html_url") or ""))
        return Ok(out)

    # -- releases -----------------------------------------------------------

    def _release_from(self, url: str, obj: object) -> Result[RemoteRelease, HttpError]:
        data = as_str_dict(obj)
        release = _parse_release(data) if data is not None else None
        if release is None:
            return Err(_bad_payload(url, "release"))
        return Ok(release)

    def get_release_by_tag(self, tag: str) -> Result[RemoteRelease, HttpError]:
        url = f"{self._base}/releases/tags/{quote(tag, safe='')}"
        obj = self._http.get_json(url)
        if isinstance(obj, Err):
            return obj
        return self._release_from(url, obj.value)

    def list_releases(self) -> Result[list[RemoteRelease], HttpError]:
        url = f"{self._base}/releases?per_page={_PER_PAGE}"
        pages = self._http.get_pages(url)
        if isinstance(pages, Err):
            return pages

        out: list[RemoteRelease] = []
        for page in pages.value:
            items = as_obj_list(page)
            if items is None:
                return Err(_bad_payload(url, "releases"))
            for item in items:
                d = as_str_dict(item)
                release = _parse_release(d) if d is not None else None
                if release is not None:
                    out.append(release)
        return Ok(out)

    def create_release(self, draft: ReleaseDraft) -> Result[RemoteRelease, HttpError]:
        url = f"{self._base}/releases"
        obj = self._http.send_json("POST", url, _release_payload(draft))
        if isinstance(obj, Err):
            return obj
        return self._release_from(url, obj.value)

    def update_release(
        self, release_id: int, draft: ReleaseDraft
    ) -> Result[RemoteRelease, HttpError]:
        url = f"{self._base}/releases/{release_id}"
        obj = self._http.send_json("PATCH", url, _release_payload(draft))
        if isinstance(obj, Err):
            return obj
        return self._release_from(url, obj.value)

    def delete_release(self, release_id: int) -> Result[None, HttpError]:
        return self._http.delete(f"{self._base}/releases/{release_id}")
