"""Tests for github/client.py - RestRemote against a mocked HTTP layer."""

from __future__ import annotations

from autorelease.core.config import RepoSlug
from autorelease.core.result import Err, Ok
from autorelease.github.client import RestRemote
from autorelease.github.http import HttpError, MockHttpClient
from autorelease.github.remote import PullRequest, ReleaseDraft, RemoteCommit, RemoteRelease

API = "https://api.github.com/repos/octo/demo"


def _remote() -> tuple[RestRemote, MockHttpClient]:
    http = MockHttpClient()
    return RestRemote(http, RepoSlug("octo", "demo")), http


def _commit_json(sha: str, message: str, author: str | None = "Ada") -> dict[str, object]:
    commit: dict[str, object] = {"message": message}
    if author is not None:
        commit["author"] = {"name": author, "email": "ada@example.com"}
    return {"sha": sha, "html_url": f"https://github.com/octo/demo/commit/{sha}", "commit": commit}


def _release_json(release_id: int, tag: str) -> dict[str, object]:
    return {
        "id": release_id,
        "tag_name": tag,
        "name": tag,
        "body": "## Features\n",
        "draft": False,
        "prerelease": True,
        "upload_url": f"https://uploads.github.com/repos/octo/demo/releases/{release_id}/assets{{?name,label}}",
    }


DRAFT = ReleaseDraft(tag_name="v1.1.0", name="v1.1.0", body="notes", draft=False, prerelease=True)


class TestRefs:
    def test_get_ref(self) -> None:
        remote, http = _remote()
        http.set("GET", f"{API}/git/ref/heads/main", {"ref": "refs/heads/main", "object": {"sha": "abc"}})

        assert remote.get_ref("heads/main") == Ok("abc")

    def test_get_ref_bad_payload(self) -> None:
        remote, http = _remote()
        http.set("GET", f"{API}/git/ref/heads/main", {"ref": "refs/heads/main"})

        result = remote.get_ref("heads/main")

        assert isinstance(result, Err)
        assert result.error.status == 0
        assert result.error.message == "unexpected ref payload"

    def test_get_ref_not_found_passes_through(self) -> None:
        remote, _ = _remote()

        result = remote.get_ref("tags/v9.9.9")

        assert isinstance(result, Err)
        assert result.error.status == 404

    def test_create_ref_uses_full_name(self) -> None:
        remote, http = _remote()
        http.set("POST", f"{API}/git/refs", {"ref": "refs/tags/latest"})

        assert remote.create_ref("tags/latest", "abc") == Ok(None)
        assert http.calls == [("POST", f"{API}/git/refs", {"ref": "refs/tags/latest", "sha": "abc"})]

    def test_update_ref_forces(self) -> None:
        remote, http = _remote()
        http.set("PATCH", f"{API}/git/refs/tags/latest", {"ref": "refs/tags/latest"})

        assert remote.update_ref("tags/latest", "def") == Ok(None)
        assert http.calls[0][2] == {"sha": "def", "force": True}

    def test_delete_ref(self) -> None:
        remote, http = _remote()
        http.set("DELETE", f"{API}/git/refs/tags/latest", None)

        assert remote.delete_ref("tags/latest") == Ok(None)

    def test_list_tags_across_pages(self) -> None:
        remote, http = _remote()
        http.set_pages(
            f"{API}/tags?per_page=100",
            [[{"name": "v1.1.0"}, {"name": "v1.0.0"}], [{"name": "v0.9.0"}]],
        )

        assert remote.list_tags() == Ok(["v1.1.0", "v1.0.0", "v0.9.0"])


class TestCommits:
    def test_compare(self) -> None:
        remote, http = _remote()
        http.set_pages(
            f"{API}/compare/v1.0.0...abc?per_page=100",
            [{"commits": [_commit_json("a1", "feat: one")]}, {"commits": [_commit_json("a2", "fix: two", None)]}],
        )

        result = remote.compare_commits("v1.0.0", "abc")

        assert result == Ok(
            [
                RemoteCommit("a1", "feat: one", "Ada", "https://github.com/octo/demo/commit/a1"),
                RemoteCommit("a2", "fix: two", None, "https://github.com/octo/demo/commit/a2"),
            ]
        )

    def test_compare_keeps_message_whitespace(self) -> None:
        remote, http = _remote()
        message = "feat: x\n\nBREAKING CHANGE: y\n"
        http.set("GET", f"{API}/compare/v1...v2?per_page=100", {"commits": [_commit_json("a", message)]})

        result = remote.compare_commits("v1", "v2")

        assert isinstance(result, Ok)
        assert result.value[0].message == message

    def test_compare_bad_payload(self) -> None:
        remote, http = _remote()
        http.set("GET", f"{API}/compare/v1...v2?per_page=100", {"status": "ahead"})

        result = remote.compare_commits("v1", "v2")

        assert isinstance(result, Err)
        assert result.error.message == "unexpected compare payload"

    def test_list_commits_is_oldest_first(self) -> None:
        remote, http = _remote()
        http.set_pages(
            f"{API}/commits?sha=abc&per_page=100",
            [[_commit_json("c3", "third"), _commit_json("c2", "second")], [_commit_json("c1", "first")]],
        )

        result = remote.list_commits("abc")

        assert isinstance(result, Ok)
        assert [c.sha for c in result.value] == ["c1", "c2", "c3"]

    def test_list_pull_requests(self) -> None:
        remote, http = _remote()
        http.set(
            "GET",
            f"{API}/commits/a1/pulls?per_page=100",
            [
                {"number": 12, "html_url": "https://github.com/octo/demo/pull/12"},
                {"title": "no number"},
            ],
        )

        assert remote.list_pull_requests("a1") == Ok(
            [PullRequest(12, "https://github.com/octo/demo/pull/12")]
        )

    def test_list_pull_requests_across_pages(self) -> None:
        remote, http = _remote()
        first = [
            {"number": n, "html_url": f"https://github.com/octo/demo/pull/{n}"}
            for n in range(1, 101)
        ]
        second = [{"number": 101, "html_url": "https://github.com/octo/demo/pull/101"}]
        http.set_pages(f"{API}/commits/a1/pulls?per_page=100", [first, second])

        result = remote.list_pull_requests("a1")

        assert isinstance(result, Ok)
        assert [pr.number for pr in result.value] == list(range(1, 102))


class TestReleases:
    def test_get_release_by_tag(self) -> None:
        remote, http = _remote()
        http.set("GET", f"{API}/releases/tags/v1.0.0", _release_json(5, "v1.0.0"))

        result = remote.get_release_by_tag("v1.0.0")

        assert isinstance(result, Ok)
        assert result.value == RemoteRelease(
            id=5,
            tag_name="v1.0.0",
            name="v1.0.0",
            body="## Features\n",
            draft=False,
            prerelease=True,
            upload_url="https://uploads.github.com/repos/octo/demo/releases/5/assets{?name,label}",
        )

    def test_create_release_payload(self) -> None:
        remote, http = _remote()
        http.set("POST", f"{API}/releases", _release_json(6, "v1.1.0"))

        result = remote.create_release(DRAFT)

        assert isinstance(result, Ok)
        assert result.value.id == 6
        assert http.calls[0][2] == {
            "tag_name": "v1.1.0",
            "name": "v1.1.0",
            "body": "notes",
            "draft": False,
            "prerelease": True,
        }

    def test_create_release_error(self) -> None:
        remote, http = _remote()
        error = HttpError(url=f"{API}/releases", status=422, message="Validation Failed")
        http.set("POST", f"{API}/releases", error)

        assert remote.create_release(DRAFT) == Err(error)

    def test_update_and_delete(self) -> None:
        remote, http = _remote()
        http.set("PATCH", f"{API}/releases/6", _release_json(6, "v1.1.0"))
        http.set("DELETE", f"{API}/releases/6", None)

        assert isinstance(remote.update_release(6, DRAFT), Ok)
        assert remote.delete_release(6) == Ok(None)
        assert http.methods == ["PATCH", "DELETE"]

    def test_release_without_id_is_rejected(self) -> None:
        remote, http = _remote()
        http.set("GET", f"{API}/releases/tags/v1", {"tag_name": "v1", "id": True})

        result = remote.get_release_by_tag("v1")

        assert isinstance(result, Err)
        assert result.error.message == "unexpected release payload"

    def test_custom_api_url(self) -> None:
        http = MockHttpClient()
        remote = RestRemote(http, RepoSlug("o", "r"), api_url="https://ghe.example.com/api/v3/")

        remote.get_ref("heads/main")

        assert http.calls[0][1] == "https://ghe.example.com/api/v3/repos/o/r/git/ref/heads/main"


class TestListReleases:
    def test_includes_drafts_across_pages(self) -> None:
        remote, http = _remote()
        draft = {**_release_json(8, "v1.2.0"), "draft": True}
        http.set_pages(f"{API}/releases?per_page=100", [[draft], [_release_json(5, "v1.0.0")]])

        result = remote.list_releases()

        assert isinstance(result, Ok)
        assert [(r.id, r.draft) for r in result.value] == [(8, True), (5, False)]

    def test_skips_entries_without_id(self) -> None:
        remote, http = _remote()
        http.set_pages(f"{API}/releases?per_page=100", [[{"tag_name": "v1"}]])

        assert remote.list_releases() == Ok([])

    def test_bad_page(self) -> None:
        remote, http = _remote()
        http.set_pages(f"{API}/releases?per_page=100", [{"message": "oops"}])

        result = remote.list_releases()

        assert isinstance(result, Err)
        assert result.error.message == "unexpected releases payload"
