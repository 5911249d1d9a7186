from __future__ import annotations

from autorelease.core.config import ReleaseConfig, RepoSlug
from autorelease.core.result import Err, Ok
from autorelease.github.http import HttpError
from autorelease.github.memory import InMemoryRemote
from autorelease.output.console import MockConsole
from autorelease.services.release.errors import (
    InvalidVersion,
    NotATagRef,
    RangeNotFound,
    RemoteFailed,
)
from autorelease.services.release.model import ReleaseTagPair
from autorelease.services.release.range import (
    UNKNOWN_AUTHOR,
    collect_commits,
    fetch_range,
    resolve_previous_ref,
    resolve_previous_tag,
    resolve_tag_pair,
    tag_from_ref,
)


def _config(**kwargs: object) -> ReleaseConfig:
    return ReleaseConfig(repo=RepoSlug("octo", "demo"), token="t", **kwargs)  # type: ignore[arg-type]


def _tagged_repo() -> tuple[InMemoryRemote, str]:
    remote = InMemoryRemote()
    remote.add_tag("v1.0.0", remote.add_commit("feat: first release"))
    remote.add_commit("fix: parser crash", pull_numbers=(9, 3))
    remote.add_commit("Merge pull request #9 from octo/fix")
    head = remote.add_commit("Tidy up", author=None)
    return remote, head


class TestTagFromRef:
    def test_tag_refs(self) -> None:
        assert tag_from_ref("refs/tags/v1.2.0") == "v1.2.0"
        assert tag_from_ref("tags/v1.2.0") == "v1.2.0"

    def test_other_refs(self) -> None:
        assert tag_from_ref("refs/heads/main") is None
        assert tag_from_ref("") is None


class TestResolveTagPair:
    def test_explicit_tag(self) -> None:
        remote = InMemoryRemote()
        sha = remote.add_commit("feat: x")
        for tag in ("v1.0.0", "v1.1.0", "v2.0.0", "latest"):
            remote.add_tag(tag, sha)

        result = resolve_tag_pair(remote, _config(ref="refs/tags/v1.1.0"))

        assert result == Ok(ReleaseTagPair(previous="v1.0.0", current="v1.1.0"))

    def test_first_release_has_no_previous(self) -> None:
        remote = InMemoryRemote()
        remote.add_tag("v0.1.0", remote.add_commit("feat: x"))

        result = resolve_tag_pair(remote, _config(ref="refs/tags/v0.1.0"))

        assert result == Ok(ReleaseTagPair(previous=None, current="v0.1.0"))

    def test_rolling_tag_is_its_own_previous(self) -> None:
        remote = InMemoryRemote()

        result = resolve_tag_pair(
            remote, _config(auto_release_tag="latest", auto_release_title="Nightly")
        )

        assert result == Ok(ReleaseTagPair(previous="latest", current="latest"))
        assert remote.calls == []

    def test_previous_tag_override(self) -> None:
        remote = InMemoryRemote()

        result = resolve_tag_pair(remote, _config(ref="refs/tags/v2.0.0", previous_tag="v1.4.0"))

        assert result == Ok(ReleaseTagPair(previous="v1.4.0", current="v2.0.0"))
        assert "list_tags" not in remote.calls

    def test_branch_ref_is_rejected(self) -> None:
        result = resolve_tag_pair(InMemoryRemote(), _config(ref="refs/heads/main"))

        assert result == Err(NotATagRef(ref="refs/heads/main"))

    def test_non_semver_tag(self) -> None:
        result = resolve_tag_pair(InMemoryRemote(), _config(ref="refs/tags/nightly"))

        assert result == Err(InvalidVersion(tag="nightly"))

    def test_list_tags_failure(self) -> None:
        remote = InMemoryRemote()
        boom = HttpError(url="memory://tags", status=500, message="Server Error")
        remote.fail("list_tags", boom)

        assert resolve_previous_tag(remote, "v1.0.0") == Err(
            RemoteFailed(operation="list tags", error=boom)
        )


class TestFetchRange:
    def test_commits_after_previous_tag(self) -> None:
        remote, head = _tagged_repo()
        console = MockConsole()

        result = fetch_range(remote, "v1.0.0", head, console)

        assert isinstance(result, Ok)
        commits = result.value
        assert [c.header for c in commits] == ["fix: parser crash", "Tidy up"]
        assert [pr.number for pr in commits[0].pull_requests] == [3, 9]
        assert commits[0].type == "fix"
        assert commits[1].author == UNKNOWN_AUTHOR
        assert len(console.find("Skipping merge commit")) == 1
        assert console.messages[-1] == f"info: Retrieved 2 commits between v1.0.0 and {head}"

    def test_pull_requests_looked_up_per_kept_commit(self) -> None:
        remote, head = _tagged_repo()

        fetch_range(remote, "v1.0.0", head, MockConsole())

        assert remote.calls.count("list_pull_requests") == 2

    def test_from_repository_start(self) -> None:
        remote, head = _tagged_repo()

        result = fetch_range(remote, None, head, MockConsole())

        assert isinstance(result, Ok)
        assert [c.header for c in result.value][0] == "feat: first release"
        assert "list_commits" in remote.calls

    def test_missing_base_tag(self) -> None:
        remote, head = _tagged_repo()

        result = fetch_range(remote, "v0.9.0", head, MockConsole())

        assert result == Err(RangeNotFound(ref="v0.9.0"))

    def test_pull_request_failure(self) -> None:
        remote, head = _tagged_repo()
        boom = HttpError(url="memory://pulls", status=502, message="Bad Gateway")
        remote.fail("list_pull_requests", boom)

        result = fetch_range(remote, "v1.0.0", head, MockConsole())

        assert isinstance(result, Err)
        assert isinstance(result.error, RemoteFailed)
        assert result.error.error == boom

    def test_compare_failure_is_not_a_missing_range(self) -> None:
        remote, head = _tagged_repo()
        boom = HttpError(url="memory://compare", status=500, message="Server Error")
        remote.fail("compare_commits", boom)

        result = fetch_range(remote, "v1.0.0", head, MockConsole())

        assert isinstance(result, Err)
        assert isinstance(result.error, RemoteFailed)


class TestCollectCommits:
    def test_missing_base_falls_back_to_history(self) -> None:
        remote = InMemoryRemote()
        remote.add_commit("feat: one")
        head = remote.add_commit("fix: two")
        console = MockConsole()

        result = collect_commits(remote, "latest", head, console)

        assert isinstance(result, Ok)
        assert [c.header for c in result.value] == ["feat: one", "fix: two"]
        assert console.find('Tag "latest" does not exist yet; assuming this is the first release')

    def test_existing_base_does_not_fall_back(self) -> None:
        remote, head = _tagged_repo()

        result = collect_commits(remote, "v1.0.0", head, MockConsole())

        assert isinstance(result, Ok)
        assert "list_commits" not in remote.calls


class TestResolvePreviousRef:
    def test_existing_tag(self) -> None:
        remote = InMemoryRemote()
        sha = remote.add_commit("feat: x")
        remote.add_tag("v1.0.0", sha)

        assert resolve_previous_ref(remote, "v1.0.0") == Ok(sha)

    def test_missing_tag(self) -> None:
        assert resolve_previous_ref(InMemoryRemote(), "latest") == Err(RangeNotFound(ref="latest"))

    def test_lookup_failure(self) -> None:
        remote = InMemoryRemote()
        boom = HttpError(url="memory://ref", status=401, message="Bad credentials")
        remote.fail("get_ref", boom)

        assert resolve_previous_ref(remote, "v1.0.0") == Err(
            RemoteFailed(operation="get ref tags/v1.0.0", error=boom)
        )
