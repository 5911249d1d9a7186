"""Render the release body from classified commits.

Sections appear in a fixed order regardless of commit order: Breaking
Changes, one section per conventional type in ``SECTIONS`` order, then a
catch-all Commits section. Within a section commits keep range order.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence

from autorelease.github.remote import PullRequest
from autorelease.services.release.model import Commit

SHORT_SHA_LEN = 8

# Ordered (type, label) pairs; emission order is part of the output format.
SECTIONS: tuple[tuple[str, str], ...] = (
    ("feat", "Features"),
    ("fix", "Bug Fixes"),
    ("docs", "Documentation"),
    ("style", "Styles"),
    ("refactor", "Code Refactoring"),
    ("perf", "Performance Improvements"),
    ("test", "Tests"),
    ("build", "Builds"),
    ("ci", "Continuous Integration"),
    ("chore", "Chores"),
    ("revert", "Reverts"),
)

BREAKING_LABEL = "Breaking Changes"
OTHER_LABEL = "Commits"

_KNOWN_TYPES = frozenset(key for key, _ in SECTIONS)
_SECTION_BREAK = "\n\n\n\n"


def short_sha(sha: str) -> str:
    # One shorter than SHORT_SHA_LEN; existing release bodies use 7.
    return sha[: SHORT_SHA_LEN - 1]


def format_pull_requests(pull_requests: Sequence[PullRequest]) -> str:
    return ",".join(f"[#{pr.number}]({pr.html_url})" for pr in pull_requests)


def format_entry(commit: Commit) -> str:
    prs = format_pull_requests(commit.pull_requests)
    if commit.type:
        return f"{commit.subject}{prs} ([{commit.author}]({commit.html_url}))"
    link = f"[`{short_sha(commit.sha)}`]({commit.html_url})"
    return f"{link}: {commit.header} ({commit.author}) {prs}"


def is_uncategorized(commit: Commit) -> bool:
    return not commit.type or commit.type not in _KNOWN_TYPES


def _section(commits: Sequence[Commit], label: str, keep: Callable[[Commit], bool]) -> str:
    entries = [format_entry(c) for c in commits if keep(c)]
    if not entries:
        return ""
    return f"{_SECTION_BREAK}## {label}\n" + "\n".join(entries).strip()


def _type_is(key: str) -> Callable[[Commit], bool]:
    return lambda c: c.type == key


def render_changelog(commits: Sequence[Commit]) -> str:
    parts: list[str] = [_section(commits, BREAKING_LABEL, lambda c: c.is_breaking)]
    for key, label in SECTIONS:
        parts.append(_section(commits, label, _type_is(key)))
    parts.append(_section(commits, OTHER_LABEL, is_uncategorized))
    return "".join(parts).strip()
