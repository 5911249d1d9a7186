from __future__ import annotations

import functools
import re
from collections.abc import Iterable
from dataclasses import dataclass
from typing import TypeAlias

from autorelease.core.result import Err, Ok, Result
from autorelease.services.release.errors import InvalidVersion

_IDENT = r"(?:0|[1-9]\d*|\d*[a-zA-Z-][0-9a-zA-Z-]*)"
_VERSION_RE = re.compile(
    r"^v?"
    r"(0|[1-9]\d*)\.(0|[1-9]\d*)\.(0|[1-9]\d*)"
    rf"(?:-({_IDENT}(?:\.{_IDENT})*))?"
    r"(?:\+([0-9a-zA-Z-]+(?:\.[0-9a-zA-Z-]+)*))?$",
    re.ASCII,
)

_PreKey: TypeAlias = tuple[int] | tuple[int, tuple[tuple[int, int] | tuple[int, str], ...]]


@dataclass(frozen=True, slots=True)
class Version:
    major: int
    minor: int
    patch: int
    prerelease: tuple[str, ...] = ()
    build: tuple[str, ...] = ()

    def __str__(self) -> str:
        s = f"{self.major}.{self.minor}.{self.patch}"
        if self.prerelease:
            s += "-" + ".".join(self.prerelease)
        if self.build:
            s += "+" + ".".join(self.build)
        return s

    def precedence(self) -> tuple[int, int, int, _PreKey]:
        """Sort key implementing SemVer precedence (build metadata ignored)."""
        if not self.prerelease:
            # A release outranks any of its prereleases.
            return (self.major, self.minor, self.patch, (1,))

        idents: list[tuple[int, int] | tuple[int, str]] = []
        for part in self.prerelease:
            # Numeric identifiers rank below alphanumeric ones.
            idents.append((0, int(part)) if part.isdigit() else (1, part))
        return (self.major, self.minor, self.patch, (0, tuple(idents)))


def parse_version(value: str) -> Version | None:
    """Parse a semantic version, allowing a leading ``v``."""
    m = _VERSION_RE.match(value.strip())
    if m is None:
        return None
    return Version(
        major=int(m.group(1)),
        minor=int(m.group(2)),
        patch=int(m.group(3)),
        prerelease=tuple(m.group(4).split(".")) if m.group(4) else (),
        build=tuple(m.group(5).split(".")) if m.group(5) else (),
    )


def is_valid_version(value: str) -> bool:
    return parse_version(value) is not None


def _require(value: str) -> Version:
    v = parse_version(value)
    if v is None:
        raise ValueError(f"not a semantic version: {value!r}")
    return v


def compare_versions(a: str, b: str) -> int:
    """Return -1, 0 or 1 as a sorts before, with, or after b."""
    ka = _require(a).precedence()
    kb = _require(b).precedence()
    return (ka > kb) - (ka < kb)


def compare_descending(a: str, b: str) -> int:
    """Comparator for newest-first ordering: -1 when a is the greater version."""
    return compare_versions(b, a)


def is_less_than(a: str, b: str) -> bool:
    return compare_versions(a, b) < 0


def find_previous_tag(
    tag_names: Iterable[str], current: str
) -> Result[str | None, InvalidVersion]:
    """Find the highest version tag strictly below current.

    Tags that are not semantic versions are ignored. When current is a full
    release, prerelease tags are not candidates. Ok(None) means there is no
    earlier release.
    """
    current_version = parse_version(current)
    if current_version is None:
        return Err(InvalidVersion(tag=current))

    candidates: list[str] = []
    for name in tag_names:
        if not is_valid_version(name):
            continue
        if _require(name).prerelease and not current_version.prerelease:
            continue
        candidates.append(name)

    candidates.sort(key=functools.cmp_to_key(compare_descending))
    for name in candidates:
        if is_less_than(name, current):
            return Ok(name)
    return Ok(None)
