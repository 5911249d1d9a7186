"""Conventional commit message grammar.

Splits a raw commit message into header, type, scope, subject, body and
footer the way conventional-commits-parser does with its default options:

    type(scope): subject
    <blank line>
    body
    <blank line>
    BREAKING CHANGE: footer notes / Closes #12

This module only parses; deciding what a parsed message means for a
release is ``classifier``'s job.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

__all__ = ["ParsedMessage", "parse_message"]

_HEADER_RE = re.compile(r"^(\w*)(?:\(([\w$.\-* ]*)\))?: (.*)$", re.ASCII)
_MERGE_RE = re.compile(
    r"^Merge (?:pull request #\d+ from \S+|(?:remote-tracking )?branch '[^']+'.*)$"
)
_NOTE_RE = re.compile(r"^[\s|*]*BREAKING[ -]CHANGE[:\s]+")
_REFERENCE_RE = re.compile(
    r"^(?:close[sd]?|fix(?:e[sd])?|resolve[sd]?)\s+(?:[\w.-]+/[\w.-]+)?#\d+",
    re.IGNORECASE,
)


@dataclass(frozen=True, slots=True)
class ParsedMessage:
    header: str
    type: str | None
    scope: str | None
    subject: str | None
    body: str | None
    footer: str | None
    # Set when the header is a merge header GitHub generates.
    merge: str | None


def _starts_footer(line: str) -> bool:
    return bool(_NOTE_RE.match(line) or _REFERENCE_RE.match(line))


def _join(lines: list[str]) -> str | None:
    text = "\n".join(lines).strip()
    return text or None


def parse_message(message: str) -> ParsedMessage:
    lines = message.strip("\r\n").replace("\r\n", "\n").split("\n")
    header = lines[0]
    rest = lines[1:]

    commit_type: str | None = None
    scope: str | None = None
    subject: str | None = None
    m = _HEADER_RE.match(header)
    if m is not None:
        commit_type = m.group(1) or None
        scope = m.group(2) or None
        subject = m.group(3)

    footer_at = len(rest)
    for i, line in enumerate(rest):
        if _starts_footer(line):
            footer_at = i
            break

    return ParsedMessage(
        header=header,
        type=commit_type,
        scope=scope,
        subject=subject,
        body=_join(rest[:footer_at]),
        footer=_join(rest[footer_at:]),
        merge=header if _MERGE_RE.match(header) else None,
    )
