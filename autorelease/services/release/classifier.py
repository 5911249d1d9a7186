from __future__ import annotations

import re
from dataclasses import dataclass

from autorelease.services.release.conventional import ParsedMessage, parse_message

# Anchored at the start of the body or footer text, case-sensitive.
_BREAKING_RE = re.compile(r"BREAKING\s+CHANGES?:\s+")


@dataclass(frozen=True, slots=True)
class Classification:
    header: str
    type: str | None
    scope: str | None
    subject: str | None
    is_breaking: bool


def is_breaking_change(body: str | None, footer: str | None) -> bool:
    return bool(_BREAKING_RE.match(body or "") or _BREAKING_RE.match(footer or ""))


def is_merge_commit(parsed: ParsedMessage) -> bool:
    return parsed.merge is not None or parsed.header.startswith("Merge")


def classify(message: str) -> Classification | None:
    """Classify a raw commit message; None for merge commits."""
    parsed = parse_message(message)
    if is_merge_commit(parsed):
        return None
    return Classification(
        header=parsed.header,
        type=parsed.type,
        scope=parsed.scope,
        subject=parsed.subject,
        is_breaking=is_breaking_change(parsed.body, parsed.footer),
    )
