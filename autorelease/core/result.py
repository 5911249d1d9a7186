"""Result type for explicit error handling.

Every remote call and every stage of a release run returns a Result instead
of raising. Callers branch on the outcome, which keeps the recoverable
conditions (a missing tag, an existing release) visible at the call site.

Usage:
    def lookup(tag: str) -> Result[int, str]:
        if tag not in releases:
            return Err(f"no release for {tag}")
        return Ok(releases[tag])

    match lookup("v1.2.0"):
        case Ok(release_id):
            print(f"release {release_id}")
        case Err(error):
            print(f"error: {error}")
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """A successful result.

    Attributes:
        value: The success value.
    """

    value: T

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """A failed result.

    Attributes:
        error: The error value.
    """

    error: E

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result: TypeAlias = Ok[T] | Err[E]
