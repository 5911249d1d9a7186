"""Tests for github/errors.py - recoverable remote conditions."""

from __future__ import annotations

from autorelease.github.errors import (
    is_not_found,
    is_reference_exists,
    is_reference_missing,
    is_release_exists,
)
from autorelease.github.http import HttpError, ValidationIssue

URL = "https://api.github.com/repos/octo/demo/git/refs"


def _error(status: int, message: str, *issues: ValidationIssue) -> HttpError:
    return HttpError(url=URL, status=status, message=message, issues=issues)


def test_not_found() -> None:
    assert is_not_found(_error(404, "Not Found"))
    assert not is_not_found(_error(422, "Not Found"))


def test_reference_exists() -> None:
    assert is_reference_exists(_error(422, "Reference already exists"))
    assert not is_reference_exists(_error(422, "Validation Failed"))
    assert not is_reference_exists(_error(409, "Reference already exists"))


def test_reference_missing() -> None:
    assert is_reference_missing(_error(422, "Reference does not exist"))
    assert is_reference_missing(_error(404, "Not Found"))
    assert not is_reference_missing(_error(422, "Reference already exists"))
    assert not is_reference_missing(_error(500, "Reference does not exist"))


def test_release_exists_uses_issues() -> None:
    exists = ValidationIssue(resource="Release", code="already_exists", field="tag_name")
    other = ValidationIssue(resource="Release", code="invalid", field="target_commitish")

    assert is_release_exists(_error(422, "Validation Failed", exists))
    assert is_release_exists(_error(422, "Validation Failed", other, exists))
    assert not is_release_exists(_error(422, "Validation Failed", other))
    assert not is_release_exists(_error(422, "Validation Failed"))
    assert not is_release_exists(_error(500, "Validation Failed", exists))
