"""Typed configuration loading.

A run is configured from the process environment (the way a GitHub Actions
step receives its inputs), optionally overridden by CLI flags. This module
turns that flat string mapping into a validated, frozen ``ReleaseConfig``.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from .result import Err, Ok, Result

__all__ = [
    "ConfigError",
    "ReleaseConfig",
    "RepoSlug",
    "load_config",
    "DEFAULT_API_URL",
    "DEFAULT_BRANCH",
]

DEFAULT_API_URL = "https://api.github.com"
DEFAULT_BRANCH = "master"

# Input names, as the action passes them.
AUTO_RELEASE_TAG = "auto_release_tag"
AUTO_RELEASE_TITLE = "auto_release_title"
IS_DRAFT = "is_draft"
IS_PRERELEASE = "is_prerelease"
BRANCH = "branch"
PREVIOUS_TAG = "previous_tag"

# Runner-provided variables.
GITHUB_TOKEN = "GITHUB_TOKEN"
GITHUB_REPOSITORY = "GITHUB_REPOSITORY"
GITHUB_REF = "GITHUB_REF"
GITHUB_API_URL = "GITHUB_API_URL"
GITHUB_OUTPUT = "GITHUB_OUTPUT"
GITHUB_ENV = "GITHUB_ENV"
DRY_RUN = "DRY_RUN"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Configuration is missing or malformed."""

    message: str
    key: str | None = None
    hint: str | None = None


@dataclass(frozen=True, slots=True)
class RepoSlug:
    owner: str
    name: str

    @classmethod
    def parse(cls, value: str) -> RepoSlug | None:
        parts = value.strip().split("/")
        if len(parts) != 2 or not parts[0] or not parts[1]:
            return None
        return cls(owner=parts[0], name=parts[1])

    def __str__(self) -> str:
        return f"{self.owner}/{self.name}"


@dataclass(frozen=True, slots=True)
class ReleaseConfig:
    """Settings for a single release run."""

    repo: RepoSlug
    token: str
    ref: str = ""
    branch: str = DEFAULT_BRANCH
    api_url: str = DEFAULT_API_URL
    auto_release_tag: str | None = None
    auto_release_title: str | None = None
    previous_tag: str | None = None
    is_draft: bool = False
    is_prerelease: bool = True
    dry_run: bool = False
    output_file: Path | None = None
    env_file: Path | None = None

    @property
    def rolling(self) -> bool:
        """True when releasing a reusable tag instead of a pushed version tag."""
        return self.auto_release_tag is not None


def _get(env: Mapping[str, str], key: str) -> str | None:
    value = env.get(key)
    if value is None:
        return None
    s = value.strip()
    return s or None


def _get_flag(env: Mapping[str, str], key: str, *, default: bool) -> bool:
    value = _get(env, key)
    if value is None:
        return default
    return value.lower() == "true"


def _get_path(env: Mapping[str, str], key: str) -> Path | None:
    value = _get(env, key)
    return Path(value) if value else None


def load_config(env: Mapping[str, str]) -> Result[ReleaseConfig, ConfigError]:
    """Build a ReleaseConfig from an environment mapping.

    Args:
        env: Usually ``os.environ`` merged with CLI overrides.

    Returns:
        Ok(ReleaseConfig), or Err(ConfigError) naming the first bad key.
    """
    token = _get(env, GITHUB_TOKEN)
    if token is None:
        return Err(
            ConfigError(
                f"{GITHUB_TOKEN} is not set",
                key=GITHUB_TOKEN,
                hint="Pass the workflow token: env: GITHUB_TOKEN: ${{ secrets.GITHUB_TOKEN }}",
            )
        )

    repo_value = _get(env, GITHUB_REPOSITORY)
    if repo_value is None:
        return Err(
            ConfigError(
                f"{GITHUB_REPOSITORY} is not set",
                key=GITHUB_REPOSITORY,
                hint="Expected owner/name, e.g. octo-org/octo-repo",
            )
        )
    repo = RepoSlug.parse(repo_value)
    if repo is None:
        return Err(
            ConfigError(
                f"invalid {GITHUB_REPOSITORY}: {repo_value}",
                key=GITHUB_REPOSITORY,
                hint="Expected owner/name, e.g. octo-org/octo-repo",
            )
        )

    auto_tag = _get(env, AUTO_RELEASE_TAG)
    auto_title = _get(env, AUTO_RELEASE_TITLE)
    if auto_tag is not None and auto_title is None:
        return Err(
            ConfigError(
                f"{AUTO_RELEASE_TITLE} is required when {AUTO_RELEASE_TAG} is set",
                key=AUTO_RELEASE_TITLE,
            )
        )

    return Ok(
        ReleaseConfig(
            repo=repo,
            token=token,
            ref=_get(env, GITHUB_REF) or "",
            branch=_get(env, BRANCH) or DEFAULT_BRANCH,
            api_url=(_get(env, GITHUB_API_URL) or DEFAULT_API_URL).rstrip("/"),
            auto_release_tag=auto_tag,
            auto_release_title=auto_title,
            previous_tag=_get(env, PREVIOUS_TAG),
            is_draft=_get_flag(env, IS_DRAFT, default=False),
            is_prerelease=_get_flag(env, IS_PRERELEASE, default=True),
            dry_run=_get_flag(env, DRY_RUN, default=False),
            output_file=_get_path(env, GITHUB_OUTPUT),
            env_file=_get_path(env, GITHUB_ENV),
        )
    )
