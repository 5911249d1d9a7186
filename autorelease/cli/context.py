from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass

import typer

from autorelease.core.config import ReleaseConfig, load_config
from autorelease.core.errors import ErrorCode
from autorelease.core.result import Err
from autorelease.github.client import RestRemote
from autorelease.github.http import RealHttpClient
from autorelease.github.remote import GitHubRemote
from autorelease.output.console import ConsoleProtocol, RichConsole
from autorelease.output.errors import print_config_error


@dataclass(frozen=True, slots=True)
class CLIContext:
    config: ReleaseConfig
    remote: GitHubRemote
    console: ConsoleProtocol


def build_context(overrides: Mapping[str, str]) -> CLIContext:
    """Load config from the environment plus CLI overrides and wire the remote."""
    console = RichConsole()
    env = {**os.environ, **overrides}
    config_result = load_config(env)
    if isinstance(config_result, Err):
        print_config_error(config_result.error, console)
        raise typer.Exit(code=int(ErrorCode.USER_ERROR))

    config = config_result.value
    http = RealHttpClient(config.token)
    return CLIContext(
        config=config,
        remote=RestRemote(http, config.repo, api_url=config.api_url),
        console=console,
    )
