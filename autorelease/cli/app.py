from __future__ import annotations

import typer

from autorelease import __version__
from autorelease.cli.context import build_context
from autorelease.core import config as keys
from autorelease.core.errors import ErrorCode
from autorelease.core.result import Err
from autorelease.output.actions import export_outputs
from autorelease.output.console import Style
from autorelease.output.errors import print_release_error, release_error_exit_code
from autorelease.services.release.service import RunState, run_release


app = typer.Typer(
    add_completion=False,
    rich_markup_mode="rich",
    help="Create or refresh a GitHub release with a changelog built from commits.",
)


def _flag(value: bool) -> str:
    return "true" if value else "false"


def collect_overrides(
    *,
    auto_release_tag: str | None,
    auto_release_title: str | None,
    draft: bool | None,
    prerelease: bool | None,
    branch: str | None,
    previous_tag: str | None,
    dry_run: bool,
) -> dict[str, str]:
    """Map CLI options onto the environment keys they replace."""
    out: dict[str, str] = {}
    if auto_release_tag is not None:
        out[keys.AUTO_RELEASE_TAG] = auto_release_tag
    if auto_release_title is not None:
        out[keys.AUTO_RELEASE_TITLE] = auto_release_title
    if draft is not None:
        out[keys.IS_DRAFT] = _flag(draft)
    if prerelease is not None:
        out[keys.IS_PRERELEASE] = _flag(prerelease)
    if branch is not None:
        out[keys.BRANCH] = branch
    if previous_tag is not None:
        out[keys.PREVIOUS_TAG] = previous_tag
    if dry_run:
        out[keys.DRY_RUN] = "true"
    return out


@app.command()
def release(
    auto_release_tag: str | None = typer.Option(
        None, "--auto-release-tag", help="Rolling tag to move to the branch head"
    ),
    auto_release_title: str | None = typer.Option(
        None, "--auto-release-title", help="Release title for the rolling tag"
    ),
    draft: bool | None = typer.Option(None, "--draft/--no-draft", help="Publish as a draft"),
    prerelease: bool | None = typer.Option(
        None, "--prerelease/--no-prerelease", help="Mark as a prerelease"
    ),
    branch: str | None = typer.Option(None, "--branch", help="Branch whose head is released"),
    previous_tag: str | None = typer.Option(
        None, "--previous-tag", help="Start the changelog at this tag"
    ),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print actions without modifying"),
    version: bool = typer.Option(False, "--version", help="Show version and exit."),
) -> None:
    if version:
        typer.echo(__version__)
        raise typer.Exit(code=0)

    ctx = build_context(
        collect_overrides(
            auto_release_tag=auto_release_tag,
            auto_release_title=auto_release_title,
            draft=draft,
            prerelease=prerelease,
            branch=branch,
            previous_tag=previous_tag,
            dry_run=dry_run,
        )
    )
    console = ctx.console

    def trace(state: RunState) -> None:
        console.print(f"state: {state.value}", Style.DIM)

    if ctx.config.dry_run:
        console.warning("dry run: no tags or releases will be written")

    outcome = run_release(ctx.remote, ctx.config, console, on_state=trace)
    if isinstance(outcome, Err):
        print_release_error(outcome.error, console)
        raise typer.Exit(code=release_error_exit_code(outcome.error))

    exported = export_outputs(outcome.value, ctx.config, console)
    if isinstance(exported, Err):
        console.error(f"cannot write outputs to {exported.error.path}: {exported.error.reason}")
        raise typer.Exit(code=int(ErrorCode.IO_ERROR))
    trace(RunState.OUTPUTS_EXPORTED)

    console.success(f"Released {outcome.value.tag}")


def main() -> None:
    app()
