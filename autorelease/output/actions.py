"""Step outputs for GitHub Actions.

Each output is appended as ``name=value`` to the file named by
``$GITHUB_OUTPUT`` and as ``NAME=value`` to ``$GITHUB_ENV``, so later steps
can read it either as ``steps.<id>.outputs.name`` or as an environment
variable. With neither file configured, outputs are only printed.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from autorelease.core.config import ReleaseConfig
from autorelease.core.result import Err, Ok, Result
from autorelease.output.console import ConsoleProtocol
from autorelease.services.release.model import ReleaseOutputs

__all__ = ["ExportError", "export_outputs", "format_lines"]


@dataclass(frozen=True, slots=True)
class ExportError:
    path: Path
    reason: str


def format_lines(outputs: ReleaseOutputs, *, upper: bool = False) -> list[str]:
    return [f"{name.upper() if upper else name}={value}" for name, value in outputs.items()]


def _append(path: Path, lines: list[str]) -> Result[None, ExportError]:
    try:
        with path.open("a", encoding="utf-8") as f:
            for line in lines:
                f.write(line + "\n")
    except OSError as e:
        return Err(ExportError(path=path, reason=str(e)))
    return Ok(None)


def export_outputs(
    outputs: ReleaseOutputs, config: ReleaseConfig, console: ConsoleProtocol
) -> Result[None, ExportError]:
    for name, value in outputs.items():
        console.info(f"Exporting {name}={value}")

    if config.output_file is not None:
        written = _append(config.output_file, format_lines(outputs))
        if isinstance(written, Err):
            return written
    if config.env_file is not None:
        written = _append(config.env_file, format_lines(outputs, upper=True))
        if isinstance(written, Err):
            return written
    return Ok(None)
