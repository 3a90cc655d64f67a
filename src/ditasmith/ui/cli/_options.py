"""Shared Typer option definitions for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer


RUN_PANEL = "Run Settings"
DIAGNOSTICS_PANEL = "Diagnostics"

PipelineArgument = Annotated[
    Path,
    typer.Argument(
        metavar="PIPELINE",
        help="YAML pipeline declaration listing the stages to execute.",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
        resolve_path=True,
    ),
]

TempDirOption = Annotated[
    Path | None,
    typer.Option(
        "--temp-dir",
        "-t",
        help="Work directory holding the job manifest (overrides the declaration).",
        rich_help_panel=RUN_PANEL,
    ),
]

BaseDirOption = Annotated[
    Path | None,
    typer.Option(
        "--base-dir",
        "-b",
        help="Directory used to resolve relative paths (defaults to the pipeline's folder).",
        rich_help_panel=RUN_PANEL,
    ),
]

MessageOption = Annotated[
    str | None,
    typer.Option(
        "--message",
        "-m",
        help="Free-form message exposed to stages.",
        rich_help_panel=RUN_PANEL,
    ),
]

InputMapOption = Annotated[
    str | None,
    typer.Option(
        "--input-map",
        help="Input map reference exposed to stages.",
        rich_help_panel=RUN_PANEL,
    ),
]

DefineOption = Annotated[
    list[str] | None,
    typer.Option(
        "--define",
        "-D",
        metavar="NAME[=VALUE]",
        help="Define a property used by if/unless conditions. Repeatable.",
        rich_help_panel=RUN_PANEL,
    ),
]

VerboseOption = Annotated[
    int,
    typer.Option(
        "--verbose",
        "-v",
        count=True,
        help="Increase CLI verbosity. Combine multiple times for additional diagnostics.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]

DebugOption = Annotated[
    bool,
    typer.Option(
        "--debug",
        help="Show full tracebacks when an unexpected error occurs.",
        rich_help_panel=DIAGNOSTICS_PANEL,
    ),
]
