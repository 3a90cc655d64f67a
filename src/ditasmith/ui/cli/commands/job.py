"""Implementation of the ``ditasmith job`` command."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from ditasmith.core.exceptions import JobError
from ditasmith.core.job import Job

from ..presenter import present_job
from ..state import emit_error, get_cli_state


def job(
    ctx: typer.Context,
    temp_dir: Annotated[
        Path,
        typer.Argument(
            metavar="TEMP_DIR",
            help="Work directory containing the job manifest.",
            exists=True,
            file_okay=False,
            dir_okay=True,
            resolve_path=True,
        ),
    ],
) -> None:
    """List the files recorded in a job manifest."""
    state = get_cli_state(ctx)
    try:
        manifest = Job(temp_dir)
    except JobError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc
    present_job(state, manifest)
