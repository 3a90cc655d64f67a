"""Typer application wiring for the ditasmith CLI."""

from __future__ import annotations

import typer

from ditasmith.version import get_version

from .commands import job, run
from .state import debug_enabled, emit_error


app = typer.Typer(
    help="Run document-processing pipelines over a shared job manifest.",
    context_settings={"help_option_names": ["--help"]},
    no_args_is_help=True,
)

app.command()(run)
app.command()(job)


@app.command()
def version() -> None:
    """Print the installed version."""
    typer.echo(get_version())


def main() -> None:
    """Entry point compatible with console scripts."""
    try:
        app()
    except KeyboardInterrupt as exc:
        if debug_enabled():
            raise
        emit_error("Operation cancelled by user.", exception=exc)
        raise SystemExit(1) from exc


__all__ = ["app", "main"]
