"""Rich presentation helpers for pipeline runs and job manifests."""

from __future__ import annotations

from collections.abc import Sequence

from rich import box
from rich.table import Table

from ditasmith.core.job import Job
from ditasmith.pipeline import PipelineResult

from .state import CLIState


def _flag(value: bool) -> str:
    return "yes" if value else ""


def _print_table(
    state: CLIState, title: str, headers: Sequence[str], rows: Sequence[Sequence[str]]
) -> None:
    table = Table(box=box.SQUARE, header_style="bold cyan", title=title or None)
    for header in headers:
        table.add_column(header)
    for row in rows:
        table.add_row(*row)
    state.console.print(table)


def present_run_summary(state: CLIState, result: PipelineResult) -> None:
    """Display the stages that ran and their timings."""
    rows = [
        (str(stage.index), stage.name, stage.kind, f"{stage.elapsed_ms} ms")
        for stage in result.stages
    ]
    _print_table(state, "Pipeline Summary", ("#", "Stage", "Kind", "Time"), rows)


def present_job(state: CLIState, job: Job) -> None:
    """Display the entries of a job manifest."""
    if not len(job):
        state.console.print(f"No files recorded in {job.path}")
        return
    rows = [
        (
            info.uri,
            info.format or "",
            _flag(info.has_conref),
            _flag(info.is_resource_only),
            _flag(info.is_input),
        )
        for info in job.file_infos()
    ]
    _print_table(
        state,
        f"Job {job.temp_dir} (generation {job.generation})",
        ("URI", "Format", "Conref", "Resource only", "Input"),
        rows,
    )


__all__ = ["present_job", "present_run_summary"]
