"""Implementation of the ``ditasmith run`` command."""

from __future__ import annotations

import typer

from ditasmith.core.exceptions import PipelineConfigurationError, PipelineFailure
from ditasmith.core.loader import load_pipeline
from ditasmith.pipeline import Pipeline

from .._options import (
    BaseDirOption,
    DebugOption,
    DefineOption,
    InputMapOption,
    MessageOption,
    PipelineArgument,
    TempDirOption,
    VerboseOption,
)
from ..diagnostics import CliEmitter
from ..presenter import present_run_summary
from ..state import emit_error, set_cli_state
from ..utils import configure_logging, parse_property_definitions


def run(
    ctx: typer.Context,
    pipeline_file: PipelineArgument,
    temp_dir: TempDirOption = None,
    base_dir: BaseDirOption = None,
    message: MessageOption = None,
    input_map: InputMapOption = None,
    define: DefineOption = None,
    verbose: VerboseOption = 0,
    debug: DebugOption = False,
) -> None:
    """Run the stages declared in a pipeline file."""
    state = set_cli_state(ctx=ctx, verbosity=verbose, debug=debug)
    configure_logging(state.verbosity)
    properties = parse_property_definitions(define)

    try:
        config = load_pipeline(pipeline_file)
    except PipelineConfigurationError as exc:
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    emitter = CliEmitter(state)
    pipeline = Pipeline.from_config(
        config,
        temp_dir=temp_dir,
        base_dir=base_dir,
        message=message,
        input_map=input_map,
        properties=properties,
        emitter=emitter,
    )
    try:
        result = pipeline.run()
    except PipelineFailure as exc:
        if state.show_tracebacks:
            from rich.traceback import Traceback

            state.err_console.print(
                Traceback.from_exception(type(exc), exc, exc.__traceback__)
            )
        emit_error(str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    if state.verbosity >= 1:
        present_run_summary(state, result)
    summary = f"Pipeline completed: {len(result.stages)} stage(s) executed"
    if emitter.warning_count:
        summary += f" with {emitter.warning_count} warning(s)"
    state.console.print(f"{summary}.")
