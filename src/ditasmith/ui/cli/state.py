"""Per-invocation CLI state: verbosity, traceback mode and rich consoles."""

from __future__ import annotations

from contextvars import ContextVar
from dataclasses import dataclass, field
import sys
from typing import IO, Any

import click
from rich.console import Console
from rich.text import Text

from ditasmith.core.exceptions import exception_messages


__all__ = [
    "CLIState",
    "debug_enabled",
    "emit_error",
    "emit_warning",
    "get_cli_state",
    "render_message",
    "set_cli_state",
]

LEVEL_STYLES = {"warning": "yellow", "error": "red"}


@dataclass(slots=True)
class CLIState:
    """Options shared by the commands of one CLI invocation."""

    verbosity: int = 0
    show_tracebacks: bool = False
    _consoles: dict[str, Console] = field(default_factory=dict, init=False, repr=False)

    def _bound_console(self, key: str, stream: IO[str], **options: Any) -> Console:
        console = self._consoles.get(key)
        # Test runners swap the standard streams between invocations.
        if console is None or console.file is not stream:
            console = Console(file=stream, **options)
            self._consoles[key] = console
        return console

    @property
    def console(self) -> Console:
        """Console writing to the current standard output."""
        return self._bound_console("out", sys.stdout)

    @property
    def err_console(self) -> Console:
        """Console writing to the current standard error."""
        return self._bound_console("err", sys.stderr, highlight=False)


_current_state: ContextVar[CLIState | None] = ContextVar("ditasmith_cli_state", default=None)


def get_cli_state(ctx: click.Context | None = None, *, create: bool = True) -> CLIState:
    """Return the state bound to ``ctx``, the active click context, or the process."""
    ctx = ctx or click.get_current_context(silent=True)
    if ctx is not None:
        state = ctx.find_object(CLIState)
        if state is None and create:
            state = ctx.ensure_object(CLIState)
        if state is not None:
            _current_state.set(state)
            return state

    state = _current_state.get()
    if state is None:
        if not create:
            raise RuntimeError("CLI state is not initialised for this context.")
        state = CLIState()
        _current_state.set(state)
    return state


def set_cli_state(
    *,
    ctx: click.Context | None = None,
    verbosity: int | None = None,
    debug: bool | None = None,
) -> CLIState:
    """Apply command options to the current state and return it."""
    state = get_cli_state(ctx)
    if verbosity is not None:
        state.verbosity = max(0, verbosity)
    if debug is not None:
        state.show_tracebacks = debug
    return state


def _exception_details(exc: BaseException, verbosity: int) -> list[str]:
    if verbosity < 1:
        return []
    details = [f"type: {type(exc).__name__}"]
    if verbosity >= 2:
        causes = exception_messages(exc)[1:]
        if causes:
            details.append("caused by:")
            details.extend(f"  {cause}" for cause in causes)
    return details


def render_message(
    level: str,
    message: str,
    *,
    exception: BaseException | None = None,
) -> None:
    """Print ``message``; warnings and errors go to stderr with optional details."""
    state = get_cli_state()
    if level == "info":
        state.console.log(message)
        return

    style = LEVEL_STYLES.get(level, "bold")
    text = Text.assemble((f"{level}: ", f"bold {style}"), (message, style))
    if exception is not None:
        details = _exception_details(exception, state.verbosity)
        if details:
            text.append("\n" + "\n".join(details), style=style)
    state.err_console.print(text)


def emit_warning(message: str, *, exception: BaseException | None = None) -> None:
    render_message("warning", message, exception=exception)


def emit_error(message: str, *, exception: BaseException | None = None) -> None:
    render_message("error", message, exception=exception)


def debug_enabled() -> bool:
    """Return whether full tracebacks were requested."""
    try:
        return get_cli_state(create=False).show_tracebacks
    except RuntimeError:
        return False
