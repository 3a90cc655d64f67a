"""Emitter rendering pipeline diagnostics on the terminal."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from ditasmith.core.diagnostics import format_event_message

from .state import CLIState, emit_error, emit_warning, render_message


class CliEmitter:
    """Forward pipeline diagnostics to the rich console helpers.

    Warnings and errors are always printed. Stage events are only shown
    with ``-v``.
    """

    def __init__(self, state: CLIState) -> None:
        self._state = state
        self.debug_enabled = state.show_tracebacks
        self.warning_count = 0

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        self.warning_count += 1
        emit_warning(message, exception=exc)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        emit_error(message, exception=exc)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        if self._state.verbosity < 1:
            return
        message = format_event_message(name, payload)
        if message:
            render_message("info", message)


__all__ = ["CliEmitter"]
