"""Diagnostic sinks handed to pipeline stages.

Stages never print. They report warnings, errors and structured events
through a :class:`DiagnosticEmitter`; the library default forwards to
:mod:`logging`, the CLI swaps in a rich-backed emitter.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
import logging
from typing import Any, Protocol, runtime_checkable


logger = logging.getLogger(__name__)


@runtime_checkable
class DiagnosticEmitter(Protocol):
    """Interface used to surface warnings, errors, and structured events."""

    debug_enabled: bool

    def warning(self, message: str, exc: BaseException | None = None) -> None: ...

    def error(self, message: str, exc: BaseException | None = None) -> None: ...

    def event(self, name: str, payload: Mapping[str, Any]) -> None: ...


class NullEmitter:
    """Emitter discarding every diagnostic."""

    debug_enabled: bool = False

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        return

    def error(self, message: str, exc: BaseException | None = None) -> None:
        return

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        return


class LoggingEmitter:
    """Emitter writing diagnostics to a :class:`logging.Logger`.

    Known events are logged at INFO with a readable summary, anything else
    at DEBUG with its raw payload.
    """

    def __init__(
        self, *, logger_obj: logging.Logger | None = None, debug_enabled: bool = False
    ) -> None:
        self._logger = logger_obj or logger
        self.debug_enabled = debug_enabled

    def warning(self, message: str, exc: BaseException | None = None) -> None:
        self._logger.warning(message, exc_info=exc)

    def error(self, message: str, exc: BaseException | None = None) -> None:
        self._logger.error(message, exc_info=exc)

    def event(self, name: str, payload: Mapping[str, Any]) -> None:
        summary = format_event_message(name, payload)
        if summary is None:
            self._logger.debug("diagnostic event %s: %s", name, dict(payload))
        else:
            self._logger.info(summary)


def ensure_emitter(emitter: DiagnosticEmitter | None) -> DiagnosticEmitter:
    """Return ``emitter``, or a :class:`NullEmitter` when none was given."""
    return emitter if emitter is not None else NullEmitter()


def _stage_start(data: dict[str, Any]) -> str:
    kind = data.get("kind")
    suffix = f" ({kind})" if kind else ""
    return f"Running stage {data.get('index')}: {data.get('stage') or '<unknown>'}{suffix}"


def _stage_complete(data: dict[str, Any]) -> str:
    stage = data.get("stage") or "<unknown>"
    elapsed = data.get("elapsed_ms")
    if elapsed is None:
        return f"Finished stage {stage}"
    return f"Finished stage {stage} in {elapsed} ms"


_EVENT_FORMATTERS: dict[str, Callable[[dict[str, Any]], str]] = {
    "stage_start": _stage_start,
    "stage_complete": _stage_complete,
}


def format_event_message(name: str, payload: Mapping[str, Any]) -> str | None:
    """Return a one-line summary for known events, ``None`` otherwise."""
    formatter = _EVENT_FORMATTERS.get(name)
    if formatter is None:
        return None
    return formatter(dict(payload))


__all__ = [
    "DiagnosticEmitter",
    "LoggingEmitter",
    "NullEmitter",
    "ensure_emitter",
    "format_event_message",
]
