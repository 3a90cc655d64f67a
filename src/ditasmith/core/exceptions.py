"""Custom exception hierarchy for the processing pipeline."""

from __future__ import annotations


class PipelineError(RuntimeError):
    """Base exception for pipeline failures."""


class PipelineConfigurationError(PipelineError):
    """Raised when a pipeline or stage declaration cannot be executed."""


class ModuleExecutionError(PipelineError):
    """Raised by a stage when it fails while running."""


class JobError(PipelineError):
    """Raised when the job manifest cannot be read or initialised."""


class PipelineFailure(PipelineError):
    """Run-level failure wrapping the error that aborted the pipeline."""

    def __init__(
        self,
        message: str,
        *,
        stage_index: int | None = None,
        stage_name: str | None = None,
    ) -> None:
        super().__init__(message)
        self.stage_index = stage_index
        self.stage_name = stage_name


def exception_messages(exc: BaseException) -> list[str]:
    """Return the collected message chain for an exception and its causes."""
    messages: list[str] = []
    visited: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in visited:
        visited.add(id(current))
        text = str(current).strip()
        if text:
            first_line = text.splitlines()[0].strip()
            if first_line:
                messages.append(first_line)
        current = current.__cause__ or current.__context__
    return messages


def exception_hint(exc: BaseException) -> str | None:
    """Return the most specific message available for an exception chain."""
    messages = exception_messages(exc)
    return messages[-1] if messages else None


__all__ = [
    "JobError",
    "ModuleExecutionError",
    "PipelineConfigurationError",
    "PipelineError",
    "PipelineFailure",
    "exception_hint",
    "exception_messages",
]
