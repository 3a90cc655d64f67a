"""Base class shared by runnable pipeline modules."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping

from ditasmith.core.context import RunContext
from ditasmith.core.diagnostics import DiagnosticEmitter, NullEmitter
from ditasmith.core.exceptions import ModuleExecutionError
from ditasmith.core.job import FileInfo, Job
from ditasmith.core.selectors import FileInfoPredicate


class PipelineModule(ABC):
    """Runnable stage wired by the pipeline before :meth:`execute` is called.

    ``execute`` may return attributes that later stages should see; anything it
    reads from its own :class:`RunContext` stays local to the stage.
    """

    def __init__(self) -> None:
        self.logger: DiagnosticEmitter = NullEmitter()
        self.job: Job | None = None
        self.file_info_filter: FileInfoPredicate | None = None
        self.params: dict[str, str] = {}

    def set_logger(self, logger: DiagnosticEmitter) -> None:
        self.logger = logger

    def set_job(self, job: Job) -> None:
        self.job = job

    def set_file_info_filter(self, predicate: FileInfoPredicate | None) -> None:
        self.file_info_filter = predicate

    def set_param(self, name: str, value: str) -> None:
        self.params[name] = value

    def require_job(self) -> Job:
        """Return the job manifest or fail when the module was not wired."""
        if self.job is None:
            raise ModuleExecutionError(f"{type(self).__name__} has no job configured")
        return self.job

    def selected_files(self) -> list[FileInfo]:
        """Return the manifest entries accepted by the module's filter."""
        return self.require_job().file_infos(self.file_info_filter)

    @abstractmethod
    def execute(self, context: RunContext) -> Mapping[str, str] | None:
        """Run the module against the job manifest."""


__all__ = ["PipelineModule"]
