"""Filter-chain stage piping manifest documents through XML filters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
import logging
import os
from pathlib import Path

from lxml import etree

from ditasmith.core.context import RunContext
from ditasmith.core.diagnostics import DiagnosticEmitter, NullEmitter
from ditasmith.core.exceptions import ModuleExecutionError
from ditasmith.core.job import Job
from ditasmith.core.selectors import FileInfoPredicate

from .base import PipelineModule


logger = logging.getLogger(__name__)


class XmlFilter(ABC):
    """Single filter of a chain, rewriting a parsed document tree."""

    def __init__(self) -> None:
        self.logger: DiagnosticEmitter = NullEmitter()
        self.job: Job | None = None
        self.current_file: Path | None = None
        self.params: dict[str, str] = {}

    def set_param(self, name: str, value: str) -> None:
        self.params[name] = value

    def set_job(self, job: Job) -> None:
        self.job = job

    def set_logger(self, logger: DiagnosticEmitter) -> None:
        self.logger = logger

    def set_current_file(self, path: Path) -> None:
        self.current_file = path

    @abstractmethod
    def filter(self, root: etree._Element) -> etree._Element:
        """Return the filtered root element (may be ``root`` itself)."""


@dataclass(slots=True)
class FilterPair:
    """Filter instance with the predicate deciding which entries it sees."""

    filter: XmlFilter
    predicate: FileInfoPredicate


class XmlFilterModule(PipelineModule):
    """Apply the selected filters of a chain to every matching manifest entry."""

    def __init__(self) -> None:
        super().__init__()
        self.pipe: list[FilterPair] = []

    def set_processing_pipe(self, pipe: Iterable[FilterPair]) -> None:
        self.pipe = list(pipe)

    def execute(self, context: RunContext) -> Mapping[str, str] | None:
        job = self.require_job()
        for info in self.selected_files():
            selected = [pair.filter for pair in self.pipe if pair.predicate(info)]
            if not selected:
                continue
            path = job.temp_dir / info.uri
            if not path.is_file():
                self.logger.warning(f"File not found: {path}")
                continue
            self.process(path, selected)
        return None

    def process(self, path: Path, filters: list[XmlFilter]) -> None:
        """Parse ``path``, run ``filters`` in order and write the result back."""
        logger.debug("Filtering %s through %d filter(s)", path, len(filters))
        try:
            tree = etree.parse(str(path))
        except (OSError, etree.XMLSyntaxError) as exc:
            raise ModuleExecutionError(f"Failed to parse {path}: {exc}") from exc

        root = tree.getroot()
        for entry in filters:
            if self.job is not None:
                entry.set_job(self.job)
            entry.set_logger(self.logger)
            entry.set_current_file(path)
            root = entry.filter(root)
        if root is not tree.getroot():
            tree._setroot(root)

        scratch = path.with_name(f"{path.name}.tmp")
        try:
            tree.write(str(scratch), encoding="UTF-8", xml_declaration=True)
            os.replace(scratch, path)
        except OSError as exc:
            raise ModuleExecutionError(f"Failed to write {path}: {exc}") from exc


__all__ = ["FilterPair", "XmlFilter", "XmlFilterModule"]
