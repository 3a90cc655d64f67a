"""XSLT stage built on lxml."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
import logging
import os
from pathlib import Path, PurePosixPath

from lxml import etree

from ditasmith.core.context import RunContext
from ditasmith.core.exceptions import ModuleExecutionError, PipelineConfigurationError

from .base import PipelineModule
from .mappers import FileNameMapper


logger = logging.getLogger(__name__)


@dataclass(slots=True)
class TransformTarget:
    """Source/result pair scheduled for transformation."""

    source: Path
    result: Path
    relative: PurePosixPath | None = None


def replace_extension(name: str, extension: str) -> str:
    """Swap the suffix of ``name`` for ``extension`` (leading dot optional)."""
    suffix = extension if extension.startswith(".") else f".{extension}"
    return str(PurePosixPath(name).with_suffix(suffix))


class XsltModule(PipelineModule):
    """Apply a stylesheet to one file, to manifest entries, or to an include set."""

    def __init__(self) -> None:
        super().__init__()
        self.style: Path | None = None
        self.source: Path | None = None
        self.result: Path | None = None
        self.includes: set[Path] | None = None
        self.source_dir: Path | None = None
        self.destination_dir: Path | None = None
        self.filename_param: str | None = None
        self.filedir_param: str | None = None
        self.reload_stylesheet = False
        self.mapper: FileNameMapper | None = None
        self.extension: str | None = None
        self._compiled: etree.XSLT | None = None

    # ------------------------------------------------------------------ wiring

    def set_style(self, style: Path) -> None:
        self.style = Path(style)
        self._compiled = None

    def set_source(self, source: Path) -> None:
        self.source = Path(source)

    def set_result(self, result: Path) -> None:
        self.result = Path(result)

    def set_includes(self, includes: Iterable[Path]) -> None:
        self.includes = {Path(entry) for entry in includes}

    def set_source_dir(self, source_dir: Path | None) -> None:
        self.source_dir = Path(source_dir) if source_dir is not None else None

    def set_destination_dir(self, destination_dir: Path | None) -> None:
        self.destination_dir = Path(destination_dir) if destination_dir is not None else None

    def set_filename_param(self, name: str | None) -> None:
        self.filename_param = name

    def set_filedir_param(self, name: str | None) -> None:
        self.filedir_param = name

    def set_reload_stylesheet(self, reload: bool) -> None:
        self.reload_stylesheet = reload

    def set_mapper(self, mapper: FileNameMapper | None) -> None:
        self.mapper = mapper

    def set_extension(self, extension: str | None) -> None:
        self.extension = extension

    # --------------------------------------------------------------- execution

    def execute(self, context: RunContext) -> Mapping[str, str] | None:
        if self.style is None:
            raise ModuleExecutionError("Stylesheet not defined")
        targets = self.plan()
        logger.debug("Transforming %d file(s) with %s", len(targets), self.style)
        for target in targets:
            self.transform(target)
        return None

    def plan(self) -> list[TransformTarget]:
        """Return the source/result pairs this module will process."""
        if self.source is not None:
            return [TransformTarget(self.source, self.result or self.source)]

        if self.includes is not None:
            if self.source_dir is None:
                raise ModuleExecutionError("Source directory not defined for include set")
            base = self.source_dir
            names = sorted(self._include_name(entry) for entry in self.includes)
        else:
            base = self.require_job().temp_dir
            names = [info.uri for info in self.selected_files()]
        destination = self.destination_dir or base

        targets: list[TransformTarget] = []
        for name in names:
            output = self.map_name(name)
            if output is None:
                logger.debug("Skipping %s: no output mapping", name)
                continue
            targets.append(TransformTarget(base / name, destination / output, PurePosixPath(name)))
        return targets

    def _include_name(self, entry: Path) -> str:
        """Return ``entry`` relative to the source directory."""
        if not entry.is_absolute():
            return entry.as_posix()
        assert self.source_dir is not None
        try:
            return entry.relative_to(self.source_dir).as_posix()
        except ValueError as exc:
            raise PipelineConfigurationError(
                f"Include entry {entry} is outside the source directory {self.source_dir}"
            ) from exc

    def map_name(self, name: str) -> str | None:
        """Return the output name for ``name``, ``None`` when the mapper rejects it."""
        if self.mapper is not None:
            return self.mapper(name)
        if self.extension is not None:
            return replace_extension(name, self.extension)
        return name

    def _stylesheet(self) -> etree.XSLT:
        if self._compiled is not None and not self.reload_stylesheet:
            return self._compiled
        try:
            compiled = etree.XSLT(etree.parse(str(self.style)))
        except (OSError, etree.XMLSyntaxError, etree.XSLTParseError) as exc:
            raise ModuleExecutionError(f"Failed to load stylesheet {self.style}: {exc}") from exc
        self._compiled = compiled
        return compiled

    def _parameters(self, target: TransformTarget) -> dict[str, str]:
        values = dict(self.params)
        if self.filename_param:
            values[self.filename_param] = target.source.name
        if self.filedir_param:
            if target.relative is not None:
                parent = target.relative.parent.as_posix()
            else:
                parent = target.source.parent.as_posix()
            values[self.filedir_param] = parent or "."
        return {name: etree.XSLT.strparam(value) for name, value in values.items()}

    def transform(self, target: TransformTarget) -> None:
        """Transform one document and write its result."""
        stylesheet = self._stylesheet()
        try:
            document = etree.parse(str(target.source))
            output = stylesheet(document, **self._parameters(target))
        except (OSError, etree.XMLSyntaxError, etree.XSLTApplyError) as exc:
            raise ModuleExecutionError(
                f"Failed to transform document {target.source}: {exc}"
            ) from exc
        for entry in stylesheet.error_log:
            self.logger.warning(f"{target.source}: {entry.message}")

        payload = bytes(output)
        try:
            target.result.parent.mkdir(parents=True, exist_ok=True)
            if target.result.resolve() == target.source.resolve():
                scratch = target.result.with_name(f"{target.result.name}.tmp")
                scratch.write_bytes(payload)
                os.replace(scratch, target.result)
            else:
                target.result.write_bytes(payload)
        except OSError as exc:
            raise ModuleExecutionError(f"Failed to write {target.result}: {exc}") from exc


__all__ = ["TransformTarget", "XsltModule", "replace_extension"]
