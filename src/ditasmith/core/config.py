"""Declarative pipeline configuration models.

PipelineConfig

`message` (`str | None`)
: Free-form text exposed to stages as the ``message`` attribute.

`input_map` (`str | None`)
: Input map reference, exposed as the ``inputmap`` attribute.

`temp_dir` / `base_dir` (`Path | None`)
: Work directory holding the job manifest and base directory used to resolve
  relative paths.

`params` (`list[Param]`)
: Run-wide parameters, each independently gated with ``if``/``unless``.

`stages` (`list[Stage]`)
: Ordered stage declarations, discriminated by ``kind``.

Stage kinds

`module`
: Generic stage resolved through the module registry. Active parameters are
  written into the stage's run context; ``fileset`` clauses restrict which
  manifest entries it processes.

`transform`
: XSLT stage. Exactly one source mode applies: ``in``/``out`` pair, ``fileset``
  clauses with a ``destdir``, or ``includes``/``excludes`` list files with a
  ``basedir``.

`filter-chain`
: Ordered list of streaming filters applied to manifest entries. ``format``
  defaults to the ``dita`` and ``ditamap`` document formats.
"""

from __future__ import annotations

from collections.abc import Collection, Iterable
from enum import Enum
from pathlib import Path
from typing import Annotated, Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .conditions import Conditional
from .exceptions import PipelineConfigurationError
from .includes import IncludesFile
from .selectors import FileInfoFilter, format_filters


class Param(Conditional):
    """Name/value pair whose value comes from a literal, a location or an expression."""

    name: str | None = None
    value: str | None = None
    location: Path | None = None
    expression: str | None = None

    @model_validator(mode="after")
    def _single_value_source(self) -> Param:
        sources = [
            entry for entry in (self.value, self.location, self.expression) if entry is not None
        ]
        if len(sources) > 1:
            msg = "Parameter accepts only one of 'value', 'location' or 'expression'"
            raise ValueError(msg)
        return self

    @property
    def resolved_value(self) -> str | None:
        """Return the parameter value rendered as a string."""
        if self.value is not None:
            return self.value
        if self.location is not None:
            return str(self.location)
        return self.expression

    def is_valid(self) -> bool:
        """Return True when both name and value are set."""
        return self.name is not None and self.resolved_value is not None


def active_params(params: Iterable[Param], properties: Collection[str]) -> dict[str, str]:
    """Validate ``params`` and return the active ones as a name/value mapping."""
    resolved: dict[str, str] = {}
    for param in params:
        if not param.is_valid():
            raise PipelineConfigurationError("Incomplete parameter")
        if param.is_active(properties):
            resolved[str(param.name)] = str(param.resolved_value)
    return resolved


class MapperType(str, Enum):
    """Output file name mapping strategies."""

    IDENTITY = "identity"
    FLATTEN = "flatten"
    GLOB = "glob"
    REGEXP = "regexp"


class MapperConfig(BaseModel):
    """Output path remapping rule for transform stages."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    type: MapperType = MapperType.IDENTITY
    from_pattern: str | None = Field(default=None, alias="from")
    to_pattern: str | None = Field(default=None, alias="to")

    @model_validator(mode="after")
    def _require_patterns(self) -> MapperConfig:
        if self.type in (MapperType.GLOB, MapperType.REGEXP) and (
            self.from_pattern is None or self.to_pattern is None
        ):
            raise ValueError(f"Mapper '{self.type.value}' requires 'from' and 'to' patterns")
        return self


class StageBase(BaseModel):
    """Fields shared by every stage declaration."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    name: str | None = None
    params: list[Param] = Field(default_factory=list)
    fileset: list[FileInfoFilter] = Field(default_factory=list)

    @property
    def label(self) -> str:
        """Return a human readable identifier for diagnostics."""
        return self.name or getattr(self, "kind", "stage")

    def validate_stage(self) -> None:
        """Check the declaration before any stage of the run executes."""
        for param in self.params:
            if not param.is_valid():
                raise PipelineConfigurationError("Incomplete parameter")


class ModuleStage(StageBase):
    """Generic stage resolved through the module registry."""

    kind: Literal["module"] = "module"
    implementation: str | None = None

    @property
    def label(self) -> str:
        return self.name or self.implementation or "module"

    def validate_stage(self) -> None:
        super().validate_stage()
        if not self.implementation:
            raise PipelineConfigurationError("Module implementation not defined")


class XsltSourceMode(str, Enum):
    """How a transform stage selects its input documents."""

    SINGLE = "single"
    FILESET = "fileset"
    INCLUDES = "includes"


class XsltStage(StageBase):
    """XSLT transform stage."""

    kind: Literal["transform"] = "transform"
    style: Path
    basedir: Path | None = None
    destdir: Path | None = None
    in_file: Path | None = Field(default=None, alias="in")
    out_file: Path | None = Field(default=None, alias="out")
    includesfile: Path | None = None
    excludesfile: Path | None = None
    includes: list[IncludesFile] = Field(default_factory=list)
    excludes: list[IncludesFile] = Field(default_factory=list)
    mapper: MapperConfig | None = None
    extension: str | None = None
    filenameparameter: str | None = None
    filedirparameter: str | None = None
    reloadstylesheet: bool = False

    @field_validator("mapper", mode="before")
    @classmethod
    def _single_mapper(cls, value: Any) -> Any:
        if isinstance(value, list):
            if len(value) > 1:
                raise ValueError("Cannot define more than one mapper")
            return value[0] if value else None
        return value

    @property
    def label(self) -> str:
        return self.name or f"transform {self.style.name}"

    @property
    def include_sources(self) -> list[IncludesFile]:
        """Return include list files, attribute shorthand first."""
        sources = [IncludesFile(file=self.includesfile)] if self.includesfile else []
        return sources + list(self.includes)

    @property
    def exclude_sources(self) -> list[IncludesFile]:
        """Return exclude list files, attribute shorthand first."""
        sources = [IncludesFile(file=self.excludesfile)] if self.excludesfile else []
        return sources + list(self.excludes)

    def add_mapper(self, mapper: MapperConfig) -> None:
        """Attach the output mapper, refusing a second one."""
        if self.mapper is not None:
            raise PipelineConfigurationError("Cannot define more than one mapper")
        self.mapper = mapper

    def source_mode(self) -> XsltSourceMode:
        """Return the single source-selection mode this stage uses."""
        single = self.in_file is not None or self.out_file is not None
        fileset = bool(self.fileset)
        includes = bool(self.include_sources)
        if sum((single, fileset, includes)) > 1:
            raise PipelineConfigurationError(
                f"Transform '{self.label}' mixes source modes; use only one of "
                "in/out, fileset or includes"
            )
        if single:
            if self.in_file is None or self.out_file is None:
                raise PipelineConfigurationError(
                    f"Transform '{self.label}' requires both 'in' and 'out'"
                )
            return XsltSourceMode.SINGLE
        if fileset:
            return XsltSourceMode.FILESET
        if includes:
            if self.basedir is None:
                raise PipelineConfigurationError(
                    f"Transform '{self.label}' requires 'basedir' with include files"
                )
            return XsltSourceMode.INCLUDES
        raise PipelineConfigurationError(
            f"Unable to determine the source files of transform '{self.label}'"
        )

    def validate_stage(self) -> None:
        super().validate_stage()
        self.source_mode()


class XmlFilterConfig(Conditional):
    """Single entry of a filter chain."""

    name: str | None = None
    implementation: str | None = None
    params: list[Param] = Field(default_factory=list)
    fileset: list[FileInfoFilter] = Field(default_factory=list)

    @property
    def label(self) -> str:
        return self.name or self.implementation or "filter"


class SaxPipeStage(StageBase):
    """Stage piping manifest entries through an ordered chain of XML filters."""

    kind: Literal["filter-chain"] = "filter-chain"
    format: list[str] | None = None
    filters: list[XmlFilterConfig] = Field(default_factory=list)

    @field_validator("format", mode="before")
    @classmethod
    def _format_list(cls, value: Any) -> Any:
        if isinstance(value, str):
            return [value]
        return value

    @property
    def label(self) -> str:
        return self.name or "filter-chain"

    def default_fileset(self) -> list[FileInfoFilter]:
        """Return the format clauses applied to every entry of the chain."""
        return format_filters(self.format)

    def validate_stage(self) -> None:
        super().validate_stage()
        for entry in self.filters:
            if not entry.implementation:
                raise PipelineConfigurationError(f"Filter '{entry.label}' has no implementation")
            for param in entry.params:
                if not param.is_valid():
                    raise PipelineConfigurationError("Incomplete parameter")


Stage = Annotated[ModuleStage | XsltStage | SaxPipeStage, Field(discriminator="kind")]


class PipelineConfig(BaseModel):
    """Complete pipeline declaration."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    message: str | None = None
    input_map: str | None = Field(default=None, alias="input-map")
    temp_dir: Path | None = Field(default=None, alias="temp-dir")
    base_dir: Path | None = Field(default=None, alias="base-dir")
    params: list[Param] = Field(default_factory=list)
    stages: list[Stage] = Field(default_factory=list)


__all__ = [
    "MapperConfig",
    "MapperType",
    "ModuleStage",
    "Param",
    "PipelineConfig",
    "SaxPipeStage",
    "Stage",
    "StageBase",
    "XmlFilterConfig",
    "XsltSourceMode",
    "XsltStage",
    "active_params",
]
