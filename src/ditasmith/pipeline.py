"""Sequential pipeline orchestrator.

:class:`Pipeline` validates a declaration, seeds the run-wide attributes, binds
the shared job manifest and dispatches each stage to its execution strategy:

`transform`
: builds an :class:`~ditasmith.modules.XsltModule` for one of its three source
  modes.

`filter-chain`
: builds an :class:`~ditasmith.modules.XmlFilterModule` from the active chain
  entries, each paired with its own selection predicate.

`module`
: resolves the implementation through the module registry.

Stages run strictly in declaration order. The first failure aborts the run and
surfaces as a single :class:`~ditasmith.core.exceptions.PipelineFailure`.
"""

from __future__ import annotations

from collections.abc import Collection, Hashable, Iterable, Mapping
from dataclasses import dataclass, field
import logging
from pathlib import Path
import time

from ditasmith.core.config import (
    ModuleStage,
    Param,
    PipelineConfig,
    SaxPipeStage,
    Stage,
    XsltSourceMode,
    XsltStage,
    active_params,
)
from ditasmith.core.context import (
    ATTR_BASEDIR,
    ATTR_INPUTMAP,
    ATTR_MESSAGE,
    ATTR_TEMPDIR,
    RunContext,
)
from ditasmith.core.diagnostics import DiagnosticEmitter, LoggingEmitter
from ditasmith.core.exceptions import (
    PipelineConfigurationError,
    PipelineError,
    PipelineFailure,
)
from ditasmith.core.includes import IncludesFile, resolve_includes
from ditasmith.core.job import Job, JobCache, default_job_cache
from ditasmith.core.selectors import combine
from ditasmith.modules import (
    FilterPair,
    ImplementationRegistry,
    PipelineModule,
    XmlFilter,
    XmlFilterModule,
    XsltModule,
    build_mapper,
    filter_registry,
    module_registry,
)


logger = logging.getLogger(__name__)

TEMP_DIR_PROPERTY = "dita.temp.dir"


@dataclass(slots=True)
class StageResult:
    """Diagnostics recorded for a completed stage."""

    index: int
    name: str
    kind: str
    elapsed_ms: int


@dataclass(slots=True)
class PipelineResult:
    """Outcome of a successful run."""

    job: Job
    attributes: dict[str, str] = field(default_factory=dict)
    stages: list[StageResult] = field(default_factory=list)


class Pipeline:
    """Execute an ordered list of stages against a shared job manifest."""

    def __init__(
        self,
        stages: Iterable[Stage] = (),
        *,
        params: Iterable[Param] = (),
        message: str | None = None,
        input_map: str | None = None,
        temp_dir: Path | str | None = None,
        base_dir: Path | str | None = None,
        properties: Mapping[str, str] | Collection[str] | None = None,
        identity: Hashable | None = None,
        emitter: DiagnosticEmitter | None = None,
        job_cache: JobCache | None = None,
        modules: ImplementationRegistry[PipelineModule] | None = None,
        filters: ImplementationRegistry[XmlFilter] | None = None,
    ) -> None:
        self.stages: list[Stage] = list(stages)
        self.params: list[Param] = list(params)
        self.message = message
        self.input_map = input_map
        self.temp_dir = Path(temp_dir) if temp_dir is not None else None
        self.base_dir = Path(base_dir) if base_dir is not None else None
        if isinstance(properties, Mapping):
            self.properties: dict[str, str] = {str(k): str(v) for k, v in properties.items()}
        else:
            self.properties = dict.fromkeys(properties or (), "")
        self.identity = identity
        self.emitter: DiagnosticEmitter = emitter or LoggingEmitter()
        self.job_cache = job_cache if job_cache is not None else default_job_cache
        self.modules = modules if modules is not None else module_registry
        self.filters = filters if filters is not None else filter_registry

    @classmethod
    def from_config(cls, config: PipelineConfig, **overrides: object) -> Pipeline:
        """Build a pipeline from a declaration; keyword arguments take precedence."""
        options: dict[str, object] = {
            "params": config.params,
            "message": config.message,
            "input_map": config.input_map,
            "temp_dir": config.temp_dir,
            "base_dir": config.base_dir,
        }
        options.update({key: value for key, value in overrides.items() if value is not None})
        return cls(config.stages, **options)  # type: ignore[arg-type]

    def add_stage(self, stage: Stage) -> None:
        self.stages.append(stage)

    def add_param(self, param: Param) -> None:
        self.params.append(param)

    # ----------------------------------------------------------------- running

    def run(self) -> PipelineResult:
        """Run every stage in order, raising :class:`PipelineFailure` on the first error."""
        try:
            attributes = self._initialize()
        except PipelineFailure:
            raise
        except PipelineError as exc:
            raise PipelineFailure(f"Failed to run pipeline: {exc}") from exc

        temp_dir = Path(attributes[ATTR_TEMPDIR])
        identity = self.identity if self.identity is not None else str(temp_dir)
        try:
            job = self.job_cache.get_or_create(temp_dir, identity)
        except PipelineError as exc:
            raise PipelineFailure(f"Failed to run pipeline: {exc}") from exc

        result = PipelineResult(job=job)
        for index, stage in enumerate(self.stages, start=1):
            context = RunContext(attributes)
            try:
                exported, elapsed_ms = self._run_stage(index, stage, context, job)
            except Exception as exc:
                raise PipelineFailure(
                    f"Failed to run pipeline: stage {index} ({stage.label}): {exc}",
                    stage_index=index,
                    stage_name=stage.label,
                ) from exc
            if exported:
                attributes.update({str(k): str(v) for k, v in exported.items()})
            result.stages.append(StageResult(index, stage.label, stage.kind, elapsed_ms))
        result.attributes = dict(attributes)
        return result

    def _initialize(self) -> dict[str, str]:
        if not self.stages:
            raise PipelineConfigurationError("Module must be specified")

        base_dir = (self.base_dir or Path.cwd()).absolute()
        self.base_dir = base_dir
        temp_dir = self._resolve_temp_dir(base_dir)

        attributes: dict[str, str] = {}
        if self.message is not None:
            attributes[ATTR_MESSAGE] = self.message
        if self.input_map is not None:
            attributes[ATTR_INPUTMAP] = self.input_map
        attributes[ATTR_TEMPDIR] = str(temp_dir)
        attributes[ATTR_BASEDIR] = str(base_dir)
        attributes.update(active_params(self.params, self.properties))

        for index, stage in enumerate(self.stages, start=1):
            try:
                stage.validate_stage()
            except PipelineConfigurationError as exc:
                raise PipelineFailure(
                    f"Failed to run pipeline: stage {index} ({stage.label}): {exc}",
                    stage_index=index,
                    stage_name=stage.label,
                ) from exc
        return attributes

    def _resolve_temp_dir(self, base_dir: Path) -> Path:
        if self.temp_dir is not None:
            candidate = self.temp_dir
        else:
            configured = self.properties.get(TEMP_DIR_PROPERTY)
            if not configured:
                raise PipelineConfigurationError("Temporary directory not defined")
            candidate = Path(configured)
        if not candidate.is_absolute():
            candidate = base_dir / candidate
        return candidate.absolute()

    def _resolve_path(self, path: Path) -> Path:
        if path.is_absolute() or self.base_dir is None:
            return path
        return self.base_dir / path

    def _run_stage(
        self, index: int, stage: Stage, context: RunContext, job: Job
    ) -> tuple[Mapping[str, str] | None, int]:
        match stage:
            case XsltStage():
                module, context = self._build_transform(stage, context, job)
            case SaxPipeStage():
                module = self._build_filter_chain(stage)
            case ModuleStage():
                module, context = self._build_module(stage, context)
            case _:
                raise PipelineConfigurationError(f"Unsupported stage type {type(stage).__name__}")

        module.set_logger(self.emitter)
        module.set_job(job)
        self.emitter.event("stage_start", {"index": index, "stage": stage.label, "kind": stage.kind})
        start = time.perf_counter()
        exported = module.execute(context)
        elapsed_ms = int((time.perf_counter() - start) * 1000)
        logger.debug("Module processing took %d ms", elapsed_ms)
        self.emitter.event(
            "stage_complete", {"index": index, "stage": stage.label, "elapsed_ms": elapsed_ms}
        )
        return exported, elapsed_ms

    # ---------------------------------------------------------------- builders

    def _build_transform(
        self, stage: XsltStage, context: RunContext, job: Job
    ) -> tuple[XsltModule, RunContext]:
        mode = stage.source_mode()
        module = XsltModule()
        module.set_style(self._resolve_path(stage.style))

        if mode is XsltSourceMode.SINGLE:
            assert stage.in_file is not None and stage.out_file is not None
            module.set_source(self._resolve_path(stage.in_file))
            module.set_result(self._resolve_path(stage.out_file))
        elif mode is XsltSourceMode.FILESET:
            module.set_file_info_filter(combine(stage.fileset))
            module.set_destination_dir(
                self._resolve_path(stage.destdir) if stage.destdir is not None else job.temp_dir
            )
        else:
            assert stage.basedir is not None
            includes = resolve_includes(
                self._resolve_sources(stage.include_sources),
                self._resolve_sources(stage.exclude_sources),
                self.properties,
                emitter=self.emitter,
            )
            source_dir = self._resolve_path(stage.basedir)
            module.set_includes(includes)
            module.set_source_dir(source_dir)
            module.set_destination_dir(
                self._resolve_path(stage.destdir) if stage.destdir is not None else source_dir
            )

        module.set_filename_param(stage.filenameparameter)
        module.set_filedir_param(stage.filedirparameter)
        module.set_reload_stylesheet(stage.reloadstylesheet)
        if stage.mapper is not None:
            module.set_mapper(build_mapper(stage.mapper))
        if stage.extension is not None:
            module.set_extension(stage.extension)

        params = active_params(stage.params, self.properties)
        for name, value in params.items():
            module.set_param(name, value)
        return module, context.with_attributes(params)

    def _resolve_sources(self, sources: list[IncludesFile]) -> list[IncludesFile]:
        return [
            source.model_copy(update={"file": self._resolve_path(source.file)})
            for source in sources
        ]

    def _build_filter_chain(self, stage: SaxPipeStage) -> XmlFilterModule:
        module = XmlFilterModule()
        defaults = stage.default_fileset()
        module.set_file_info_filter(combine([*defaults, *stage.fileset]))

        pipe: list[FilterPair] = []
        for entry in stage.filters:
            if not entry.is_active(self.properties):
                logger.debug("Skipping inactive filter %s", entry.label)
                continue
            instance = self.filters.create(str(entry.implementation))
            for name, value in active_params(entry.params, self.properties).items():
                instance.set_param(name, value)
            predicates = [*entry.fileset, *defaults]
            assert predicates, f"filter '{entry.label}' has no file selector"
            pipe.append(FilterPair(instance, combine(predicates)))
        module.set_processing_pipe(pipe)
        return module

    def _build_module(
        self, stage: ModuleStage, context: RunContext
    ) -> tuple[PipelineModule, RunContext]:
        params = active_params(stage.params, self.properties)
        module = self.modules.create(str(stage.implementation))
        if stage.fileset:
            module.set_file_info_filter(combine(stage.fileset))
        return module, context.with_attributes(params)


def run_pipeline(config: PipelineConfig, **overrides: object) -> PipelineResult:
    """Build and run a pipeline from a declaration."""
    return Pipeline.from_config(config, **overrides).run()


__all__ = [
    "TEMP_DIR_PROPERTY",
    "Pipeline",
    "PipelineResult",
    "StageResult",
    "run_pipeline",
]
