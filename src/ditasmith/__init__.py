"""Sequential document-processing pipeline driven by a shared job manifest."""

from __future__ import annotations

from ditasmith.core import (
    FileInfo,
    FileInfoFilter,
    IncludesFile,
    Job,
    JobCache,
    JobError,
    MapperConfig,
    ModuleExecutionError,
    ModuleStage,
    Param,
    PipelineConfig,
    PipelineConfigurationError,
    PipelineError,
    PipelineFailure,
    RunContext,
    SaxPipeStage,
    XmlFilterConfig,
    XsltStage,
    combine,
    get_job,
    is_active,
    load_pipeline,
    resolve_includes,
)
from ditasmith.modules import (
    PipelineModule,
    XmlFilter,
    register_filter,
    register_module,
)
from ditasmith.pipeline import Pipeline, PipelineResult, run_pipeline
from ditasmith.version import get_version


__version__ = get_version()

__all__ = [
    "FileInfo",
    "FileInfoFilter",
    "IncludesFile",
    "Job",
    "JobCache",
    "JobError",
    "MapperConfig",
    "ModuleExecutionError",
    "ModuleStage",
    "Param",
    "Pipeline",
    "PipelineConfig",
    "PipelineConfigurationError",
    "PipelineError",
    "PipelineFailure",
    "PipelineModule",
    "PipelineResult",
    "RunContext",
    "SaxPipeStage",
    "XmlFilter",
    "XmlFilterConfig",
    "XsltStage",
    "__version__",
    "combine",
    "get_job",
    "is_active",
    "load_pipeline",
    "register_filter",
    "register_module",
    "resolve_includes",
    "run_pipeline",
]
