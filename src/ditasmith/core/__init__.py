"""Core building blocks of the pipeline: configuration, selection and job state."""

from __future__ import annotations

from .conditions import Conditional, is_active
from .config import (
    MapperConfig,
    MapperType,
    ModuleStage,
    Param,
    PipelineConfig,
    SaxPipeStage,
    Stage,
    XmlFilterConfig,
    XsltSourceMode,
    XsltStage,
)
from .context import RunContext
from .diagnostics import DiagnosticEmitter, LoggingEmitter, NullEmitter
from .exceptions import (
    JobError,
    ModuleExecutionError,
    PipelineConfigurationError,
    PipelineError,
    PipelineFailure,
)
from .includes import IncludesFile, resolve_includes
from .job import FileInfo, Job, JobCache, default_job_cache, get_job
from .loader import load_pipeline, parse_pipeline
from .selectors import DEFAULT_FORMATS, FileInfoFilter, combine


__all__ = [
    "DEFAULT_FORMATS",
    "Conditional",
    "DiagnosticEmitter",
    "FileInfo",
    "FileInfoFilter",
    "IncludesFile",
    "Job",
    "JobCache",
    "JobError",
    "LoggingEmitter",
    "MapperConfig",
    "MapperType",
    "ModuleExecutionError",
    "ModuleStage",
    "NullEmitter",
    "Param",
    "PipelineConfig",
    "PipelineConfigurationError",
    "PipelineError",
    "PipelineFailure",
    "RunContext",
    "SaxPipeStage",
    "Stage",
    "XmlFilterConfig",
    "XsltSourceMode",
    "XsltStage",
    "combine",
    "default_job_cache",
    "get_job",
    "is_active",
    "load_pipeline",
    "parse_pipeline",
    "resolve_includes",
]
