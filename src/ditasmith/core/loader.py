"""Load pipeline declarations from YAML documents."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

from pydantic import ValidationError
import yaml

from .config import PipelineConfig
from .exceptions import PipelineConfigurationError


def parse_pipeline(payload: Mapping[str, Any], *, source: str = "<pipeline>") -> PipelineConfig:
    """Validate a mapping against the pipeline schema."""
    try:
        return PipelineConfig.model_validate(dict(payload))
    except ValidationError as exc:
        raise PipelineConfigurationError(f"Invalid pipeline declaration in {source}: {exc}") from exc


def load_pipeline(path: Path | str) -> PipelineConfig:
    """Read a YAML pipeline declaration.

    A missing ``base-dir`` defaults to the directory holding the declaration;
    a relative one is resolved against it.
    """
    path = Path(path)
    try:
        raw_text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise PipelineConfigurationError(f"Unable to read pipeline file {path}: {exc}") from exc
    try:
        payload = yaml.safe_load(raw_text) or {}
    except yaml.YAMLError as exc:
        raise PipelineConfigurationError(f"Invalid YAML in {path}: {exc}") from exc
    if not isinstance(payload, Mapping):
        raise PipelineConfigurationError(f"Pipeline file {path} must contain a mapping")

    config = parse_pipeline(payload, source=str(path))
    root = path.parent.absolute()
    if config.base_dir is None:
        config.base_dir = root
    elif not config.base_dir.is_absolute():
        config.base_dir = root / config.base_dir
    return config


__all__ = ["load_pipeline", "parse_pipeline"]
