"""Output file name mappers used by transform stages."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import PurePosixPath
import re

from ditasmith.core.config import MapperConfig, MapperType
from ditasmith.core.exceptions import PipelineConfigurationError


FileNameMapper = Callable[[str], "str | None"]


def identity_mapper(name: str) -> str | None:
    return name


def flatten_mapper(name: str) -> str | None:
    return PurePosixPath(name).name


def glob_mapper(from_pattern: str, to_pattern: str) -> FileNameMapper:
    """Map names matching ``from_pattern`` (one ``*``) onto ``to_pattern``."""
    if from_pattern.count("*") != 1:
        raise PipelineConfigurationError(
            f"Glob mapper pattern '{from_pattern}' must contain exactly one '*'"
        )
    prefix, suffix = from_pattern.split("*")

    def mapper(name: str) -> str | None:
        if len(name) < len(prefix) + len(suffix):
            return None
        if not (name.startswith(prefix) and name.endswith(suffix)):
            return None
        middle = name[len(prefix) : len(name) - len(suffix)]
        return to_pattern.replace("*", middle)

    return mapper


def regexp_mapper(from_pattern: str, to_pattern: str) -> FileNameMapper:
    """Map names matching a regular expression, expanding ``\\N`` groups."""
    try:
        expression = re.compile(from_pattern)
    except re.error as exc:
        raise PipelineConfigurationError(
            f"Invalid regexp mapper pattern '{from_pattern}': {exc}"
        ) from exc

    def mapper(name: str) -> str | None:
        match = expression.search(name)
        if match is None:
            return None
        return match.expand(to_pattern)

    return mapper


def build_mapper(config: MapperConfig) -> FileNameMapper:
    """Return the mapping callable described by ``config``."""
    match config.type:
        case MapperType.IDENTITY:
            return identity_mapper
        case MapperType.FLATTEN:
            return flatten_mapper
        case MapperType.GLOB:
            return glob_mapper(str(config.from_pattern), str(config.to_pattern))
        case MapperType.REGEXP:
            return regexp_mapper(str(config.from_pattern), str(config.to_pattern))
    raise PipelineConfigurationError(f"Unsupported mapper type '{config.type}'")


__all__ = [
    "FileNameMapper",
    "build_mapper",
    "flatten_mapper",
    "glob_mapper",
    "identity_mapper",
    "regexp_mapper",
]
