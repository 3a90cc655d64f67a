"""Resolution of include/exclude list files for transform stages."""

from __future__ import annotations

from collections.abc import Collection, Iterable
from pathlib import Path

from .conditions import Conditional
from .diagnostics import DiagnosticEmitter, ensure_emitter


class IncludesFile(Conditional):
    """Reference to a newline-delimited list of paths, optionally gated."""

    file: Path


def read_list_file(path: Path, *, emitter: DiagnosticEmitter | None = None) -> set[Path]:
    """Read one path per line, returning an empty set when the file is unusable."""
    entries: set[Path] = set()
    try:
        with Path(path).open(encoding="utf-8") as handle:
            for line in handle:
                value = line.strip()
                if value:
                    entries.add(Path(value))
    except (OSError, UnicodeDecodeError) as exc:
        ensure_emitter(emitter).warning(f"Failed to read includes file {path}: {exc}", exc)
        return set()
    return entries


def read_list_files(
    sources: Iterable[IncludesFile],
    properties: Collection[str],
    *,
    emitter: DiagnosticEmitter | None = None,
) -> set[Path]:
    """Union the entries of every active list file."""
    entries: set[Path] = set()
    for source in sources:
        if not source.is_active(properties):
            continue
        entries |= read_list_file(source.file, emitter=emitter)
    return entries


def resolve_includes(
    includes: Iterable[IncludesFile],
    excludes: Iterable[IncludesFile],
    properties: Collection[str],
    *,
    emitter: DiagnosticEmitter | None = None,
) -> set[Path]:
    """Return the included paths minus every excluded path."""
    included = read_list_files(includes, properties, emitter=emitter)
    excluded = read_list_files(excludes, properties, emitter=emitter)
    return included - excluded


__all__ = ["IncludesFile", "read_list_file", "read_list_files", "resolve_includes"]
