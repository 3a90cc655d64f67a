"""Job manifest describing every file taking part in the current run.

The manifest is persisted as ``.job.json`` inside the temporary directory. Each
write bumps a generation counter; an in-memory :class:`Job` whose generation no
longer matches the file on disk is stale and must not be reused.

:class:`JobCache` binds at most one live job to each run identity (any hashable
token supplied by the caller) and rebuilds it when it goes stale.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Iterator
from dataclasses import dataclass, field
import json
import logging
import os
from pathlib import Path
from threading import RLock
from typing import Any

from .exceptions import JobError


logger = logging.getLogger(__name__)

JOB_FILENAME = ".job.json"

_KNOWN_FIELDS = ("src", "result", "format", "has_conref", "is_resource_only", "is_input")


@dataclass(slots=True)
class FileInfo:
    """Manifest entry for a single file of the job."""

    uri: str
    src: str | None = None
    result: str | None = None
    format: str | None = None
    has_conref: bool = False
    is_resource_only: bool = False
    is_input: bool = False
    extra: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Serialise the entry, keeping unknown keys round-trippable."""
        payload: dict[str, Any] = dict(self.extra)
        for name in _KNOWN_FIELDS:
            payload[name] = getattr(self, name)
        return payload

    @classmethod
    def from_dict(cls, uri: str, payload: dict[str, Any]) -> FileInfo:
        """Build an entry from its serialised form."""
        data = dict(payload)
        known = {name: data.pop(name) for name in _KNOWN_FIELDS if name in data}
        data.pop("uri", None)
        for flag in ("has_conref", "is_resource_only", "is_input"):
            if flag in known:
                known[flag] = bool(known[flag])
        return cls(uri=uri, extra=data, **known)


class Job:
    """File-backed job manifest rooted at a temporary directory."""

    def __init__(self, temp_dir: Path | str) -> None:
        self.temp_dir = Path(temp_dir)
        self.path = self.temp_dir / JOB_FILENAME
        self.generation = 0
        self.properties: dict[str, str] = {}
        self._files: dict[str, FileInfo] = {}
        self._stale = False
        self._read()

    # ------------------------------------------------------------------ storage

    def _load_payload(self) -> dict[str, Any] | None:
        if not self.path.exists():
            return None
        try:
            payload = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise JobError(f"Failed to read job file {self.path}: {exc}") from exc
        if not isinstance(payload, dict):
            raise JobError(f"Job file {self.path} does not contain a JSON object")
        return payload

    def _read(self) -> None:
        payload = self._load_payload()
        if payload is None:
            return
        files = payload.get("files") or {}
        properties = payload.get("properties") or {}
        if not isinstance(files, dict) or not isinstance(properties, dict):
            raise JobError(f"Job file {self.path} has an invalid structure")
        try:
            self.generation = int(payload.get("generation", 0))
            self._files = {
                str(uri): FileInfo.from_dict(str(uri), entry) for uri, entry in files.items()
            }
        except (TypeError, ValueError) as exc:
            raise JobError(f"Job file {self.path} has an invalid entry: {exc}") from exc
        self.properties = {str(key): str(value) for key, value in properties.items()}

    def write(self) -> None:
        """Persist the manifest, bumping its generation counter."""
        self.generation += 1
        payload = {
            "generation": self.generation,
            "properties": dict(self.properties),
            "files": {uri: info.to_dict() for uri, info in sorted(self._files.items())},
        }
        try:
            self.temp_dir.mkdir(parents=True, exist_ok=True)
            scratch = self.path.with_name(f"{self.path.name}.tmp")
            scratch.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")
            os.replace(scratch, self.path)
        except OSError as exc:
            raise JobError(f"Failed to write job file {self.path}: {exc}") from exc

    # ---------------------------------------------------------------- staleness

    def disk_generation(self) -> int | None:
        """Return the generation stored on disk, ``None`` when absent or unreadable."""
        try:
            payload = self._load_payload()
        except JobError:
            return None
        if payload is None:
            return None
        try:
            return int(payload.get("generation", 0))
        except (TypeError, ValueError):
            return None

    def mark_stale(self) -> None:
        """Flag the manifest so the next cache lookup rebuilds it."""
        self._stale = True

    def is_stale(self) -> bool:
        """Return True when this instance no longer reflects the persisted job."""
        if self._stale:
            return True
        on_disk = self.disk_generation()
        if on_disk is None:
            return self.generation != 0 or self.path.exists()
        return on_disk != self.generation

    # ------------------------------------------------------------------ entries

    def add(self, info: FileInfo) -> None:
        """Insert or replace a manifest entry."""
        self._files[info.uri] = info

    def remove(self, uri: str) -> FileInfo | None:
        """Drop an entry, returning it when present."""
        return self._files.pop(uri, None)

    def get_file_info(self, uri: str) -> FileInfo | None:
        """Return the entry registered for ``uri``."""
        return self._files.get(uri)

    def file_infos(self, predicate: Callable[[FileInfo], bool] | None = None) -> list[FileInfo]:
        """Return entries in path order, optionally restricted by a predicate."""
        entries = [self._files[uri] for uri in sorted(self._files)]
        if predicate is None:
            return entries
        return [entry for entry in entries if predicate(entry)]

    def __contains__(self, uri: object) -> bool:
        return uri in self._files

    def __iter__(self) -> Iterator[FileInfo]:
        return iter(self.file_infos())

    def __len__(self) -> int:
        return len(self._files)

    def __repr__(self) -> str:
        return (
            f"Job(temp_dir={str(self.temp_dir)!r}, files={len(self._files)}, "
            f"generation={self.generation})"
        )


JobFactory = Callable[[Path], Job]


class JobCache:
    """Cache binding at most one live job manifest to each run identity."""

    def __init__(self, factory: JobFactory | None = None) -> None:
        self._factory: JobFactory = factory or Job
        self._jobs: dict[Hashable, Job] = {}
        self._lock = RLock()

    def get_or_create(self, temp_dir: Path | str, identity: Hashable) -> Job:
        """Return the job bound to ``identity``, rebuilding it when stale."""
        temp_path = Path(temp_dir)
        with self._lock:
            job = self._jobs.get(identity)
            if job is not None and (job.is_stale() or job.temp_dir != temp_path):
                logger.debug("Reload stale job configuration reference for %r", identity)
                del self._jobs[identity]
                job = None
            if job is None:
                job = self._factory(temp_path)
                self._jobs[identity] = job
            return job

    def peek(self, identity: Hashable) -> Job | None:
        """Return the cached job without any staleness check."""
        with self._lock:
            return self._jobs.get(identity)

    def invalidate(self, identity: Hashable) -> Job | None:
        """Discard the job bound to ``identity``."""
        with self._lock:
            return self._jobs.pop(identity, None)

    def clear(self) -> None:
        """Discard every cached job."""
        with self._lock:
            self._jobs.clear()

    def __contains__(self, identity: object) -> bool:
        with self._lock:
            return identity in self._jobs

    def __len__(self) -> int:
        with self._lock:
            return len(self._jobs)


default_job_cache = JobCache()


def get_job(
    temp_dir: Path | str, identity: Hashable, *, cache: JobCache | None = None
) -> Job:
    """Get the job bound to ``identity`` from the cache, creating it on first use."""
    if cache is None:
        cache = default_job_cache
    return cache.get_or_create(temp_dir, identity)


__all__ = [
    "JOB_FILENAME",
    "FileInfo",
    "Job",
    "JobCache",
    "default_job_cache",
    "get_job",
]
