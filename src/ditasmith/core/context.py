"""Immutable attribute snapshot handed to each pipeline stage."""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType


ATTR_MESSAGE = "message"
ATTR_INPUTMAP = "inputmap"
ATTR_TEMPDIR = "tempDir"
ATTR_BASEDIR = "basedir"


class RunContext(Mapping[str, str]):
    """Read-only mapping of run-wide string attributes.

    Stages never mutate a context; :meth:`with_attributes` derives a new
    snapshot so values added for one stage stay local to it.
    """

    __slots__ = ("_attributes",)

    def __init__(self, attributes: Mapping[str, str] | None = None) -> None:
        self._attributes = MappingProxyType(dict(attributes or {}))

    def __getitem__(self, key: str) -> str:
        return self._attributes[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._attributes)

    def __len__(self) -> int:
        return len(self._attributes)

    def __repr__(self) -> str:
        return f"RunContext({dict(self._attributes)!r})"

    def with_attributes(self, extra: Mapping[str, str] | None = None, **values: str) -> RunContext:
        """Return a new snapshot with the given attributes added or replaced."""
        merged = dict(self._attributes)
        if extra:
            merged.update(extra)
        merged.update(values)
        return RunContext(merged)


__all__ = [
    "ATTR_BASEDIR",
    "ATTR_INPUTMAP",
    "ATTR_MESSAGE",
    "ATTR_TEMPDIR",
    "RunContext",
]
