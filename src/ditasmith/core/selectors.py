"""Selection predicates over job manifest entries.

A :class:`FileInfoFilter` is a conjunction of optional field tests; unset fields
act as wildcards. :func:`combine` joins a list of filters with short-circuit OR
semantics. An empty list yields a predicate that matches nothing.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, model_validator


if TYPE_CHECKING:  # pragma: no cover - typing only
    from .job import FileInfo


FileInfoPredicate = Callable[["FileInfo"], bool]

FORMAT_DITA = "dita"
FORMAT_DITAMAP = "ditamap"
DEFAULT_FORMATS: tuple[str, ...] = (FORMAT_DITA, FORMAT_DITAMAP)
PROCESSING_ROLE_RESOURCE_ONLY = "resource-only"


class FileInfoFilter(BaseModel):
    """Selector clause matching manifest entries on format, conref and role."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    format: str | None = None
    conref: bool | None = None
    resource_only: bool | None = None

    @model_validator(mode="before")
    @classmethod
    def _translate_processing_role(cls, data: Any) -> Any:
        if isinstance(data, dict) and "processing-role" in data:
            payload = dict(data)
            role = payload.pop("processing-role")
            if role is not None:
                payload["resource_only"] = role == PROCESSING_ROLE_RESOURCE_ONLY
            return payload
        return data

    def matches(self, info: FileInfo) -> bool:
        """Return True when every configured field equals the entry's value."""
        return (
            (self.format is None or self.format == info.format)
            and (self.conref is None or self.conref == info.has_conref)
            and (self.resource_only is None or self.resource_only == info.is_resource_only)
        )

    def to_predicate(self) -> FileInfoPredicate:
        """Return the clause as a standalone predicate."""
        return self.matches


def combine(filters: Iterable[FileInfoFilter]) -> FileInfoPredicate:
    """Combine filters so an entry matches when any single filter matches it."""
    predicates = [entry.to_predicate() for entry in filters]

    def predicate(info: FileInfo) -> bool:
        for test in predicates:
            if test(info):
                return True
        return False

    return predicate


def format_filters(formats: Sequence[str] | None = None) -> list[FileInfoFilter]:
    """Build one format clause per entry, falling back to the document formats."""
    selected = DEFAULT_FORMATS if formats is None else tuple(formats)
    return [FileInfoFilter(format=value) for value in selected]


__all__ = [
    "DEFAULT_FORMATS",
    "FORMAT_DITA",
    "FORMAT_DITAMAP",
    "PROCESSING_ROLE_RESOURCE_ONLY",
    "FileInfoFilter",
    "FileInfoPredicate",
    "combine",
    "format_filters",
]
