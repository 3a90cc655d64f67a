"""Conditional inclusion gate driven by ``if``/``unless`` property names."""

from __future__ import annotations

from collections.abc import Collection

from pydantic import BaseModel, ConfigDict, Field


def is_active(
    properties: Collection[str],
    if_property: str | None = None,
    unless_property: str | None = None,
) -> bool:
    """Return whether an element gated by ``if``/``unless`` applies to this run.

    ``properties`` holds the names defined for the run; a mapping works too since
    membership is tested on its keys. Absent names never raise.
    """
    return (if_property is None or if_property in properties) and (
        unless_property is None or unless_property not in properties
    )


class Conditional(BaseModel):
    """Mixin for declarations carrying an ``if``/``unless`` gate."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    if_property: str | None = Field(default=None, alias="if")
    unless_property: str | None = Field(default=None, alias="unless")

    def is_active(self, properties: Collection[str]) -> bool:
        """Evaluate the gate against the defined property names."""
        return is_active(properties, self.if_property, self.unless_property)


__all__ = ["Conditional", "is_active"]
