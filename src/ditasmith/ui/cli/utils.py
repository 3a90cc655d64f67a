"""Auxiliary helpers used by CLI commands."""

from __future__ import annotations

from collections.abc import Iterable
import logging

import typer


def parse_property_definitions(values: Iterable[str] | None) -> dict[str, str]:
    """Parse ``NAME[=VALUE]`` definitions into a property mapping."""
    properties: dict[str, str] = {}
    if not values:
        return properties
    for raw in values:
        name, _, value = raw.partition("=")
        name = name.strip()
        if not name:
            raise typer.BadParameter(f"Invalid property definition '{raw}', expected NAME[=VALUE].")
        properties[name] = value
    return properties


def configure_logging(verbosity: int) -> None:
    """Route library logging through Rich when verbose output is requested."""
    if verbosity < 2:
        return
    from rich.logging import RichHandler

    level = logging.DEBUG if verbosity >= 3 else logging.INFO
    root = logging.getLogger("ditasmith")
    root.setLevel(level)
    if not any(isinstance(handler, RichHandler) for handler in root.handlers):
        root.addHandler(RichHandler(show_path=False, markup=False))


__all__ = ["configure_logging", "parse_property_definitions"]
