"""Runnable stage implementations and the registries resolving them."""

from __future__ import annotations

from collections.abc import Callable

from .base import PipelineModule
from .filters import FilterPair, XmlFilter, XmlFilterModule
from .mappers import FileNameMapper, build_mapper
from .registry import ImplementationRegistry, load_attribute
from .xslt import XsltModule


module_registry: ImplementationRegistry[PipelineModule] = ImplementationRegistry(
    "module", PipelineModule
)
filter_registry: ImplementationRegistry[XmlFilter] = ImplementationRegistry("filter", XmlFilter)


def register_module(name: str, factory: Callable[[], PipelineModule]) -> None:
    """Expose a helper to register external pipeline modules."""
    module_registry.register(name, factory)


def register_filter(name: str, factory: Callable[[], XmlFilter]) -> None:
    """Expose a helper to register external XML filters."""
    filter_registry.register(name, factory)


__all__ = [
    "FileNameMapper",
    "FilterPair",
    "ImplementationRegistry",
    "PipelineModule",
    "XmlFilter",
    "XmlFilterModule",
    "XsltModule",
    "build_mapper",
    "filter_registry",
    "load_attribute",
    "module_registry",
    "register_filter",
    "register_module",
]
