"""Registries resolving module and filter identifiers to implementations."""

from __future__ import annotations

from collections.abc import Callable
from importlib import import_module
from typing import Any, Generic, TypeVar

from ditasmith.core.exceptions import PipelineConfigurationError


T = TypeVar("T")


def load_attribute(path: str) -> Any:
    """Import the object referenced by a ``module:attribute`` path."""
    module_name, _, attribute = path.partition(":")
    if not module_name or not attribute:
        msg = f"Implementation '{path}' must use the 'module:attribute' format."
        raise ValueError(msg)
    module = import_module(module_name)
    target: Any = module
    for chunk in attribute.split("."):
        target = getattr(target, chunk)
    return target


class ImplementationRegistry(Generic[T]):
    """Map stable identifiers to factories producing fresh instances."""

    def __init__(self, kind: str, base: type[T]) -> None:
        self.kind = kind
        self.base = base
        self._factories: dict[str, Callable[[], T]] = {}

    def register(self, name: str, factory: Callable[[], T]) -> None:
        """Register a factory under a unique name."""
        self._factories[name] = factory

    def unregister(self, name: str) -> None:
        self._factories.pop(name, None)

    def is_registered(self, name: str) -> bool:
        """Return True when a factory has been registered under the given name."""
        return name in self._factories

    def names(self) -> list[str]:
        return sorted(self._factories)

    def resolve(self, name: str) -> Callable[[], T]:
        """Return the factory for ``name``, importing ``module:attribute`` paths on demand."""
        factory = self._factories.get(name)
        if factory is not None:
            return factory
        if ":" not in name:
            raise PipelineConfigurationError(f"No {self.kind} registered for '{name}'")
        try:
            target = load_attribute(name)
        except (ImportError, AttributeError, ValueError) as exc:
            raise PipelineConfigurationError(
                f"Unable to load {self.kind} '{name}': {exc}"
            ) from exc
        if not callable(target):
            raise PipelineConfigurationError(f"{self.kind.capitalize()} '{name}' is not callable")
        return target

    def create(self, name: str) -> T:
        """Instantiate the implementation registered under ``name``."""
        instance = self.resolve(name)()
        if not isinstance(instance, self.base):
            raise PipelineConfigurationError(
                f"{self.kind.capitalize()} '{name}' did not produce a {self.base.__name__}"
            )
        return instance


__all__ = ["ImplementationRegistry", "load_attribute"]
