"""
Dependency Container
Prozessweite Registry, über die unabhängig geladene Module Services teilen.
"""

from __future__ import annotations

from typing import Any, Callable


class MissingDependencyError(KeyError):
    """Raised by Container.get() for keys that were never registered."""

    def __init__(self, key: str):
        super().__init__(key)
        self.key = key

    def __str__(self) -> str:
        return f"Dependency '{self.key}' has not been registered in the container."


class Container:
    """Minimal service locator: set overwrites, has reports presence, get raises on absence."""

    def __init__(self):
        self._registry: dict[str, Any] = {}

    def set(self, key: str, value: Any) -> Any:
        if not key:
            raise ValueError("Container key is required")
        self._registry[key] = value
        return value

    def has(self, key: str) -> bool:
        return key in self._registry

    def get(self, key: str) -> Any:
        try:
            return self._registry[key]
        except KeyError:
            raise MissingDependencyError(key) from None

    def resolve(self, key: str, factory: Callable[["Container"], Any] | None = None) -> Any:
        """Return the registered value, creating it with *factory* on first use."""
        if key in self._registry:
            return self._registry[key]
        if not callable(factory):
            raise MissingDependencyError(key)
        return self.set(key, factory(self))

    def __contains__(self, key: str) -> bool:
        return self.has(key)


def register_if_missing(container: Container, key: str, value: Any) -> Any:
    """Set *value* under *key* unless something is already registered there.

    Classes are stored as-is; other callables are treated as zero-argument factories.
    """
    if not container.has(key):
        should_invoke = callable(value) and not isinstance(value, type)
        container.set(key, value() if should_invoke else value)
    return container.get(key)


def create_container() -> Container:
    return Container()
