"""Component registry for factory-style creation by type name.

Components register themselves with the registry at import time using
the @register_component decorator.

Usage:
    @register_component("sensor", "temperature")
    class TemperatureSensor(SimulatedSensor):
        ...

    # Later, create an instance from its type name
    sensor = get_registry().create("sensor", "temperature", "T1")
"""

from __future__ import annotations

from collections import defaultdict
from typing import TYPE_CHECKING, Any, TypeVar

if TYPE_CHECKING:
    from smartroom.core.base import Component

T = TypeVar("T", bound="Component")

# Global registry instance
_registry: ComponentRegistry | None = None


class UnknownComponentError(ValueError):
    """Raised when a category or type name has no registered component."""


def _normalize(name: str) -> str:
    return name.strip().lower()


class ComponentRegistry:
    """Registry for smart room components.

    The registry maintains a two-level structure:
    - Category (e.g., "sensor", "device", "strategy")
      - Type (e.g., "temperature", "fan", "cooling")
        - Component class

    Type names are matched case-insensitively.
    """

    def __init__(self) -> None:
        """Initialize empty registry."""
        self._components: dict[str, dict[str, type[Component]]] = defaultdict(dict)

    def register(
        self,
        category: str,
        component_type: str,
        component_class: type[T],
    ) -> type[T]:
        """Register a component class.

        Args:
            category: Component category (e.g., "sensor", "device").
            component_type: Specific type within category (e.g., "temperature").
            component_class: The component class to register.

        Returns:
            The registered class (for use as decorator).

        Raises:
            ValueError: If a different component with the same category/type
                is already registered.
        """
        category = _normalize(category)
        component_type = _normalize(component_type)

        existing = self._components[category].get(component_type)
        if existing is not None and existing is not component_class:
            msg = (
                f"Component '{category}/{component_type}' already registered "
                f"as {existing.__name__}"
            )
            raise ValueError(msg)

        self._components[category][component_type] = component_class
        return component_class

    def get(self, category: str, component_type: str) -> type[Component]:
        """Get a registered component class.

        Raises:
            UnknownComponentError: If the category or type is not registered.
        """
        category_key = _normalize(category)
        if category_key not in self._components:
            msg = f"Unknown category: {category}"
            raise UnknownComponentError(msg)

        types = self._components[category_key]
        type_key = _normalize(component_type)
        if type_key not in types:
            msg = (
                f"Unknown {category_key} type '{component_type}'. "
                f"Available: {sorted(types)}"
            )
            raise UnknownComponentError(msg)

        return types[type_key]

    def get_or_none(self, category: str, component_type: str) -> type[Component] | None:
        """Get a registered component class or None if not found."""
        try:
            return self.get(category, component_type)
        except UnknownComponentError:
            return None

    def list_categories(self) -> list[str]:
        """List all registered categories."""
        return list(self._components.keys())

    def list_types(self, category: str) -> list[str]:
        """List all registered types in a category."""
        return list(self._components.get(_normalize(category), {}).keys())

    def list_all(self) -> dict[str, list[str]]:
        """List all registered components, keyed by category."""
        return {cat: list(types.keys()) for cat, types in self._components.items()}

    def create(
        self,
        category: str,
        component_type: str,
        name: str,
        **kwargs: Any,
    ) -> Component:
        """Create a component instance.

        Args:
            category: Component category.
            component_type: Specific type within category.
            name: Instance name.
            **kwargs: Additional arguments passed to component constructor.

        Returns:
            New component instance.

        Raises:
            UnknownComponentError: If the type is not registered.
        """
        component_class = self.get(category, component_type)
        return component_class(name=name, **kwargs)

    def clear(self) -> None:
        """Clear all registrations."""
        self._components.clear()


def get_registry() -> ComponentRegistry:
    """Get the global component registry, creating it on first call."""
    global _registry
    if _registry is None:
        _registry = ComponentRegistry()
    return _registry


def reset_registry() -> None:
    """Reset the global registry.

    Primarily useful for testing.
    """
    global _registry
    if _registry is not None:
        _registry.clear()
    _registry = None


def register_component(
    category: str,
    component_type: str,
) -> Any:  # Returns Callable[[type[T]], type[T]] but mypy struggles with this
    """Decorator to register a component class.

    The category/type pair is also stored on the class as
    ``component_key`` so it can be registered again after a reset.

    Args:
        category: Component category ("sensor", "device", "strategy").
        component_type: Specific type within category.

    Returns:
        Decorator function that registers the class.
    """

    def decorator(cls: type[T]) -> type[T]:
        cls.component_key = (_normalize(category), _normalize(component_type))  # type: ignore[attr-defined]
        return get_registry().register(category, component_type, cls)

    return decorator


def list_components() -> dict[str, list[str]]:
    """List all registered components."""
    return get_registry().list_all()
