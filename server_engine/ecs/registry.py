# server_engine/ecs/registry.py

from typing import Dict, List, Type
from server_engine.ecs.component import Component


class ComponentRegistry:
    """Component classes by the type name used in prefab files."""

    _components: Dict[str, Type[Component]] = {}

    @classmethod
    def register(cls, name: str, component_class: Type[Component]):
        existing = cls._components.get(name)
        if existing is not None and existing is not component_class:
            raise ValueError(f"Component type '{name}' is already registered to {existing.__name__}")
        cls._components[name] = component_class

    @classmethod
    def get(cls, name: str) -> Type[Component]:
        return cls._components.get(name)

    @classmethod
    def names(cls) -> List[str]:
        return sorted(cls._components)


def register_component(name: str):
    """Class decorator registering a component under name."""

    def decorator(cls):
        ComponentRegistry.register(name, cls)
        return cls

    return decorator
