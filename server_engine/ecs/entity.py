# server_engine/ecs/entity.py

from typing import Dict, Optional, Type
from server_engine.ecs.component import Component


class Entity:
    """
    An entity is just an ID with attached components.
    No logic lives here; the World owns its lifecycle flags.
    """

    _next_id = 1

    def __init__(self, prefab_id: Optional[str] = None):
        self.id = Entity._next_id
        Entity._next_id += 1
        self.prefab_id = prefab_id
        self.components: Dict[Type[Component], Component] = {}
        self.active = True

        # Lifecycle, set by World.spawn / World.destroy_entity
        self.spawned = False
        self.destroyed = False

    def add_component(self, component: Component):
        """Attach a component."""
        component_type = type(component)
        self.components[component_type] = component
        component.attach(self)
        return component

    def get_component(self, component_type: Type[Component]):
        """Retrieve a component by type."""
        return self.components.get(component_type)

    def has_component(self, component_type: Type[Component]) -> bool:
        """Check if entity has a component."""
        return component_type in self.components

    def __repr__(self):
        return f"Entity({self.id}, prefab={self.prefab_id!r})"
