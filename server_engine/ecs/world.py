# server_engine/ecs/world.py

from typing import Callable, List, Optional, Type
from server_engine.ecs.entity import Entity
from server_engine.ecs.system import System
from server_engine.ecs.component import Component
from server_engine.core.logging import get_logger


class World:
    """
    ECS world manager.
    Manages entities, systems, and their lifecycle.
    """

    def __init__(self, prefabs=None):
        self.entities: List[Entity] = []
        self.systems: List[System] = []
        self.prefabs = prefabs
        self.logger = get_logger()

        # Called with (entity) after an entity is destroyed
        self._destroy_listeners: List[Callable[[Entity], None]] = []

    def create_entity(self, prefab_id: Optional[str] = None) -> Entity:
        """Create a new, unspawned entity."""
        entity = Entity(prefab_id)
        self.entities.append(entity)
        return entity

    def create_from_prefab(self, prefab_id: str, position=None) -> Optional[Entity]:
        """
        Instantiate a prefab at a position.
        Returns None if the prefab is unknown; the entity is not spawned yet.
        """
        if self.prefabs is None:
            self.logger.error(f"No prefab library attached, cannot create '{prefab_id}'")
            return None

        prefab = self.prefabs.get(prefab_id)
        if prefab is None:
            self.logger.error(f"Unknown prefab '{prefab_id}'")
            return None

        entity = prefab.instantiate(self)
        if position is not None:
            from server_engine.scene.transform import Transform
            transform = entity.get_component(Transform)
            if transform:
                transform.set_world_position(position)
        return entity

    def spawn(self, entity: Entity):
        """Bring an entity into the simulation (physics, systems)."""
        if entity.destroyed:
            raise ValueError(f"Cannot spawn destroyed entity {entity.id}")
        if entity.spawned:
            return

        entity.spawned = True
        for system in self.systems:
            try:
                system.on_entity_spawned(entity)
            except Exception as e:
                self.logger.error(f"System {type(system).__name__} failed to register entity {entity.id}: {e}")

    def destroy_entity(self, entity: Entity):
        """Remove an entity from the world."""
        if entity.destroyed or entity not in self.entities:
            return

        for system in self.systems:
            system.on_entity_destroyed(entity)

        # Clean up components
        for component in entity.components.values():
            try:
                component.on_destroy()
            except Exception as e:
                self.logger.error(f"Error destroying component {type(component).__name__} on entity {entity.id}: {e}")

            # Break circular reference
            component.entity = None

        entity.components.clear()
        entity.destroyed = True
        entity.active = False
        self.entities.remove(entity)

        for listener in list(self._destroy_listeners):
            try:
                listener(entity)
            except Exception as e:
                self.logger.error(f"Destroy listener failed for entity {entity.id}: {e}", exc_info=True)

    def is_destroyed(self, entity: Optional[Entity]) -> bool:
        """True if the entity is gone (or was never given)."""
        return entity is None or entity.destroyed

    def is_alive(self, entity: Optional[Entity]) -> bool:
        """True for spawned entities that have not been destroyed."""
        return entity is not None and entity.spawned and not entity.destroyed

    def add_destroy_listener(self, listener: Callable[[Entity], None]):
        self._destroy_listeners.append(listener)

    def remove_destroy_listener(self, listener: Callable[[Entity], None]):
        if listener in self._destroy_listeners:
            self._destroy_listeners.remove(listener)

    def add_system(self, system: System):
        """Register a system."""
        self.systems.append(system)
        self.systems.sort(key=lambda s: s.priority)
        self.logger.info(f"Registered system {type(system).__name__} with priority {system.priority}")

    def update_systems(self, dt: float):
        """Update all systems."""
        for system in self.systems:
            if not system.enabled:
                continue

            try:
                entities = self._get_entities_for_system(system)
                system.update(entities, dt)
            except Exception as e:
                self.logger.error(f"System {type(system).__name__} update failed: {e}", exc_info=True)

    def get_entities_with(self, component_type: Type[Component]) -> List[Entity]:
        """All live entities carrying a component."""
        return [e for e in self.entities if e.spawned and e.has_component(component_type)]

    def clear(self):
        """Destroy every entity (server shutdown)."""
        for entity in self.entities[:]:
            self.destroy_entity(entity)

    def _get_entities_for_system(self, system: System) -> List[Entity]:
        """Find all spawned entities with required components."""
        required = system.get_required_components()

        matching = []
        for entity in self.entities:
            if not entity.active or not entity.spawned:
                continue

            if all(entity.has_component(comp_type) for comp_type in required):
                matching.append(entity)

        return matching
