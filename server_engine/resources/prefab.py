# server_engine/resources/prefab.py

from typing import Dict, Any, List, Optional
from server_engine.ecs.entity import Entity
from server_engine.ecs.component import Component
from server_engine.physics.layers import Layers
import copy
import numpy as np
from server_engine.core.logging import get_logger

logger = get_logger()

PREFAB_PLAYER = "assets/prefabs/player/player.prefab"


class Prefab:
    """
    Prefab (template) for creating entities.
    Stores component data in serialized form.
    """

    def __init__(self, name: str):
        self.name = name
        self.components: List[Dict[str, Any]] = []

    def add_component_data(self, component_type: str, data: Dict[str, Any] = None):
        """Add component template."""
        self.components.append({
            'type': component_type,
            'data': data or {}
        })
        return self

    def instantiate(self, world) -> Entity:
        """Create entity from prefab."""
        entity = world.create_entity(self.name)

        for component_data in self.components:
            try:
                component = self._deserialize_component(component_data)
                entity.add_component(component)
            except ValueError as e:
                logger.error(f"Failed to instantiate component {component_data.get('type')}: {e}")

        return entity

    def _deserialize_component(self, data: Dict) -> Component:
        """Reconstruct component from data."""
        from server_engine.ecs.registry import ComponentRegistry

        component_type = data['type']
        component_data = data['data']

        component_class = ComponentRegistry.get(component_type)
        if not component_class:
            raise ValueError(f"Unknown component type {component_type}, known: {', '.join(ComponentRegistry.names())}")

        try:
            component = component_class()
        except TypeError:
            raise ValueError(f"Component {component_type} requires arguments for initialization.")

        # Set component properties from data
        for key, value in component_data.items():
            if hasattr(component, key):
                setattr(component, key, copy.deepcopy(value))

        return component


class PrefabLibrary:
    """Prefabs known to the server, by path-like id."""

    def __init__(self):
        self._prefabs: Dict[str, Prefab] = {}

    def register(self, prefab: Prefab):
        self._prefabs[prefab.name] = prefab

    def get(self, prefab_id: str) -> Optional[Prefab]:
        return self._prefabs.get(prefab_id)

    def __contains__(self, prefab_id: str) -> bool:
        return prefab_id in self._prefabs


def build_player_prefab() -> Prefab:
    """The player character: capsule on the server player layer."""
    # Register component classes before anything deserializes them
    import server_engine.scene.transform  # noqa: F401
    import server_engine.physics.collider  # noqa: F401
    import server_engine.rendering.animator  # noqa: F401
    import server_engine.components.player  # noqa: F401

    return (
        Prefab(PREFAB_PLAYER)
        .add_component_data("Transform")
        .add_component_data("Collider", {
            'layer': Layers.PLAYER_SERVER,
            'offset': np.array([0.0, 0.0, 0.9], dtype=np.float32),
        })
        .add_component_data("Animator")
        .add_component_data("Inventory")
        .add_component_data("PlayerController")
    )


def create_default_library() -> PrefabLibrary:
    library = PrefabLibrary()
    library.register(build_player_prefab())
    return library
