# server_engine/physics/collider_system.py

from server_engine.ecs.system import System
from server_engine.physics.collider import Collider
from server_engine.physics.physics_world import PhysicsWorld
from server_engine.scene.transform import Transform


class ColliderSystem(System):
    """
    Keeps the physics world in step with spawned entities.
    Adds colliders on spawn, removes them on destroy, resyncs moved bodies.
    """

    def __init__(self, physics_world: PhysicsWorld):
        super().__init__()
        self.physics_world = physics_world
        self.priority = 50

    def get_required_components(self):
        return [Transform, Collider]

    def update(self, entities, dt):
        if self.physics_world.initialized:
            self.physics_world.sync_transforms()

    def on_entity_spawned(self, entity):
        if entity.has_component(Collider):
            self.physics_world.add_collider(entity)

    def on_entity_destroyed(self, entity):
        """Callback from World when entity is destroyed."""
        self.physics_world.remove_collider(entity)
