# server_engine/physics/collider.py

from server_engine.ecs.component import Component
from server_engine.ecs.registry import register_component
from server_engine.physics.layers import Layers
import numpy as np


class ColliderShape:
    """Base collider shape."""
    pass


class BoxCollider(ColliderShape):
    """Box-shaped collider."""

    def __init__(self, size: np.ndarray):
        self.size = np.asarray(size, dtype=np.float32)


class SphereCollider(ColliderShape):
    """Sphere-shaped collider."""

    def __init__(self, radius: float):
        self.radius = radius


class CapsuleCollider(ColliderShape):
    """Upright (Z axis) capsule, height includes both caps."""

    def __init__(self, radius: float = 0.4, height: float = 1.8):
        self.radius = radius
        self.height = height


@register_component("Collider")
class Collider(Component):
    """
    Collider component.
    Defines collision shape for physics/queries.
    """

    def __init__(self, shape: ColliderShape = None):
        super().__init__()

        self.shape = shape if shape is not None else CapsuleCollider()
        self.trigger = False  # Volumes that queries may skip
        self.offset = np.array([0.0, 0.0, 0.0], dtype=np.float32)

        # Collision filtering
        self.layer = Layers.DEFAULT
