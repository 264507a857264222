# server_engine/scene/transform.py

import numpy as np
from server_engine.ecs.component import Component
from server_engine.ecs.registry import register_component
from server_engine.utils.math import (
    quaternion_from_euler, quaternion_to_matrix, yaw_from_direction
)


@register_component("Transform")
class Transform(Component):
    """
    World-space transform component.
    revision increases on every change so physics can resync lazily.
    """

    def __init__(self):
        super().__init__()
        self.position = np.array([0.0, 0.0, 0.0], dtype=np.float32)
        self.rotation = np.array([0.0, 0.0, 0.0, 1.0], dtype=np.float32)  # Quaternion [x, y, z, w]
        self.revision = 0

    def set_world_position(self, position):
        """Set position in world space."""
        self.position = np.array(position, dtype=np.float32).reshape(3)
        self.revision += 1

    def get_world_position(self) -> np.ndarray:
        return self.position

    def set_world_rotation(self, rotation: np.ndarray):
        """Set rotation in world space (as quaternion)."""
        self.rotation = np.array(rotation, dtype=np.float32).reshape(4)
        self.revision += 1

    def get_world_rotation(self) -> np.ndarray:
        return self.rotation

    def set_euler_degrees(self, euler):
        """Override facing with (pitch, yaw, roll) in degrees."""
        self.set_world_rotation(quaternion_from_euler(np.radians(np.asarray(euler, dtype=np.float64))))

    def set_yaw(self, yaw: float):
        """Face a horizontal heading, in degrees."""
        self.set_euler_degrees((0.0, yaw, 0.0))

    def get_yaw(self) -> float:
        """Current heading in degrees, [0, 360)."""
        return yaw_from_direction(self.forward)

    @property
    def forward(self) -> np.ndarray:
        """Forward vector (local +Y rotated to world)."""
        mat = quaternion_to_matrix(self.rotation)
        return mat[:3, 1]
