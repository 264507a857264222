# server_engine/physics/raycast.py

import numpy as np
from dataclasses import dataclass


@dataclass(frozen=True)
class RaycastHit:
    """Closest accepted hit of a ray query."""

    entity: 'Entity'
    collider: 'Collider'
    point: np.ndarray
    normal: np.ndarray
    fraction: float  # 0 at the origin, 1 at max distance
    distance: float

    @property
    def layer(self) -> int:
        return self.collider.layer if self.collider is not None else -1
