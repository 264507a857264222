# server_engine/components/player.py

import numpy as np
from typing import List, Optional
from server_engine.ecs.component import Component
from server_engine.ecs.registry import register_component
from server_engine.utils.math import view_direction


@register_component("PlayerController")
class PlayerController(Component):
    """
    Player-shaped character state.
    user_id is 0 for server-side characters that no client controls.
    """

    def __init__(self):
        super().__init__()
        self.user_id = 0
        self.display_name = "Unnamed"
        self.connected = False

        self.eye_height = 1.5
        self.view_yaw = 0.0    # degrees
        self.view_pitch = 0.0  # degrees, > 0 looks up

        # Chat lines delivered to this player
        self.messages: List[str] = []

    @property
    def user_id_string(self) -> str:
        return str(self.user_id)

    def eye_position(self) -> np.ndarray:
        """Head position in world space."""
        from server_engine.scene.transform import Transform
        transform = self.entity.get_component(Transform) if self.entity else None
        base = transform.get_world_position() if transform else np.zeros(3, dtype=np.float32)
        return base + np.array([0.0, 0.0, self.eye_height], dtype=np.float32)

    def view_direction(self) -> np.ndarray:
        return view_direction(self.view_yaw, self.view_pitch)

    def look(self, yaw: float, pitch: float = 0.0):
        self.view_yaw = yaw
        self.view_pitch = pitch

    def reply(self, message: str):
        """Deliver a chat line to the player."""
        self.messages.append(message)

    @property
    def last_message(self) -> Optional[str]:
        return self.messages[-1] if self.messages else None


@register_component("Inventory")
class Inventory(Component):
    """Item short names worn or carried by a character."""

    def __init__(self):
        super().__init__()
        self.wear: List[str] = []
        self.belt: List[str] = []
        self.main: List[str] = []

    def clear(self):
        self.wear.clear()
        self.belt.clear()
        self.main.clear()

    def give(self, item: str, container: str = "main"):
        getattr(self, container).append(item)

    @property
    def all_items(self) -> List[str]:
        return self.wear + self.belt + self.main

    @property
    def is_empty(self) -> bool:
        return not (self.wear or self.belt or self.main)
