# dancing_npc/lookup.py

from typing import Callable, Optional

from server_engine.components.player import PlayerController
from server_engine.ecs.entity import Entity
from server_engine.physics.layers import Layers
from server_engine.physics.physics_world import PhysicsWorld

LAYER_PLAYERS = Layers.mask(Layers.PLAYER_SERVER)
DEFAULT_SIGHT_DISTANCE = 10.0


class LineOfSight:
    """
    Finds the tracked NPC a player is looking at.
    is_tracked decides which player-shaped entities count as ours.
    """

    def __init__(self, physics: PhysicsWorld, is_tracked: Callable[[Entity], bool],
                 max_distance: float = DEFAULT_SIGHT_DISTANCE):
        self.physics = physics
        self.is_tracked = is_tracked
        self.max_distance = max_distance

    def resolve_line_of_sight(self, player: Entity, max_distance: Optional[float] = None) -> Optional[Entity]:
        controller = player.get_component(PlayerController)
        if controller is None:
            return None

        hit = self.physics.raycast(
            controller.eye_position(),
            controller.view_direction(),
            max_distance if max_distance is not None else self.max_distance,
            layer_mask=LAYER_PLAYERS,
            ignore_triggers=True,
            ignore=player,
        )
        if hit is None or not self.is_tracked(hit.entity):
            return None
        return hit.entity
