# dancing_npc/registry.py

from typing import Callable, Dict, List, NamedTuple, Optional

import numpy as np

from server_engine.components.player import PlayerController
from server_engine.core.logging import get_logger
from server_engine.ecs.entity import Entity
from server_engine.rendering.animator import GestureConfig
from server_engine.resources.prefab import PREFAB_PLAYER
from server_engine.scene.transform import Transform

from dancing_npc.errors import CapacityError, SpawnError
from dancing_npc.gear import GearProvider, GearResult, NullGearProvider, apply_gear
from dancing_npc.gestures import GestureScheduler
from dancing_npc.lookup import DEFAULT_SIGHT_DISTANCE, LineOfSight
from dancing_npc.records import NPCRecord, deserialize_owners, serialize_owners

logger = get_logger()

DATA_FILE_KEY = "DancingNPC"
NPC_DISPLAY_NAME = "Dancer"


class SpawnResult(NamedTuple):
    handle: Entity
    gear: GearResult


class NPCRegistry:
    """
    Single source of truth for dancing NPCs.

    live_handles maps spawned entities to their records. by_owner holds the
    durable records per owner and is written to the data file after every
    change. A handle is dropped from every map inside the operation that
    removes it.
    """

    def __init__(self, server, gear: Optional[GearProvider] = None, max_per_owner: int = 3,
                 sight_distance: float = DEFAULT_SIGHT_DISTANCE, data_key: str = DATA_FILE_KEY,
                 owner: Optional[object] = None):
        self.server = server
        self.world = server.world
        self.gear = gear or NullGearProvider()
        self.max_per_owner = max_per_owner
        self.data_key = data_key

        self.gestures = GestureScheduler(server.scheduler, server.world, owner)
        self.lookup = LineOfSight(server.physics, self.is_tracked, sight_distance)

        self.live_handles: Dict[Entity, NPCRecord] = {}
        self.by_owner: Dict[int, List[NPCRecord]] = {}

    @property
    def gesture_timers(self):
        return self.gestures.timers

    # Persistence

    def load(self):
        self.by_owner = deserialize_owners(self.server.data_files.read_object(self.data_key))

    def save(self):
        self.server.data_files.write_object(self.data_key, serialize_owners(self.by_owner))

    def _is_persisted(self, record: NPCRecord) -> bool:
        return any(r is record for r in self.by_owner.get(record.owner_id, []))

    # Queries

    def is_tracked(self, entity: Entity) -> bool:
        return entity in self.live_handles

    def get_record(self, handle: Entity) -> Optional[NPCRecord]:
        return self.live_handles.get(handle)

    def count_by_owner(self, owner_id: int) -> int:
        """NPCs this owner currently has in the world."""
        return sum(1 for record in self.live_handles.values() if record.owner_id == owner_id)

    def owned_by(self, owner_id: int) -> List[Entity]:
        return [handle for handle, record in self.live_handles.items() if record.owner_id == owner_id]

    def check_capacity(self, owner_id: int):
        """Raise CapacityError if owner may not spawn another NPC."""
        if self.max_per_owner > 0 and self.count_by_owner(owner_id) >= self.max_per_owner:
            raise CapacityError(owner_id, self.max_per_owner)

    def find_owned_by_player_in_sight(self, player: Entity) -> Optional[Entity]:
        """The NPC player is looking at, only if player owns it."""
        controller = player.get_component(PlayerController)
        if controller is None:
            return None

        handle = self.lookup.resolve_line_of_sight(player)
        if handle is None:
            return None

        record = self.live_handles.get(handle)
        if record is None or record.owner_id != controller.user_id:
            return None
        return handle

    # Lifecycle

    def create_npc(self, owner_id: int, position, yaw: float = 0.0,
                   gesture: Optional[GestureConfig] = None, gear_set_name: Optional[str] = None,
                   persist: bool = True) -> SpawnResult:
        """
        Spawn an NPC for owner_id and start its gesture loop.
        Nothing is recorded unless the entity spawned.
        """
        if not owner_id:
            raise ValueError("NPCs need a non-zero owner id")
        self.check_capacity(owner_id)

        handle = self._spawn_entity(position, yaw)
        record = NPCRecord(
            owner_id=owner_id,
            position=tuple(np.asarray(position, dtype=np.float64).reshape(3)),
            yaw=yaw,
            gesture_name=gesture.convar_name if gesture else None,
            gear_set_name=gear_set_name,
        )

        self.live_handles[handle] = record
        if persist:
            self.by_owner.setdefault(owner_id, []).append(record)

        gear_result = apply_gear(self.gear, handle, gear_set_name)
        if gesture is not None:
            self.gestures.start_loop(handle, gesture)

        if persist:
            self.save()

        logger.debug(f"Spawned dancing NPC {handle.id} for {owner_id} "
                     f"(gesture={record.gesture_name}, gear={gear_set_name}, gear_result={gear_result.value})")
        return SpawnResult(handle, gear_result)

    def update_record(self, handle: Entity, mutator: Callable[[NPCRecord], None]) -> bool:
        """Apply mutator to handle's record and persist. False if handle is unknown."""
        record = self.live_handles.get(handle)
        if record is None:
            return False

        mutator(record)
        if self._is_persisted(record):
            self.save()
        return True

    def change_gesture(self, handle: Entity, gesture: GestureConfig) -> bool:
        """Swap the looping gesture: old loop cancelled before the new one starts."""
        if handle not in self.live_handles:
            return False

        self.gestures.start_loop(handle, gesture)
        return self.update_record(handle, lambda record: setattr(record, 'gesture_name', gesture.convar_name))

    def change_gear(self, handle: Entity, gear_set_name: str) -> Optional[GearResult]:
        """Dress handle in a gear set. None if handle is unknown."""
        if handle not in self.live_handles:
            return None

        result = apply_gear(self.gear, handle, gear_set_name)
        self.update_record(handle, lambda record: setattr(record, 'gear_set_name', gear_set_name))
        return result

    def reapply_gear(self) -> int:
        """Equip every live NPC's stored gear set again. Returns how many took."""
        applied = 0
        for handle, record in list(self.live_handles.items()):
            if apply_gear(self.gear, handle, record.gear_set_name) is GearResult.APPLIED:
                applied += 1
        return applied

    def move(self, handle: Entity, position, yaw: float) -> bool:
        if handle not in self.live_handles:
            return False

        transform = handle.get_component(Transform)
        transform.set_world_position(position)
        transform.set_yaw(yaw)

        def _apply(record: NPCRecord):
            record.position = tuple(float(c) for c in np.asarray(position).reshape(3))
            record.yaw = float(yaw)

        return self.update_record(handle, _apply)

    def remove_npc(self, handle: Entity, purge_from_storage: bool = True) -> bool:
        """
        Stop and despawn an NPC.
        With purge_from_storage=False the stored record is kept so the NPC
        comes back on the next start.
        """
        self.gestures.cancel_loop(handle)
        record = self.live_handles.pop(handle, None)
        if record is None:
            return False

        if purge_from_storage and self._purge(record):
            self.save()

        if not self.world.is_destroyed(handle):
            self.world.destroy_entity(handle)
        return True

    def _purge(self, record: NPCRecord) -> bool:
        records = self.by_owner.get(record.owner_id)
        if not records:
            return False

        remaining = [r for r in records if r is not record]
        if len(remaining) == len(records):
            return False

        if remaining:
            self.by_owner[record.owner_id] = remaining
        else:
            del self.by_owner[record.owner_id]
        return True

    def on_entity_killed(self, entity: Entity) -> bool:
        """The host destroyed one of our NPCs: forget it for good."""
        if entity not in self.live_handles:
            return False
        logger.debug(f"Dancing NPC {entity.id} was killed, purging its record")
        return self.remove_npc(entity, purge_from_storage=True)

    def rehydrate_from_storage(self) -> int:
        """
        Respawn every stored NPC. Records that fail are skipped and stay in
        storage. Returns the number of NPCs brought back.
        """
        if self.live_handles:
            logger.warning("Registry already has live NPCs, skipping rehydration")
            return 0

        self.load()
        restored = 0

        for owner_id, records in list(self.by_owner.items()):
            for record in list(records):
                if self._rehydrate_record(record):
                    restored += 1

        total = sum(len(records) for records in self.by_owner.values())
        if restored < total:
            logger.warning(f"Rehydrated {restored} of {total} dancing NPCs")
        else:
            logger.info(f"Rehydrated {restored} dancing NPCs")
        return restored

    def _rehydrate_record(self, record: NPCRecord) -> bool:
        try:
            handle = self._spawn_entity(record.position, record.yaw)
        except SpawnError as e:
            logger.warning(f"Skipping NPC of {record.owner_id} at {record.position}: {e}")
            return False

        self.live_handles[handle] = record
        try:
            gear_result = apply_gear(self.gear, handle, record.gear_set_name)
            if gear_result is GearResult.FAILED:
                logger.warning(f"Could not reapply gear set '{record.gear_set_name}' to NPC {handle.id}")

            if record.gesture_name:
                gesture = self.server.gestures.find(record.gesture_name)
                if gesture is None:
                    logger.warning(f"Stored gesture '{record.gesture_name}' no longer exists, NPC {handle.id} stays idle")
                else:
                    self.gestures.start_loop(handle, gesture)
        except Exception as e:
            logger.error(f"Failed to restore NPC {handle.id} of {record.owner_id}: {e}", exc_info=True)
            self.gestures.cancel_loop(handle)
            self.live_handles.pop(handle, None)
            self.world.destroy_entity(handle)
            return False

        return True

    def _spawn_entity(self, position, yaw: float) -> Entity:
        entity = self.server.create_entity(PREFAB_PLAYER, position)
        if entity is None:
            raise SpawnError(PREFAB_PLAYER)

        controller = entity.get_component(PlayerController)
        if controller is not None:
            controller.display_name = NPC_DISPLAY_NAME
            controller.look(yaw)

        transform = entity.get_component(Transform)
        if transform is not None:
            transform.set_yaw(yaw)

        try:
            self.world.spawn(entity)
        except Exception as e:
            self.world.destroy_entity(entity)
            raise SpawnError(PREFAB_PLAYER) from e
        return entity

    def shutdown(self):
        """Despawn everything but keep storage, for the next start."""
        for handle in list(self.live_handles.keys()):
            self.remove_npc(handle, purge_from_storage=False)
        self.gestures.cancel_all()
