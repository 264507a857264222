# dancing_npc/errors.py


class DancingNPCError(Exception):
    """Base class for failures reported back to the invoking player."""
    pass


class NotFoundError(DancingNPCError):
    """A gesture, gear set or looked-at NPC did not resolve."""

    GESTURE = "gesture"
    GEAR_SET = "gear_set"
    NPC = "npc"

    def __init__(self, kind: str, name: str = None):
        self.kind = kind
        self.name = name
        super().__init__(f"{kind} not found" + (f": {name}" if name else ""))


class CapacityError(DancingNPCError):
    """The owner already has the maximum number of NPCs."""

    def __init__(self, owner_id: int, limit: int):
        self.owner_id = owner_id
        self.limit = limit
        super().__init__(f"Owner {owner_id} already has {limit} NPCs")


class SpawnError(DancingNPCError):
    """The host refused to create the NPC entity."""

    def __init__(self, prefab_id: str):
        self.prefab_id = prefab_id
        super().__init__(f"Failed to create entity from {prefab_id}")
