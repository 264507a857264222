# dancing_npc/records.py

from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from server_engine.core.logging import get_logger

logger = get_logger()

Vector3 = Tuple[float, float, float]


@dataclass(eq=False)
class NPCRecord:
    """Last known state of one dancing NPC."""

    owner_id: int
    position: Vector3
    yaw: float = 0.0
    gesture_name: Optional[str] = None
    gear_set_name: Optional[str] = None

    def __post_init__(self):
        self.position = tuple(float(c) for c in self.position)
        if len(self.position) != 3:
            raise ValueError(f"position needs three components, got {len(self.position)}")
        self.yaw = float(self.yaw)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "position": list(self.position),
            "yaw": self.yaw,
            "gesture": self.gesture_name,
            "gear_set": self.gear_set_name,
        }

    @classmethod
    def from_dict(cls, owner_id: int, data: Dict[str, Any]) -> 'NPCRecord':
        """Build a record from its stored form; gesture, gear and yaw are optional."""
        return cls(
            owner_id=owner_id,
            position=data["position"],
            yaw=data.get("yaw") or 0.0,
            gesture_name=data.get("gesture"),
            gear_set_name=data.get("gear_set"),
        )


def serialize_owners(by_owner: Dict[int, List[NPCRecord]]) -> Dict[str, List[Dict[str, Any]]]:
    """Owner map -> JSON-ready dict. Owners without NPCs are dropped."""
    return {
        str(owner_id): [record.to_dict() for record in records]
        for owner_id, records in by_owner.items()
        if records
    }


def deserialize_owners(data: Optional[Dict[str, Any]]) -> Dict[int, List[NPCRecord]]:
    """Stored dict -> owner map. Malformed entries are skipped with a warning."""
    by_owner: Dict[int, List[NPCRecord]] = {}
    if not data:
        return by_owner
    if not isinstance(data, dict):
        logger.warning(f"Ignoring stored NPC data of type {type(data).__name__}")
        return by_owner

    for owner_key, entries in data.items():
        try:
            owner_id = int(owner_key)
        except (TypeError, ValueError):
            logger.warning(f"Skipping NPC records under invalid owner id {owner_key!r}")
            continue

        if owner_id == 0:
            logger.warning("Skipping NPC records stored without an owner")
            continue

        if entries is None:
            continue
        if not isinstance(entries, list):
            logger.warning(f"Skipping NPC records for owner {owner_id}: expected a list, got {type(entries).__name__}")
            continue

        records = []
        for entry in entries:
            try:
                records.append(NPCRecord.from_dict(owner_id, entry))
            except (KeyError, TypeError, ValueError) as e:
                logger.warning(f"Skipping malformed NPC record for owner {owner_id}: {e}")

        if records:
            by_owner[owner_id] = records

    return by_owner
