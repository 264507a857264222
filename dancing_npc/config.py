# dancing_npc/config.py

import copy
from typing import Any, Dict, List, Tuple

from server_engine.core.config import Config
from server_engine.core.logging import get_logger

logger = get_logger()

PLUGIN_VERSION = "1.3.0"


def parse_version(value: Any) -> Tuple[int, int, int]:
    """'1.2.0' -> (1, 2, 0). Anything unreadable counts as (0, 0, 0)."""
    if not isinstance(value, str):
        return (0, 0, 0)

    parts = value.strip().split('.')
    numbers = []
    for part in parts[:3]:
        if not part.isdigit():
            return (0, 0, 0)
        numbers.append(int(part))

    while len(numbers) < 3:
        numbers.append(0)
    return tuple(numbers)


class PluginConfig(Config):
    """
    Dancing NPC settings, one JSON file under the server's plugin config dir.
    Older files are migrated to the current version and written back.
    """

    VERSION = "Version"
    CHAT_COMMAND = "Chat Command"
    GESTURES = "Gestures"
    GEAR_SETS = "Gear Sets"
    MAX_NPCS = "Maximum NPCs Per Player"
    SIGHT_DISTANCE = "Line Of Sight Distance"

    def __init__(self, config_path: str, version: str = PLUGIN_VERSION):
        self.version = version
        super().__init__(config_path)

    def default_config(self) -> Dict[str, Any]:
        return {
            self.VERSION: self.version,
            self.CHAT_COMMAND: "dance",
            self.GESTURES: [
                "shrug",
                "victory",
                "wave",
                "cabbagepatch",
            ],
            self.GEAR_SETS: [
                "hazmat suit",
                "egg suit",
            ],
            self.MAX_NPCS: 3,
            self.SIGHT_DISTANCE: 10.0,
        }

    def load(self):
        super().load()

        # Fresh or unreadable files already hold the current defaults
        if self.raw_data is None:
            return

        stored = self.raw_data.get(self.VERSION)
        if parse_version(stored) < parse_version(self.version):
            self.migrate(stored)

    def migrate(self, stored_version: Any):
        logger.warning(f"Config changes detected in {self.config_path}! Updating...")

        defaults = self.default_config()
        stored = parse_version(stored_version)

        if stored < (1, 0, 0):
            self.data = copy.deepcopy(defaults)

        if stored < (1, 2, 0):
            self.data[self.GEAR_SETS] = copy.deepcopy(defaults[self.GEAR_SETS])

        if stored < (1, 3, 0):
            self.data[self.MAX_NPCS] = defaults[self.MAX_NPCS]
            self.data[self.SIGHT_DISTANCE] = defaults[self.SIGHT_DISTANCE]

        logger.warning(f"Config update complete! Updated from version {stored_version} to {self.version}")
        self.data[self.VERSION] = self.version
        self.save()

    @property
    def chat_command(self) -> str:
        value = self.data.get(self.CHAT_COMMAND)
        if not isinstance(value, str) or not value.strip():
            logger.warning(f"Invalid '{self.CHAT_COMMAND}' {value!r}, using 'dance'")
            return "dance"
        return value.strip().lstrip('/').lower()

    @property
    def gestures(self) -> List[str]:
        return self._string_list(self.GESTURES)

    @property
    def gear_sets(self) -> List[str]:
        return self._string_list(self.GEAR_SETS)

    @property
    def max_npcs_per_player(self) -> int:
        """0 disables the limit."""
        value = self.data.get(self.MAX_NPCS)
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            logger.warning(f"Invalid '{self.MAX_NPCS}' {value!r}, using 3")
            return 3
        return value

    @property
    def line_of_sight_distance(self) -> float:
        value = self.data.get(self.SIGHT_DISTANCE)
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
            logger.warning(f"Invalid '{self.SIGHT_DISTANCE}' {value!r}, using 10.0")
            return 10.0
        return float(value)

    def _string_list(self, key: str) -> List[str]:
        value = self.data.get(key)
        if not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, str) and item.strip()]
