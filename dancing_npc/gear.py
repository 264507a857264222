# dancing_npc/gear.py

import random
from enum import Enum
from typing import Optional, Sequence, TypeVar

from server_engine.core.logging import get_logger
from server_engine.ecs.entity import Entity
from server_engine.plugins.plugin import PluginManager, plugin_loaded

logger = get_logger()

T = TypeVar('T')

GEAR_CORE_PLUGIN = "GearCore"


class GearResult(Enum):
    """Outcome of dressing an NPC."""

    NONE = "none"                # no gear set requested
    APPLIED = "applied"
    FAILED = "failed"            # collaborator refused (unknown set, equip error)
    UNAVAILABLE = "unavailable"  # collaborator not loaded


class GearProvider:
    """Capability to check and equip named gear sets."""

    @property
    def available(self) -> bool:
        return False

    def exists(self, name: str) -> bool:
        return False

    def equip(self, entity: Entity, name: str, clear_inventory: bool = True) -> bool:
        return False


class NullGearProvider(GearProvider):
    """Used when no gear collaborator is wired in."""
    pass


class GearCoreProvider(GearProvider):
    """
    Talks to the GearCore plugin through the plugin manager.
    The plugin is looked up on every call so it may load or unload at any time.
    """

    def __init__(self, plugins: PluginManager, plugin_name: str = GEAR_CORE_PLUGIN):
        self.plugins = plugins
        self.plugin_name = plugin_name

    def _plugin(self):
        plugin = self.plugins.get_plugin(self.plugin_name)
        return plugin if plugin_loaded(plugin) else None

    def _call(self, method_name: str, *args) -> bool:
        plugin = self._plugin()
        method = getattr(plugin, method_name, None) if plugin else None
        if not callable(method):
            return False
        try:
            return bool(method(*args))
        except Exception as e:
            logger.error(f"{self.plugin_name}.{method_name} failed: {e}", exc_info=True)
            return False

    @property
    def available(self) -> bool:
        return self._plugin() is not None

    def exists(self, name: str) -> bool:
        if not name:
            return False
        return self._call("gear_set_exists", name)

    def equip(self, entity: Entity, name: str, clear_inventory: bool = True) -> bool:
        if not name:
            return False
        return self._call("equip_gear_set", entity, name, clear_inventory)


def apply_gear(provider: GearProvider, entity: Entity, name: Optional[str]) -> GearResult:
    """Equip name on entity and classify the outcome."""
    if not name:
        return GearResult.NONE
    if not provider.available:
        return GearResult.UNAVAILABLE
    return GearResult.APPLIED if provider.equip(entity, name, True) else GearResult.FAILED


def pick_random(items: Sequence[T]) -> Optional[T]:
    """Uniform choice; None for an empty list."""
    if not items:
        return None
    return random.choice(items)
