# dancing_npc/gestures.py

from typing import Dict, List, Optional, Sequence

from server_engine.core.scheduler import Scheduler, Timer
from server_engine.core.logging import get_logger
from server_engine.ecs.entity import Entity
from server_engine.ecs.world import World
from server_engine.rendering.animator import Animator, GestureCatalog, GestureConfig

logger = get_logger()


def resolve_gesture(catalog: GestureCatalog, configured: Sequence[str], token: str) -> Optional[GestureConfig]:
    """
    Turn user input into a gesture.
    Digits are a 1-based index into the configured list, anything else
    a case-insensitive gesture name from the catalog.
    """
    if not token:
        return None

    token = token.strip()
    if token.isdigit():
        index = int(token) - 1
        if not 0 <= index < len(configured):
            return None
        return catalog.find(configured[index])

    return catalog.find(token)


def is_index_token(token: str) -> bool:
    return bool(token) and token.strip().isdigit()


def configured_gestures(catalog: GestureCatalog, configured: Sequence[str]) -> List[GestureConfig]:
    """Configured names that exist in the catalog, in configured order."""
    gestures = []
    for name in configured:
        gesture = catalog.find(name)
        if gesture is None:
            logger.warning(f"Configured gesture '{name}' does not exist on this server")
            continue
        gestures.append(gesture)
    return gestures


class _GestureTask:
    """Timer callback bound to one NPC handle."""

    def __init__(self, loops: 'GestureScheduler', handle: Entity, gesture: GestureConfig):
        self.loops = loops
        self.handle = handle
        self.gesture = gesture

    def __call__(self):
        # The NPC may have been killed since the last tick
        if not self.loops.world.is_alive(self.handle):
            self.loops.cancel_loop(self.handle)
            return
        self.loops.trigger(self.handle, self.gesture)


class GestureScheduler:
    """
    Keeps gestures looping on NPCs.
    The host gesture is one-shot, so each NPC gets one repeating timer
    that re-triggers it every gesture duration.
    """

    def __init__(self, scheduler: Scheduler, world: World, owner: Optional[object] = None):
        self.scheduler = scheduler
        self.world = world
        self.owner = owner
        self.timers: Dict[Entity, Timer] = {}
        self._gestures: Dict[Entity, GestureConfig] = {}

    def start_loop(self, handle: Entity, gesture: GestureConfig, interval: Optional[float] = None) -> Optional[Timer]:
        """Play gesture now and every interval seconds, replacing any running loop."""
        self.cancel_loop(handle)

        if not self.world.is_alive(handle):
            logger.warning(f"Not starting '{gesture.convar_name}' on dead NPC {handle.id}")
            return None

        interval = interval if interval is not None else gesture.duration
        self.trigger(handle, gesture)

        timer = self.scheduler.every(interval, _GestureTask(self, handle, gesture), owner=self.owner)
        self.timers[handle] = timer
        self._gestures[handle] = gesture
        return timer

    def cancel_loop(self, handle: Entity) -> bool:
        """Stop the loop for handle. Returns False if none was running."""
        timer = self.timers.pop(handle, None)
        self._gestures.pop(handle, None)
        if timer is None:
            return False
        timer.cancel()
        return True

    def cancel_all(self):
        for handle in list(self.timers.keys()):
            self.cancel_loop(handle)

    def trigger(self, handle: Entity, gesture: GestureConfig):
        animator = handle.get_component(Animator)
        if animator is None:
            logger.warning(f"NPC {handle.id} has no Animator, cannot play '{gesture.convar_name}'")
            return
        animator.start_gesture(gesture)

    def is_looping(self, handle: Entity) -> bool:
        return handle in self.timers

    def active_gesture(self, handle: Entity) -> Optional[GestureConfig]:
        return self._gestures.get(handle)
