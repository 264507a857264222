# server_engine/rendering/animator.py

from server_engine.ecs.component import Component
from server_engine.ecs.registry import register_component
from server_engine.core.logging import get_logger
from typing import Dict, Iterable, List, Optional

logger = get_logger()


class GestureConfig:
    """
    A named one-shot animation clip (e.g. 'wave').
    duration is the clip length in seconds.
    """

    def __init__(self, gesture_id: int, convar_name: str, duration: float, display_name: str = None):
        self.gesture_id = gesture_id
        self.convar_name = convar_name
        self.duration = duration
        self.display_name = display_name or convar_name.capitalize()

    def __repr__(self):
        return f"GestureConfig({self.convar_name!r}, duration={self.duration})"


# Stock gestures shipped with the server
DEFAULT_GESTURES = [
    GestureConfig(1, "wave", 3.0),
    GestureConfig(2, "victory", 3.2),
    GestureConfig(3, "shrug", 2.0),
    GestureConfig(4, "thumbsup", 2.0),
    GestureConfig(5, "hurry", 2.2),
    GestureConfig(6, "ok", 1.6),
    GestureConfig(7, "cabbagepatch", 4.5, "Cabbage Patch"),
    GestureConfig(8, "twistdance", 4.0, "Twist"),
    GestureConfig(9, "point", 1.8),
    GestureConfig(10, "clap", 2.4),
]


class GestureCatalog:
    """
    All gestures known to the server, keyed by convar name.
    """

    def __init__(self, gestures: Optional[Iterable[GestureConfig]] = None):
        self._gestures: Dict[str, GestureConfig] = {}
        for gesture in (DEFAULT_GESTURES if gestures is None else gestures):
            self.add(gesture)

    def add(self, gesture: GestureConfig):
        if gesture.duration <= 0:
            raise ValueError(f"Gesture '{gesture.convar_name}' must have a positive duration")
        self._gestures[gesture.convar_name.lower()] = gesture

    def find(self, name: str) -> Optional[GestureConfig]:
        """Case-insensitive lookup by convar name."""
        if not name:
            return None
        return self._gestures.get(name.lower())

    @property
    def all_gestures(self) -> List[GestureConfig]:
        return list(self._gestures.values())

    def __contains__(self, name: str) -> bool:
        return self.find(name) is not None

    def __len__(self):
        return len(self._gestures)


@register_component("Animator")
class Animator(Component):
    """
    Component for character gestures.
    start_gesture is one-shot: it plays once and does not loop.
    """

    def __init__(self):
        super().__init__()
        self.current_gesture: Optional[GestureConfig] = None
        self.play_count = 0

    def start_gesture(self, gesture: GestureConfig):
        """Trigger a gesture once."""
        if gesture is None:
            logger.warning("Tried to start an empty gesture")
            return
        self.current_gesture = gesture
        self.play_count += 1

    def on_destroy(self):
        self.current_gesture = None
