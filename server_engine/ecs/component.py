# server_engine/ecs/component.py

class Component:
    """State attached to one entity. Behavior lives in systems and plugins."""

    def __init__(self):
        self.entity = None

    def attach(self, entity):
        if self.entity is not None and self.entity is not entity:
            raise ValueError(f"{type(self).__name__} already belongs to {self.entity}")
        self.entity = entity

    def on_destroy(self):
        """Called by the World while the owning entity is torn down."""
        pass
