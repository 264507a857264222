# server_engine/physics/layers.py


class Layers:
    """Collision layer indices and masks."""

    DEFAULT = 0
    TERRAIN = 1
    DEPLOYED = 8
    TRIGGER = 12
    PLAYER_SERVER = 17

    ALL = 0xFFFFFFFF

    @staticmethod
    def mask(*layers: int) -> int:
        """Build a bit mask from layer indices."""
        value = 0
        for layer in layers:
            if not 0 <= layer < 32:
                raise ValueError(f"Layer index out of range: {layer}")
            value |= 1 << layer
        return value
