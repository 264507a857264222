# server_engine/core/time.py

import time


class TimeManager:
    """
    Central time management.
    Keeps server time, which only moves when the server ticks,
    so timers stay deterministic regardless of wall clock jitter.
    """

    def __init__(self, tick_rate: float = 1 / 30.0):
        self.tick_rate = tick_rate  # Target seconds per server tick
        self.delta_time = 0.0
        self.time_scale = 1.0

        self._last_frame_time = time.perf_counter()
        self._server_time = 0.0

        self.tick_count = 0

    def tick(self) -> float:
        """
        Measure wall clock time since the last call.
        Returns the scaled delta, without advancing server time.
        """
        current_time = time.perf_counter()
        self.delta_time = (current_time - self._last_frame_time) * self.time_scale
        self._last_frame_time = current_time
        return self.delta_time

    def advance(self, dt: float):
        """Move server time forward by dt seconds."""
        if dt < 0:
            raise ValueError(f"Cannot advance time by a negative amount ({dt})")
        self._server_time += dt
        self.tick_count += 1

    def get_time(self) -> float:
        """Get total elapsed server time."""
        return self._server_time
