# server_engine/core/scheduler.py

from typing import Callable, List, Optional
from server_engine.core.time import TimeManager
from server_engine.core.logging import get_logger

logger = get_logger()


class Timer:
    """
    Handle for a scheduled callback.
    repetitions == 0 means the timer repeats until cancelled.
    """

    def __init__(self, scheduler: 'Scheduler', interval: float, callback: Callable[[], None],
                 repetitions: int, next_fire: float, owner: Optional[object] = None):
        self.scheduler = scheduler
        self.interval = interval
        self.callback = callback
        self.repetitions = repetitions
        self.next_fire = next_fire
        self.owner = owner
        self.fire_count = 0
        self.destroyed = False

    @property
    def active(self) -> bool:
        return not self.destroyed

    def cancel(self):
        """Stop the timer. Safe to call more than once."""
        if self.destroyed:
            return
        self.destroyed = True
        self.scheduler._remove(self)


class Scheduler:
    """
    Cooperative timer queue.
    Callbacks only run from run(), on the server thread.
    """

    def __init__(self, time_manager: TimeManager):
        self.time = time_manager
        self._timers: List[Timer] = []

    def once(self, delay: float, callback: Callable[[], None], owner: Optional[object] = None) -> Timer:
        """Run callback once after delay seconds."""
        return self._add(delay, callback, 1, owner)

    def every(self, interval: float, callback: Callable[[], None], owner: Optional[object] = None) -> Timer:
        """Run callback every interval seconds until cancelled."""
        return self._add(interval, callback, 0, owner)

    def repeat(self, interval: float, repetitions: int, callback: Callable[[], None],
               owner: Optional[object] = None) -> Timer:
        """Run callback a fixed number of times."""
        if repetitions < 1:
            raise ValueError("repetitions must be at least 1")
        return self._add(interval, callback, repetitions, owner)

    def _add(self, interval: float, callback: Callable[[], None], repetitions: int,
             owner: Optional[object]) -> Timer:
        if interval <= 0:
            raise ValueError(f"Timer interval must be positive, got {interval}")

        timer = Timer(self, interval, callback, repetitions, self.time.get_time() + interval, owner)
        self._timers.append(timer)
        return timer

    def _remove(self, timer: Timer):
        if timer in self._timers:
            self._timers.remove(timer)

    def run(self):
        """Fire every due timer, earliest first."""
        now = self.time.get_time()
        due = sorted((t for t in self._timers if t.next_fire <= now), key=lambda t: t.next_fire)

        for timer in due:
            # A callback earlier in this pass may have cancelled it
            while not timer.destroyed and timer.next_fire <= now:
                try:
                    timer.callback()
                except Exception as e:
                    logger.error(f"Timer callback failed: {e}", exc_info=True)

                timer.fire_count += 1
                if timer.repetitions and timer.fire_count >= timer.repetitions:
                    timer.cancel()
                else:
                    timer.next_fire += timer.interval

    def cancel_owned_by(self, owner: object) -> int:
        """Cancel every timer registered for owner (e.g. an unloading plugin)."""
        owned = [t for t in self._timers if t.owner is owner]
        for timer in owned:
            timer.cancel()
        return len(owned)

    def clear(self):
        """Cancel all timers."""
        for timer in list(self._timers):
            timer.cancel()

    @property
    def active_timers(self) -> List[Timer]:
        return list(self._timers)
