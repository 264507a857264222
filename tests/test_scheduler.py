"""Tests for the cooperative timer queue."""

import pytest

from server_engine.core.scheduler import Scheduler
from server_engine.core.time import TimeManager


@pytest.fixture
def clock():
    return TimeManager(tick_rate=0.1)


@pytest.fixture
def scheduler(clock):
    return Scheduler(clock)


def step(clock, scheduler, seconds):
    clock.advance(seconds)
    scheduler.run()


class TestTimers:

    def test_once_fires_once(self, clock, scheduler):
        calls = []
        timer = scheduler.once(1.0, lambda: calls.append("x"))

        step(clock, scheduler, 0.5)
        assert calls == []

        step(clock, scheduler, 0.5)
        assert calls == ["x"]
        assert not timer.active

        step(clock, scheduler, 5.0)
        assert calls == ["x"]

    def test_every_catches_up(self, clock, scheduler):
        calls = []
        scheduler.every(1.0, lambda: calls.append(clock.get_time()))

        step(clock, scheduler, 3.5)
        assert len(calls) == 3

    def test_repeat_stops_after_count(self, clock, scheduler):
        calls = []
        timer = scheduler.repeat(0.5, 2, lambda: calls.append(1))

        step(clock, scheduler, 10.0)
        assert len(calls) == 2
        assert timer not in scheduler.active_timers

    def test_cancelled_timer_never_fires(self, clock, scheduler):
        calls = []
        timer = scheduler.every(1.0, lambda: calls.append(1))
        timer.cancel()
        timer.cancel()

        step(clock, scheduler, 3.0)
        assert calls == []

    def test_timer_cancelled_by_earlier_callback_is_skipped(self, clock, scheduler):
        calls = []
        late = scheduler.once(1.0, lambda: calls.append("late"))
        scheduler.once(0.5, lambda: (calls.append("early"), late.cancel()))

        step(clock, scheduler, 2.0)
        assert calls == ["early"]

    def test_due_timers_fire_in_time_order(self, clock, scheduler):
        calls = []
        scheduler.once(0.9, lambda: calls.append("b"))
        scheduler.once(0.3, lambda: calls.append("a"))

        step(clock, scheduler, 1.0)
        assert calls == ["a", "b"]

    def test_failing_callback_does_not_stop_queue(self, clock, scheduler):
        calls = []

        def boom():
            raise RuntimeError("boom")

        scheduler.once(0.2, boom)
        scheduler.once(0.4, lambda: calls.append("ok"))

        step(clock, scheduler, 1.0)
        assert calls == ["ok"]

    def test_interval_must_be_positive(self, scheduler):
        with pytest.raises(ValueError):
            scheduler.every(0, lambda: None)

    def test_cancel_owned_by(self, clock, scheduler):
        owner, other = object(), object()
        calls = []
        scheduler.every(1.0, lambda: calls.append("owner"), owner=owner)
        scheduler.every(1.0, lambda: calls.append("other"), owner=other)

        assert scheduler.cancel_owned_by(owner) == 1
        step(clock, scheduler, 1.0)
        assert calls == ["other"]


class TestTimeManager:

    def test_advance_rejects_negative(self, clock):
        with pytest.raises(ValueError):
            clock.advance(-1.0)
