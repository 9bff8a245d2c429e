"""Tests for the elapsed-time scheduler."""

import pytest

from pocket_arcade.core.scheduler import Scheduler


class TestCallLater:
    def test_fires_once_when_due(self) -> None:
        fired = []
        scheduler = Scheduler()
        scheduler.call_later(100, lambda: fired.append(scheduler.now_ms))

        scheduler.advance(99)
        assert fired == []
        scheduler.advance(1)
        assert fired == [100]
        scheduler.advance(500)
        assert fired == [100]
        assert scheduler.pending() == 0

    def test_due_order_then_arm_order(self) -> None:
        fired = []
        scheduler = Scheduler()
        scheduler.call_later(200, lambda: fired.append("late"))
        scheduler.call_later(100, lambda: fired.append("first"))
        scheduler.call_later(100, lambda: fired.append("second"))
        scheduler.advance(1000)
        assert fired == ["first", "second", "late"]

    def test_callback_may_arm_a_timer_due_in_the_same_window(self) -> None:
        fired = []
        scheduler = Scheduler()
        scheduler.call_later(100, lambda: scheduler.call_later(50, lambda: fired.append(scheduler.now_ms)))
        scheduler.advance(200)
        assert fired == [150]

    def test_cancelled_handle_never_fires(self) -> None:
        fired = []
        scheduler = Scheduler()
        handle = scheduler.call_later(10, lambda: fired.append(1))
        assert scheduler.cancel(handle)
        assert not scheduler.cancel(handle)
        scheduler.advance(100)
        assert fired == []


class TestCallEvery:
    def test_catches_up_over_large_delta(self) -> None:
        fired = []
        scheduler = Scheduler()
        scheduler.call_every(100, lambda: fired.append(scheduler.now_ms))
        scheduler.advance(350)
        assert fired == [100, 200, 300]

    def test_rejects_non_positive_interval(self) -> None:
        with pytest.raises(ValueError):
            Scheduler().call_every(0, lambda: None)

    def test_callback_can_cancel_everything(self) -> None:
        fired = []
        scheduler = Scheduler()

        def stop() -> None:
            fired.append("stop")
            scheduler.cancel_all()

        scheduler.call_every(100, stop)
        scheduler.call_later(150, lambda: fired.append("stale"))
        scheduler.advance(1000)
        assert fired == ["stop"]


class TestGroups:
    def test_cancel_group_leaves_other_groups(self) -> None:
        scheduler = Scheduler()
        scheduler.call_later(10, lambda: None, group="flip")
        scheduler.call_every(10, lambda: None, group="clock")
        scheduler.call_every(20, lambda: None, group="clock")

        assert scheduler.groups() == {"flip": 1, "clock": 2}
        assert scheduler.cancel_group("clock") == 2
        assert scheduler.pending() == 1
        assert scheduler.pending("flip") == 1

    def test_cancel_all_counts(self) -> None:
        scheduler = Scheduler()
        scheduler.call_later(10, lambda: None)
        scheduler.call_every(10, lambda: None)
        assert scheduler.cancel_all() == 2
        assert scheduler.advance(100) == 0
