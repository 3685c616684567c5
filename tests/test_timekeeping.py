"""
Tests for frame timing and tick scheduling.
"""

import pytest

from impact_sim.core.timekeeping import FrameTimer, TickScheduler


@pytest.fixture
def scheduler():
    return TickScheduler(interval=0.016, max_ticks=32)


class TestTickScheduler:
    def test_releases_whole_ticks(self, scheduler):
        scheduler.accrue(0.05)
        assert scheduler.consume() == 3
        assert scheduler.value == pytest.approx(0.002)
        assert scheduler.consume() == 0

    def test_time_scale_shortens_ticks(self, scheduler):
        scheduler.set_time_scale(2.0)
        assert scheduler.tick_interval == pytest.approx(0.008)
        scheduler.accrue(0.05)
        assert scheduler.consume() == 6

    def test_slow_motion(self, scheduler):
        scheduler.set_time_scale(0.5)
        scheduler.accrue(0.05)
        assert scheduler.consume() == 1

    def test_backlog_is_dropped(self, scheduler):
        scheduler.accrue(10.0)
        assert scheduler.consume() == 32
        assert scheduler.value == 0.0
        assert scheduler.consume() == 0

    def test_cancel_discards_pending_time(self, scheduler):
        scheduler.accrue(0.1)
        scheduler.cancel()
        assert scheduler.consume() == 0

    def test_negative_time_is_ignored(self, scheduler):
        scheduler.accrue(-1.0)
        assert scheduler.value == 0.0

    @pytest.mark.parametrize("factor", [0.0, -2.0])
    def test_rejects_non_positive_scale(self, scheduler, factor):
        with pytest.raises(ValueError):
            scheduler.set_time_scale(factor)


class TestFrameTimer:
    def test_tick_is_non_negative(self):
        timer = FrameTimer()
        assert timer.tick() >= 0.0
        assert timer.tick() >= 0.0
