"""Tests for the SimulationClock module."""

import pytest

from power_snake.clock import SimulationClock


def _drain(clock, step_ms):
    steps = 0
    while clock.take_step(step_ms):
        steps += 1
    clock.settle(step_ms)
    return steps


class TestClockInit:
    def test_defaults(self):
        clock = SimulationClock()
        assert clock.accumulator_ms == 0.0
        assert clock.elapsed_ms == 0.0
        assert not clock.paused

    def test_invalid_cap(self):
        with pytest.raises(ValueError, match="at least 1"):
            SimulationClock(max_catch_up_steps=0)

    def test_invalid_step(self):
        with pytest.raises(ValueError, match="positive"):
            SimulationClock().take_step(0)


class TestAccumulation:
    def test_first_frame_only_records_timestamp(self):
        clock = SimulationClock()
        assert clock.advance(5000.0) == 0.0
        assert _drain(clock, 100.0) == 0

    def test_drains_all_due_steps(self):
        clock = SimulationClock()
        clock.advance(0.0)
        clock.advance(350.0)
        assert _drain(clock, 100.0) == 3
        assert clock.accumulator_ms == pytest.approx(50.0)
        assert clock.elapsed_ms == 350.0

    def test_remainder_carries_to_next_frame(self):
        clock = SimulationClock()
        clock.advance(0.0)
        clock.advance(60.0)
        assert _drain(clock, 100.0) == 0
        clock.advance(120.0)
        assert _drain(clock, 100.0) == 1
        assert clock.accumulator_ms == pytest.approx(20.0)

    def test_catch_up_is_capped(self):
        clock = SimulationClock(max_catch_up_steps=5)
        clock.advance(0.0)
        clock.advance(10_050.0)
        assert _drain(clock, 100.0) == 5
        assert clock.accumulator_ms < 100.0

    @pytest.mark.parametrize("frame_ms", [7.0, 16.7, 33.3, 250.0, 1000.0])
    def test_accumulator_below_step_after_frame(self, frame_ms):
        clock = SimulationClock(max_catch_up_steps=3)
        now = 0.0
        clock.advance(now)
        for _ in range(50):
            now += frame_ms
            clock.advance(now)
            _drain(clock, 100.0)
            assert 0.0 <= clock.accumulator_ms < 100.0

    def test_time_going_backwards_is_ignored(self):
        clock = SimulationClock()
        clock.advance(1000.0)
        assert clock.advance(900.0) == 0.0
        assert clock.accumulator_ms == 0.0


class TestPause:
    def test_pause_freezes_accumulation(self):
        clock = SimulationClock()
        clock.advance(0.0)
        clock.pause()
        clock.advance(5000.0)
        assert clock.accumulator_ms == 0.0
        assert clock.elapsed_ms == 0.0
        assert not clock.take_step(100.0)

    def test_resume_skips_paused_interval(self):
        clock = SimulationClock()
        clock.advance(0.0)
        clock.advance(50.0)
        clock.pause()
        clock.resume(60_000.0)
        clock.advance(60_030.0)
        assert clock.accumulator_ms == pytest.approx(80.0)
        assert clock.elapsed_ms == pytest.approx(80.0)

    def test_reset(self):
        clock = SimulationClock()
        clock.advance(0.0)
        clock.advance(250.0)
        clock.reset(1000.0)
        assert clock.elapsed_ms == 0.0
        clock.advance(1100.0)
        assert clock.accumulator_ms == pytest.approx(100.0)
