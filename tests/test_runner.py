"""Tests for the asyncio frame loop."""

from __future__ import annotations

import asyncio

import pytest

from power_snake.config import GameConfig
from power_snake.engine import GameEngine, GameStatus
from power_snake.grid import Coordinate
from power_snake.runner import FrameLoop


class FakeClock:
    """Monotonic clock that moves forward a fixed amount per reading."""

    def __init__(self, step_seconds: float = 0.1) -> None:
        self.now = 0.0
        self.step_seconds = step_seconds

    def __call__(self) -> float:
        self.now += self.step_seconds
        return self.now


def _engine():
    engine = GameEngine(GameConfig(seed=0, power_ups_enabled=False))
    engine.food.position = Coordinate(0, 0)
    return engine


class TestFrameLoop:
    def test_invalid_fps(self):
        with pytest.raises(ValueError, match="fps"):
            FrameLoop(_engine(), fps=0)

    @pytest.mark.asyncio
    async def test_runs_until_game_over(self):
        engine = _engine()
        loop = FrameLoop(engine, fps=1000, clock=FakeClock())
        snapshot = await loop.run()
        assert snapshot.game_over
        assert engine.player.head == Coordinate(19, 10)
        assert loop.frames > 0

    @pytest.mark.asyncio
    async def test_on_frame_receives_snapshots(self):
        seen = []

        async def on_frame(snapshot):
            seen.append(snapshot.tick)

        loop = FrameLoop(_engine(), fps=1000, on_frame=on_frame, clock=FakeClock())
        await loop.run()
        assert len(seen) == loop.frames
        assert seen == sorted(seen)

    @pytest.mark.asyncio
    async def test_stop(self):
        engine = _engine()
        loop = None

        def on_frame(snapshot):
            if loop.frames >= 3:
                loop.stop()

        loop = FrameLoop(engine, fps=1000, on_frame=on_frame, clock=FakeClock(0.01))
        snapshot = await loop.run()
        assert loop.frames == 3
        assert not snapshot.game_over
        assert engine.status == GameStatus.PLAYING

    @pytest.mark.asyncio
    async def test_callback_error_ends_game(self):
        def on_frame(snapshot):
            raise RuntimeError("renderer crashed")

        engine = _engine()
        loop = FrameLoop(engine, fps=1000, on_frame=on_frame, clock=FakeClock())
        snapshot = await loop.run()
        assert snapshot.game_over
        assert loop.frames == 1

    @pytest.mark.asyncio
    async def test_cancel_propagates(self):
        engine = GameEngine(GameConfig(seed=0, wall_mode="wrap"))
        loop = FrameLoop(engine, fps=100, clock=FakeClock(0.001))
        task = asyncio.create_task(loop.run())
        await asyncio.sleep(0.05)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
