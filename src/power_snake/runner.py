"""Cooperative asyncio host that drives an engine once per frame."""

from __future__ import annotations

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable

from power_snake.engine import GameEngine
from power_snake.models import Snapshot

logger = logging.getLogger(__name__)

FrameCallback = Callable[[Snapshot], Awaitable[None] | None]


class FrameLoop:
    """Calls :meth:`GameEngine.frame` at a fixed display rate.

    Everything runs on the event loop's thread; the only suspension point
    is the sleep until the next frame. The loop ends when the game is over
    or :meth:`stop` is called.
    """

    def __init__(
        self,
        engine: GameEngine,
        fps: float = 60.0,
        on_frame: FrameCallback | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if fps <= 0:
            raise ValueError("fps must be positive.")
        self.engine = engine
        self.frame_interval = 1.0 / fps
        self.on_frame = on_frame
        self._clock = clock
        self._running = False
        self.frames = 0

    def now_ms(self) -> float:
        """Current host time in milliseconds."""
        return self._clock() * 1000.0

    def stop(self) -> None:
        """Ask the loop to exit after the current frame."""
        self._running = False

    async def run(self) -> Snapshot:
        """Run until game over or :meth:`stop`. Returns the final snapshot."""
        self._running = True
        if not self.engine.game_over:
            self.engine.start(self.now_ms())
        try:
            while self._running and not self.engine.game_over:
                await asyncio.sleep(self.frame_interval)
                self.engine.frame(self.now_ms())
                self.frames += 1
                if self.on_frame is not None:
                    result = self.on_frame(self.engine.snapshot())
                    if asyncio.iscoroutine(result):
                        await result
        except asyncio.CancelledError:
            logger.info("Frame loop cancelled after %d frames.", self.frames)
            raise
        except Exception:
            logger.exception("Frame loop error at tick %d.", self.engine.tick)
            self.engine.end()
        finally:
            self._running = False
        return self.engine.snapshot()
