"""Fixed-timestep accumulator driving simulation ticks from frame callbacks."""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class SimulationClock:
    """Converts variable frame timestamps into whole fixed-size steps.

    Each frame the host calls :meth:`advance` with the current timestamp,
    then :meth:`take_step` in a loop until it returns ``False``, then
    :meth:`settle`. At most ``max_catch_up_steps`` steps run per frame; any
    backlog beyond that is dropped so a long stall cannot cause a burst.

    ``elapsed_ms`` is game time: it only grows while the clock is running.
    """

    def __init__(self, max_catch_up_steps: int = 5) -> None:
        if max_catch_up_steps < 1:
            raise ValueError("max_catch_up_steps must be at least 1.")
        self.max_catch_up_steps = max_catch_up_steps
        self.accumulator_ms = 0.0
        self.elapsed_ms = 0.0
        self.paused = False
        self._last_ms: float | None = None
        self._steps_this_frame = 0

    def reset(self, now_ms: float | None = None) -> None:
        """Zero the accumulator and game time, starting from *now_ms*."""
        self.accumulator_ms = 0.0
        self.elapsed_ms = 0.0
        self.paused = False
        self._last_ms = now_ms
        self._steps_this_frame = 0

    def advance(self, now_ms: float) -> float:
        """Start a frame at *now_ms*. Returns the game time added."""
        self._steps_this_frame = 0
        if self._last_ms is None or self.paused:
            self._last_ms = now_ms
            return 0.0
        delta = max(0.0, now_ms - self._last_ms)
        self._last_ms = now_ms
        self.accumulator_ms += delta
        self.elapsed_ms += delta
        return delta

    def take_step(self, step_ms: float) -> bool:
        """Consume one step of *step_ms* if one is due this frame."""
        if step_ms <= 0:
            raise ValueError("step_ms must be positive.")
        if self.paused or self._steps_this_frame >= self.max_catch_up_steps:
            return False
        if self.accumulator_ms < step_ms:
            return False
        self.accumulator_ms -= step_ms
        self._steps_this_frame += 1
        return True

    def settle(self, step_ms: float) -> None:
        """Finish a frame, discarding backlog left over by the step cap."""
        if self.accumulator_ms >= step_ms:
            dropped = self.accumulator_ms - self.accumulator_ms % step_ms
            self.accumulator_ms %= step_ms
            logger.info(
                "Dropped %.1f ms of simulation backlog after %d catch-up steps.",
                dropped, self._steps_this_frame,
            )

    def pause(self) -> None:
        """Freeze accumulation until :meth:`resume`."""
        self.paused = True

    def resume(self, now_ms: float) -> None:
        """Resume from *now_ms* so the paused interval is never simulated."""
        self.paused = False
        self._last_ms = now_ms
