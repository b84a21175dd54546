"""Food placement logic."""

from __future__ import annotations

import logging
from collections.abc import Collection
from dataclasses import dataclass

import numpy as np

from power_snake.grid import Coordinate, Grid

logger = logging.getLogger(__name__)


@dataclass
class Food:
    """The single active food item. ``position`` is ``None`` on a full grid."""

    position: Coordinate | None
    value: int = 10

    def to_dict(self) -> dict:
        """Serialize food state to a dictionary."""
        return {
            "position": list(self.position) if self.position is not None else None,
            "value": self.value,
        }


class FoodSpawner:
    """Places items on free cells.

    Uses a seeded NumPy RNG for deterministic, reproducible placement.
    Random sampling is bounded by ``max_attempts``; after that a linear
    scan picks the first free cell so placement always terminates.
    """

    def __init__(
        self,
        rng: np.random.Generator | None = None,
        max_attempts: int = 200,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1.")
        self.rng = rng if rng is not None else np.random.default_rng()
        self.max_attempts = max_attempts

    def place(
        self, occupied: Collection[Coordinate], grid_size: int,
    ) -> Coordinate | None:
        """Return a free cell, or ``None`` when every cell is occupied."""
        for _ in range(self.max_attempts):
            x, y = self.rng.integers(grid_size, size=2).tolist()
            cell = Coordinate(x, y)
            if cell not in occupied:
                return cell

        logger.debug(
            "Random placement failed after %d attempts; scanning.",
            self.max_attempts,
        )
        free = Grid(grid_size).free_cells(occupied)
        if free:
            return free[0]

        logger.warning("No free cells available for placement.")
        return None
