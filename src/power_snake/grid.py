"""Grid coordinate space and occupancy queries."""

from __future__ import annotations

import enum
from collections.abc import Iterable
from typing import TYPE_CHECKING, NamedTuple

import numpy as np

if TYPE_CHECKING:
    from power_snake.snake import Direction


class WallMode(enum.Enum):
    """Defines behavior when a snake reaches the grid boundary."""

    DEATH = "death"
    WRAP = "wrap"


class CellType(enum.IntEnum):
    """Integer codes stored in rendered grid arrays."""

    EMPTY = 0
    SNAKE = 1
    FOOD = 2
    PICKUP = 3


class Coordinate(NamedTuple):
    """An integer grid cell. ``x`` is the column, ``y`` the row."""

    x: int
    y: int

    def shifted(self, direction: Direction) -> Coordinate:
        """Return the neighbouring cell one step along *direction*."""
        dx, dy = direction.value
        return Coordinate(self.x + dx, self.y + dy)


class Grid:
    """Square NxN grid with a configurable wall mode.

    Occupancy is never stored on the grid itself; callers pass the set of
    occupied cells and the grid answers placement questions with a NumPy
    mask indexed ``[y, x]``.
    """

    def __init__(self, size: int = 20, wall_mode: WallMode = WallMode.DEATH) -> None:
        if size < 4:
            raise ValueError("Grid size must be at least 4.")
        self.size = size
        self.wall_mode = wall_mode

    def in_bounds(self, cell: Coordinate) -> bool:
        """Check whether a coordinate lies within the grid."""
        return 0 <= cell.x < self.size and 0 <= cell.y < self.size

    def wrap(self, cell: Coordinate) -> Coordinate:
        """Wrap coordinates around the grid edges."""
        return Coordinate((cell.x + self.size) % self.size, (cell.y + self.size) % self.size)

    def occupancy(self, occupied: Iterable[Coordinate]) -> np.ndarray:
        """Return a boolean ``(size, size)`` mask of occupied in-bounds cells."""
        mask = np.zeros((self.size, self.size), dtype=bool)
        for cell in occupied:
            if self.in_bounds(cell):
                mask[cell.y, cell.x] = True
        return mask

    def free_cells(self, occupied: Iterable[Coordinate]) -> list[Coordinate]:
        """Return all unoccupied cells in row-major order."""
        rows, cols = np.where(~self.occupancy(occupied))
        return [Coordinate(c, r) for r, c in zip(rows.tolist(), cols.tolist(), strict=True)]

    def render(
        self,
        bodies: Iterable[Iterable[Coordinate]],
        food: Coordinate | None = None,
        pickup: Coordinate | None = None,
    ) -> np.ndarray:
        """Paint snakes, food and the pickup into a :class:`CellType` matrix."""
        cells = np.zeros((self.size, self.size), dtype=np.int8)
        if food is not None:
            cells[food.y, food.x] = CellType.FOOD
        if pickup is not None:
            cells[pickup.y, pickup.x] = CellType.PICKUP
        for body in bodies:
            for seg in body:
                if self.in_bounds(seg):
                    cells[seg.y, seg.x] = CellType.SNAKE
        return cells

    def to_dict(self) -> dict:
        """Serialize grid settings to a dictionary."""
        return {
            "size": self.size,
            "wall_mode": self.wall_mode.value,
        }
