"""Snake representation and movement logic."""

from __future__ import annotations

import enum
from collections import deque
from typing import TYPE_CHECKING

from power_snake.grid import Coordinate

if TYPE_CHECKING:
    from power_snake.grid import Grid


class Direction(enum.Enum):
    """Cardinal movement directions with (dx, dy) values. ``y`` grows downward."""

    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def opposite(self) -> Direction:
        """The direction that would reverse into the neck."""
        return _OPPOSITES[self]


# Pairs that would cause an instant 180° reversal.
_OPPOSITES: dict[Direction, Direction] = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


class Snake:
    """A snake represented as an ordered deque of :class:`Coordinate` segments.

    The head is ``body[0]``; the tail is ``body[-1]``. Direction changes are
    buffered in ``pending_direction`` and only take effect on :meth:`step`.
    """

    def __init__(
        self,
        head: Coordinate,
        direction: Direction = Direction.RIGHT,
        length: int = 3,
        moves_per_second: float = 7.0,
        snake_id: int = 0,
    ) -> None:
        if length < 1:
            raise ValueError("Snake length must be at least 1.")
        if moves_per_second <= 0:
            raise ValueError("moves_per_second must be positive.")
        dx, dy = direction.value
        self.body: deque[Coordinate] = deque(
            Coordinate(head.x - dx * i, head.y - dy * i) for i in range(length)
        )
        self.snake_id = snake_id
        self.current_direction = direction
        self.pending_direction = direction
        self.growth_pending = 0
        self.moves_per_second = moves_per_second
        self.alive = True
        self._undo: tuple[Direction, Coordinate | None] | None = None

    @property
    def head(self) -> Coordinate:
        """Return the head coordinate."""
        return self.body[0]

    def __len__(self) -> int:
        return len(self.body)

    def set_pending_direction(self, direction: Direction) -> bool:
        """Buffer a direction for the next step, ignoring 180° reversals.

        Later calls before the next step overwrite earlier ones. Returns
        whether the request was accepted.
        """
        if direction is self.current_direction.opposite:
            return False
        self.pending_direction = direction
        return True

    def step(self, grid: Grid, wrap: bool = False) -> Coordinate:
        """Move the snake one cell along the pending direction.

        With ``wrap`` the new head is folded back onto the grid; otherwise it
        may lie out of bounds and the caller decides what that means.
        Returns the new head.
        """
        previous = self.current_direction
        self.current_direction = self.pending_direction
        new_head = self.head.shifted(self.current_direction)
        if wrap:
            new_head = grid.wrap(new_head)

        self.body.appendleft(new_head)
        if self.growth_pending > 0:
            self.growth_pending -= 1
            vacated = None
        else:
            vacated = self.body.pop()
        self._undo = (previous, vacated)
        return new_head

    def revert_step(self) -> None:
        """Undo the most recent :meth:`step`, restoring body and growth."""
        if self._undo is None:
            return
        previous, vacated = self._undo
        self._undo = None
        self.body.popleft()
        if vacated is None:
            self.growth_pending += 1
        else:
            self.body.append(vacated)
        self.current_direction = previous

    def grow(self, segments: int = 1) -> None:
        """Queue growth for the next *segments* steps."""
        self.growth_pending += segments

    def occupies(self, cell: Coordinate) -> bool:
        """Check whether the snake occupies a given cell."""
        return cell in self.body

    def check_self_collision(self) -> bool:
        """Check whether the head overlaps any other body segment."""
        head = self.head
        return any(seg == head for seg in list(self.body)[1:])

    def to_dict(self) -> dict:
        """Serialize snake state to a dictionary."""
        return {
            "snake_id": self.snake_id,
            "body": [list(seg) for seg in self.body],
            "direction": self.current_direction.name.lower(),
            "growth_pending": self.growth_pending,
            "alive": self.alive,
        }
