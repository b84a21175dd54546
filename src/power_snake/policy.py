"""Pluggable direction policies for computer-controlled snakes."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from power_snake.snake import Direction

if TYPE_CHECKING:
    from power_snake.grid import Coordinate
    from power_snake.snake import Snake


@dataclass(frozen=True)
class WorldView:
    """Read-only slice of the world handed to a policy each tick."""

    tick: int
    grid_size: int
    food: Coordinate | None
    occupied: frozenset[Coordinate]


# A policy returns the direction to request, or ``None`` to keep going.
DirectionPolicy = Callable[["Snake", WorldView], "Direction | None"]


def greedy_food_policy(snake: Snake, world: WorldView) -> Direction | None:
    """Head toward the food along whichever axis is further off.

    One step of lookahead only: the snake will happily turn into walls or
    bodies. A move that would reverse the snake keeps the current heading.
    """
    if world.food is None:
        return None
    dx = world.food.x - snake.head.x
    dy = world.food.y - snake.head.y
    if dx == 0 and dy == 0:
        return None
    if abs(dx) > abs(dy):
        wanted = Direction.RIGHT if dx > 0 else Direction.LEFT
    else:
        wanted = Direction.DOWN if dy > 0 else Direction.UP
    if wanted is snake.current_direction.opposite:
        return snake.current_direction
    return wanted
