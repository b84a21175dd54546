"""Per-tick collision resolution for a snake that has just moved."""

from __future__ import annotations

import enum
import logging
from collections.abc import Collection
from dataclasses import dataclass
from typing import TYPE_CHECKING

from power_snake.grid import Coordinate, WallMode

if TYPE_CHECKING:
    from power_snake.food import Food, FoodSpawner
    from power_snake.grid import Grid
    from power_snake.powerups import PowerUpSystem, PowerUpType
    from power_snake.snake import Snake

logger = logging.getLogger(__name__)


class Outcome(enum.Enum):
    """Result of one tick for one snake, in increasing precedence."""

    CONTINUED = "continued"
    FOOD_EATEN = "food_eaten"
    POWER_UP_COLLECTED = "power_up_collected"
    GAME_OVER = "game_over"


@dataclass(frozen=True)
class Resolution:
    """What happened to a snake during a tick."""

    outcome: Outcome
    snake_id: int = 0
    points: int = 0
    collected: PowerUpType | None = None
    shielded: bool = False
    cause: str | None = None


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


class CollisionResolver:
    """Evaluates wall, body, food and pickup interactions after a step.

    Power-up effects (shield, ghost, score multiplier, pickup collection)
    only apply to the player snake; opponents play by the plain rules.
    """

    def __init__(
        self,
        grid: Grid,
        powerups: PowerUpSystem,
        food_spawner: FoodSpawner,
        food_value: int = 10,
        grow_amount: int = 1,
    ) -> None:
        self.grid = grid
        self.powerups = powerups
        self.food_spawner = food_spawner
        self.food_value = food_value
        self.grow_amount = grow_amount

    def wraps(self, player: bool = True) -> bool:
        """Whether the edge policy for this snake is wrap-around this tick."""
        if self.grid.wall_mode == WallMode.WRAP:
            return True
        return player and self.powerups.has_ghost()

    def resolve(
        self,
        snake: Snake,
        food: Food,
        now: float,
        others: Collection[Coordinate] = frozenset(),
        player: bool = True,
    ) -> Resolution:
        """Resolve the tick for *snake*, which must already have stepped.

        ``others`` holds the cells of every other live snake; running into
        them is treated like running into yourself.
        """
        shield = player and self.powerups.has_shield()
        head = snake.head
        sid = snake.snake_id

        # --- wall ---
        if not self.grid.in_bounds(head):
            # The head never leaves the grid, even on a fatal move.
            snake.revert_step()
            if shield:
                logger.debug("Shield absorbed wall hit for snake %d.", sid)
                return Resolution(Outcome.CONTINUED, sid, shielded=True, cause="wall")
            return self._die(snake, "wall")

        # --- bodies ---
        shielded = False
        hit = "self" if snake.check_self_collision() else None
        if hit is None and head in others:
            hit = "snake"
        if hit is not None:
            if not shield:
                return self._die(snake, hit)
            shielded = True
            logger.debug("Shield suppressed %s collision for snake %d.", hit, sid)

        outcome = Outcome.CONTINUED
        points = 0
        pickup = self.powerups.pickup

        # --- food ---
        if food.position is not None and head == food.position:
            multiplier = self.powerups.score_multiplier() if player else 1
            points = food.value * multiplier
            snake.grow(self.grow_amount)
            occupied = self._occupied(snake, others)
            if pickup is not None:
                occupied.add(pickup.position)
            food.position = self.food_spawner.place(occupied, self.grid.size)
            outcome = Outcome.FOOD_EATEN

        # --- pickup ---
        collected = self.powerups.try_collect(head, now) if player else None
        if collected is not None:
            outcome = Outcome.POWER_UP_COLLECTED

        # --- magnet ---
        if player and self.powerups.has_magnet():
            self._pull_food(food, head, self._occupied(snake, others))

        return Resolution(
            outcome, sid, points=points, collected=collected, shielded=shielded,
        )

    def _occupied(self, snake: Snake, others: Collection[Coordinate]) -> set[Coordinate]:
        occupied = set(snake.body)
        occupied.update(others)
        return occupied

    def _pull_food(self, food: Food, head: Coordinate, occupied: set[Coordinate]) -> None:
        """Nudge food one cell toward *head* along the longer axis."""
        if food.position is None:
            return
        fx, fy = food.position
        dx = head.x - fx
        dy = head.y - fy
        if dx == 0 and dy == 0:
            return
        if abs(dx) >= abs(dy):
            target = Coordinate(fx + _sign(dx), fy)
        else:
            target = Coordinate(fx, fy + _sign(dy))

        pickup = self.powerups.pickup
        if not self.grid.in_bounds(target) or target in occupied:
            return
        if pickup is not None and pickup.position == target:
            return
        food.position = target

    def _die(self, snake: Snake, cause: str) -> Resolution:
        snake.alive = False
        logger.debug("Snake %d hit %s at %s.", snake.snake_id, cause, tuple(snake.head))
        return Resolution(Outcome.GAME_OVER, snake.snake_id, cause=cause)
