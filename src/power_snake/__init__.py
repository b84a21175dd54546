"""Power Snake: fixed-timestep snake simulation core."""

from power_snake.clock import SimulationClock
from power_snake.collision import CollisionResolver, Outcome, Resolution
from power_snake.config import GameConfig, PowerUpConfig
from power_snake.engine import GameEngine, GameStatus
from power_snake.food import Food, FoodSpawner
from power_snake.grid import Coordinate, Grid, WallMode
from power_snake.models import SessionRecord, Snapshot
from power_snake.policy import WorldView, greedy_food_policy
from power_snake.powerups import PowerUpSystem, PowerUpType
from power_snake.replay import ReplayLog, replay
from power_snake.snake import Direction, Snake

__all__ = [
    "CollisionResolver",
    "Coordinate",
    "Direction",
    "Food",
    "FoodSpawner",
    "GameConfig",
    "GameEngine",
    "GameStatus",
    "Grid",
    "Outcome",
    "PowerUpConfig",
    "PowerUpSystem",
    "PowerUpType",
    "ReplayLog",
    "Resolution",
    "SessionRecord",
    "SimulationClock",
    "Snake",
    "Snapshot",
    "WallMode",
    "WorldView",
    "greedy_food_policy",
    "replay",
]
