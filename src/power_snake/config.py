"""Game and power-up configuration."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path

from power_snake.grid import Coordinate, WallMode
from power_snake.powerups import PowerUpType
from power_snake.snake import Direction

logger = logging.getLogger(__name__)

# Spawn slots: (x_fraction, y_fraction, direction). Slot 0 is the player.
_SPAWN_LAYOUT: list[tuple[float, float, Direction]] = [
    (0.5, 0.5, Direction.RIGHT),
    (0.75, 0.25, Direction.LEFT),
    (0.25, 0.75, Direction.RIGHT),
    (0.75, 0.75, Direction.LEFT),
]


def _default_durations() -> dict[str, int]:
    return {
        PowerUpType.SPEED.value: 5000,
        PowerUpType.SLOW.value: 3000,
        PowerUpType.SHIELD.value: 3000,
        PowerUpType.DOUBLE.value: 10000,
        PowerUpType.MAGNET.value: 5000,
        PowerUpType.GHOST.value: 3000,
    }


@dataclass(frozen=True)
class PowerUpConfig:
    """Spawn timing, lifetimes and effect strengths for power-ups."""

    spawn_interval_ms: int = 10_000
    lifetime_ms: int = 5_000
    durations_ms: dict[str, int] = field(default_factory=_default_durations)
    speed_multiplier: float = 1.8
    slow_multiplier: float = 0.6
    min_speed_scale: float = 0.2
    double_multiplier: int = 2

    def __post_init__(self) -> None:
        if self.spawn_interval_ms <= 0 or self.lifetime_ms <= 0:
            raise ValueError("spawn_interval_ms and lifetime_ms must be positive.")
        missing = {t.value for t in PowerUpType} - set(self.durations_ms)
        if missing:
            raise ValueError(f"durations_ms is missing {sorted(missing)}.")
        if any(d <= 0 for d in self.durations_ms.values()):
            raise ValueError("durations_ms values must be positive.")
        if self.min_speed_scale <= 0:
            raise ValueError("min_speed_scale must be positive.")


@dataclass(frozen=True)
class GameConfig:
    """Full game configuration.

    Supports JSON serialization so sessions and replays are reproducible.
    """

    # Grid
    grid_size: int = 20
    wall_mode: str = "death"

    # Snakes
    initial_length: int = 3
    moves_per_second: float = 7.0
    opponents: int = 0

    # Food and scoring
    food_value: int = 10
    grow_amount: int = 1
    level_up_score: int = 100
    level_speed_factor: float = 1.1

    # Power-ups
    power_ups_enabled: bool = True
    power_ups: PowerUpConfig = field(default_factory=PowerUpConfig)

    # Clock
    max_catch_up_steps: int = 5

    # Recording
    record_replay: bool = True

    seed: int | None = None

    def __post_init__(self) -> None:
        if self.grid_size < 4:
            raise ValueError("grid_size must be at least 4.")
        WallMode(self.wall_mode)
        if self.initial_length < 1:
            raise ValueError("initial_length must be at least 1.")
        if self.moves_per_second <= 0:
            raise ValueError("moves_per_second must be positive.")
        if not 0 <= self.opponents <= 3:
            raise ValueError("opponents must be between 0 and 3.")
        if self.grow_amount < 0:
            raise ValueError("grow_amount must be >= 0.")
        if self.level_up_score < 1:
            raise ValueError("level_up_score must be at least 1.")
        if self.max_catch_up_steps < 1:
            raise ValueError("max_catch_up_steps must be at least 1.")

        occupied: set[Coordinate] = set()
        for i, (head, direction) in enumerate(self.spawn_points()):
            dx, dy = direction.value
            for seg in range(self.initial_length):
                x = head.x - dx * seg
                y = head.y - dy * seg
                if not (0 <= x < self.grid_size and 0 <= y < self.grid_size):
                    raise ValueError(
                        "initial_length does not fit the configured grid "
                        f"for snake {i}; increase grid_size or reduce length."
                    )
                if (x, y) in occupied:
                    raise ValueError(
                        "spawn layout overlaps for this configuration; increase "
                        "grid_size or reduce initial_length."
                    )
                occupied.add(Coordinate(x, y))

    @property
    def wall(self) -> WallMode:
        """The configured edge policy as a :class:`WallMode`."""
        return WallMode(self.wall_mode)

    def spawn_points(self) -> list[tuple[Coordinate, Direction]]:
        """Head cell and heading for the player followed by each opponent."""
        points = []
        for x_frac, y_frac, direction in _SPAWN_LAYOUT[: self.opponents + 1]:
            head = Coordinate(int(self.grid_size * x_frac), int(self.grid_size * y_frac))
            points.append((head, direction))
        return points

    def to_dict(self) -> dict:
        """Serialize to a plain dict."""
        return asdict(self)

    def save(self, path: str | Path) -> None:
        """Write config to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Config saved to %s", p)

    @classmethod
    def from_dict(cls, raw: dict) -> GameConfig:
        """Build a config from :meth:`to_dict` output."""
        raw = dict(raw)
        power_data = raw.pop("power_ups", {})
        raw["power_ups"] = PowerUpConfig(**power_data)
        return cls(**raw)

    @classmethod
    def load(cls, path: str | Path) -> GameConfig:
        """Load config from a JSON file."""
        return cls.from_dict(json.loads(Path(path).read_text()))
