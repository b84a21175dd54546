"""Timed power-up pickups and stacked effect resolution."""

from __future__ import annotations

import enum
import logging
from collections.abc import Collection
from dataclasses import dataclass
from typing import TYPE_CHECKING

from power_snake.food import FoodSpawner
from power_snake.grid import Coordinate

if TYPE_CHECKING:
    from power_snake.config import PowerUpConfig

logger = logging.getLogger(__name__)


class PowerUpType(enum.Enum):
    """Kinds of pickup and the effect each one grants."""

    SPEED = "speed"
    SLOW = "slow"
    SHIELD = "shield"
    DOUBLE = "double"
    MAGNET = "magnet"
    GHOST = "ghost"


ALL_TYPES: list[PowerUpType] = list(PowerUpType)


@dataclass(frozen=True)
class PowerUpPickup:
    """A spawned, time-limited item waiting on the grid."""

    type: PowerUpType
    position: Coordinate
    spawned_at: float
    lifetime_ms: float

    def expired(self, now: float) -> bool:
        """Whether the pickup has outlived its lifetime at *now*."""
        return now - self.spawned_at >= self.lifetime_ms

    def remaining_fraction(self, now: float) -> float:
        """Fraction of the lifetime left, clamped to ``[0, 1]``."""
        left = 1.0 - (now - self.spawned_at) / self.lifetime_ms
        return max(0.0, min(1.0, left))


@dataclass(frozen=True)
class ActiveEffect:
    """An effect currently in force."""

    type: PowerUpType
    expires_at: float


class PowerUpSystem:
    """Owns the single pickup slot and the active-effect table.

    Per effect type the lifecycle is ``inactive -> active -> inactive``;
    collecting a type that is already active overwrites its expiry rather
    than extending it. All timestamps are game-time milliseconds supplied by
    the caller, so freezing game time freezes every timer here as well.
    """

    def __init__(
        self,
        config: PowerUpConfig | None = None,
        spawner: FoodSpawner | None = None,
    ) -> None:
        if config is None:
            from power_snake.config import PowerUpConfig

            config = PowerUpConfig()
        self.config = config
        self.spawner = spawner if spawner is not None else FoodSpawner()
        self.active: dict[PowerUpType, ActiveEffect] = {}
        self.pickup: PowerUpPickup | None = None
        self.last_spawn_at = 0.0

    def reset(self, now: float = 0.0) -> None:
        """Clear all effects and the pickup, restarting the spawn timer."""
        self.active.clear()
        self.pickup = None
        self.last_spawn_at = now

    def duration(self, power_up: PowerUpType) -> float:
        """Effect length in milliseconds for *power_up*."""
        return float(self.config.durations_ms[power_up.value])

    def tick(
        self, now: float, occupied: Collection[Coordinate], grid_size: int,
    ) -> list[PowerUpType]:
        """Expire effects and the pickup, then spawn a pickup if one is due.

        Returns the effect types that expired. Calling twice with the same
        ``now`` leaves the state unchanged the second time.
        """
        expired = [t for t, eff in self.active.items() if eff.expires_at <= now]
        for power_up in expired:
            del self.active[power_up]
            logger.debug("Effect %s expired at %.0f ms.", power_up.value, now)

        if self.pickup is not None and self.pickup.expired(now):
            logger.debug("Pickup %s despawned uncollected.", self.pickup.type.value)
            self.pickup = None

        if (
            self.pickup is None
            and now - self.last_spawn_at >= self.config.spawn_interval_ms
        ):
            self._spawn(now, occupied, grid_size)

        return expired

    def _spawn(
        self, now: float, occupied: Collection[Coordinate], grid_size: int,
    ) -> None:
        self.last_spawn_at = now
        position = self.spawner.place(occupied, grid_size)
        if position is None:
            logger.warning("Skipping pickup spawn: grid is full.")
            return
        index = int(self.spawner.rng.integers(len(ALL_TYPES)))
        self.pickup = PowerUpPickup(
            type=ALL_TYPES[index],
            position=position,
            spawned_at=now,
            lifetime_ms=float(self.config.lifetime_ms),
        )
        logger.debug(
            "Spawned %s pickup at (%d, %d).",
            self.pickup.type.value, position.x, position.y,
        )

    def try_collect(self, head: Coordinate, now: float) -> PowerUpType | None:
        """Collect the pickup if *head* is on it. Returns the collected type."""
        if self.pickup is None or self.pickup.position != head:
            return None
        power_up = self.pickup.type
        self.pickup = None
        self.activate(power_up, now)
        return power_up

    def activate(self, power_up: PowerUpType, now: float) -> None:
        """Start or refresh an effect."""
        expires_at = now + self.duration(power_up)
        self.active[power_up] = ActiveEffect(power_up, expires_at)
        logger.info("Power-up %s active until %.0f ms.", power_up.value, expires_at)

    def is_active(self, power_up: PowerUpType) -> bool:
        """Whether an effect of *power_up* is in force."""
        return power_up in self.active

    def speed_scale(self) -> float:
        """Combined movement-rate multiplier from speed-affecting effects."""
        scale = 1.0
        if self.is_active(PowerUpType.SPEED):
            scale *= self.config.speed_multiplier
        if self.is_active(PowerUpType.SLOW):
            scale *= self.config.slow_multiplier
        return max(self.config.min_speed_scale, scale)

    def score_multiplier(self) -> int:
        """Points multiplier for eaten food."""
        return self.config.double_multiplier if self.is_active(PowerUpType.DOUBLE) else 1

    def has_shield(self) -> bool:
        """Whether collisions are currently absorbed."""
        return self.is_active(PowerUpType.SHIELD)

    def has_ghost(self) -> bool:
        """Whether the walls wrap for the player."""
        return self.is_active(PowerUpType.GHOST)

    def has_magnet(self) -> bool:
        """Whether food is being pulled toward the head."""
        return self.is_active(PowerUpType.MAGNET)

    def remaining_seconds(self, now: float) -> dict[PowerUpType, float]:
        """Seconds left on each active effect, sorted by type name."""
        return {
            t: max(0.0, (self.active[t].expires_at - now) / 1000.0)
            for t in sorted(self.active, key=lambda t: t.value)
        }
