"""Recording and deterministic replay of sessions."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from power_snake.config import GameConfig
from power_snake.snake import Direction

if TYPE_CHECKING:
    from power_snake.models import SessionRecord
    from power_snake.policy import WorldView
    from power_snake.snake import Snake

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TickRecord:
    """Game time and the direction each live snake moved in on one tick."""

    now_ms: float
    directions: dict[int, str]


@dataclass
class ReplayLog:
    """Everything needed to re-run a session through the same step function."""

    config: GameConfig
    seed: int
    ticks: list[TickRecord] = field(default_factory=list)

    def record(self, now_ms: float, directions: dict[int, Direction]) -> None:
        """Append one tick's game time and per-snake directions."""
        self.ticks.append(
            TickRecord(now_ms, {sid: d.name.lower() for sid, d in directions.items()}),
        )

    def to_dict(self) -> dict:
        """Serialize the log to a JSON-compatible dict."""
        return {
            "config": self.config.to_dict(),
            "seed": self.seed,
            "ticks": [
                {"now_ms": t.now_ms, "directions": {str(k): v for k, v in t.directions.items()}}
                for t in self.ticks
            ],
        }

    def save(self, path: str | Path) -> None:
        """Write the log to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), separators=(",", ":")))
        logger.info("Replay with %d ticks saved to %s", len(self.ticks), p)

    @classmethod
    def load(cls, path: str | Path) -> ReplayLog:
        """Load a log from a JSON file."""
        raw = json.loads(Path(path).read_text())
        ticks = [
            TickRecord(
                float(t["now_ms"]),
                {int(k): v for k, v in t["directions"].items()},
            )
            for t in raw["ticks"]
        ]
        return cls(GameConfig.from_dict(raw["config"]), int(raw["seed"]), ticks)


class ReplayPolicy:
    """Direction policy that feeds back one snake's recorded moves."""

    def __init__(self, log: ReplayLog, snake_id: int) -> None:
        self.log = log
        self.snake_id = snake_id

    def __call__(self, snake: Snake, world: WorldView) -> Direction | None:
        if world.tick >= len(self.log.ticks):
            return None
        name = self.log.ticks[world.tick].directions.get(self.snake_id)
        return Direction[name.upper()] if name is not None else None


def replay(log: ReplayLog) -> SessionRecord:
    """Re-run a recorded session and return its record."""
    from power_snake.engine import GameEngine

    policies = {
        sid: ReplayPolicy(log, sid) for sid in range(log.config.opponents + 1)
    }
    engine = GameEngine(log.config, policies=policies)
    engine.reset(seed=log.seed)
    for entry in log.ticks:
        engine.step(now_ms=entry.now_ms)
        if engine.game_over:
            break
    logger.info("Replayed %d of %d ticks.", engine.tick, len(log.ticks))
    return engine.session_record()
