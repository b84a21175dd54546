"""Frame-driven game engine composing grid, snakes, food and power-ups."""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable, Mapping

import numpy as np

from power_snake.clock import SimulationClock
from power_snake.collision import CollisionResolver, Outcome, Resolution
from power_snake.config import GameConfig
from power_snake.food import Food, FoodSpawner
from power_snake.grid import Coordinate, Grid
from power_snake.models import EffectView, PickupView, SessionRecord, Snapshot, SnakeView
from power_snake.policy import DirectionPolicy, WorldView, greedy_food_policy
from power_snake.powerups import PowerUpSystem
from power_snake.replay import ReplayLog
from power_snake.snake import Direction, Snake

logger = logging.getLogger(__name__)

PLAYER_ID = 0


class GameStatus(enum.Enum):
    """Lifecycle states for a session."""

    READY = "ready"
    PLAYING = "playing"
    PAUSED = "paused"
    GAME_OVER = "game_over"


class PlayerState:
    """Tracks per-snake scoring."""

    __slots__ = ("snake_id", "score", "food_eaten", "power_ups_collected")

    def __init__(self, snake_id: int) -> None:
        self.snake_id = snake_id
        self.score = 0
        self.food_eaten = 0
        self.power_ups_collected = 0


class GameEngine:
    """Single-session snake simulation.

    The engine owns the grid, snakes, food, power-ups and clock. A host
    calls :meth:`frame` once per display refresh; the engine drains every
    due fixed step and returns the player's per-tick resolutions. Tests and
    replays may call :meth:`step` directly, which ignores the session status
    apart from game over.

    Snake 0 is the player. Any other snake is an opponent driven by a
    direction policy (the greedy food chaser unless one is supplied);
    policies given for snake 0 act as an autopilot.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        policies: Mapping[int, DirectionPolicy] | None = None,
        on_game_over: Callable[[SessionRecord], None] | None = None,
    ) -> None:
        cfg = config or GameConfig()
        self.config = cfg
        self.policies: dict[int, DirectionPolicy] = dict(policies or {})
        for sid in range(1, cfg.opponents + 1):
            self.policies.setdefault(sid, greedy_food_policy)
        self.on_game_over = on_game_over

        self.grid = Grid(size=cfg.grid_size, wall_mode=cfg.wall)
        self.clock = SimulationClock(max_catch_up_steps=cfg.max_catch_up_steps)
        self.high_score = 0
        self._seeds = np.random.default_rng(cfg.seed)
        self.reset()

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    def reset(self, now_ms: float = 0.0, seed: int | None = None) -> None:
        """Discard the current session and prepare a fresh one."""
        cfg = self.config
        if seed is None:
            seed = int(self._seeds.integers(2**32))
        self.seed = seed
        self.rng = np.random.default_rng(seed)
        self.spawner = FoodSpawner(rng=self.rng)
        self.powerups = PowerUpSystem(cfg.power_ups, spawner=self.spawner)
        self.resolver = CollisionResolver(
            self.grid,
            self.powerups,
            self.spawner,
            food_value=cfg.food_value,
            grow_amount=cfg.grow_amount,
        )

        self.snakes: list[Snake] = []
        self.players: list[PlayerState] = []
        for sid, (head, direction) in enumerate(cfg.spawn_points()):
            self.snakes.append(Snake(
                head,
                direction,
                length=cfg.initial_length,
                moves_per_second=cfg.moves_per_second,
                snake_id=sid,
            ))
            self.players.append(PlayerState(sid))

        occupied = self._bodies()
        self.food = Food(self.spawner.place(occupied, self.grid.size), cfg.food_value)

        self.clock.reset(now_ms)
        self.powerups.reset(0.0)
        self.status = GameStatus.READY
        self.tick = 0
        self.level = 1
        self._last_tick_ms = 0.0
        self._reported = False
        self.replay_log = ReplayLog(cfg, seed)
        logger.debug("Session reset with seed %d.", seed)

    def start(self, now_ms: float = 0.0) -> None:
        """Begin play. Restarts a finished session and resumes a paused one."""
        if self.status == GameStatus.GAME_OVER:
            self.reset(now_ms)
        if self.status == GameStatus.PAUSED:
            self.toggle_pause(now_ms)
            return
        if self.status == GameStatus.READY:
            self.status = GameStatus.PLAYING
            self.clock.resume(now_ms)
            logger.info("Game started (seed=%d).", self.seed)

    def toggle_pause(self, now_ms: float = 0.0) -> None:
        """Pause a running game or resume a paused one. Timers stay frozen."""
        if self.status == GameStatus.PLAYING:
            self.status = GameStatus.PAUSED
            self.clock.pause()
            logger.info("Game paused at tick %d.", self.tick)
        elif self.status == GameStatus.PAUSED:
            self.status = GameStatus.PLAYING
            self.clock.resume(now_ms)
            logger.info("Game resumed at tick %d.", self.tick)

    def end(self) -> None:
        """Quit the current session as if the player had died."""
        if self.status in (GameStatus.PLAYING, GameStatus.PAUSED):
            self._finish("quit")

    @property
    def game_over(self) -> bool:
        """Whether the session has ended."""
        return self.status == GameStatus.GAME_OVER

    @property
    def player(self) -> Snake:
        """The player's snake."""
        return self.snakes[PLAYER_ID]

    @property
    def score(self) -> int:
        """The player's current score."""
        return self.players[PLAYER_ID].score

    @property
    def game_time_ms(self) -> float:
        """Unpaused game time reached by the clock or the last tick."""
        return max(self.clock.elapsed_ms, self._last_tick_ms)

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------

    def request_direction(self, snake_id: int, direction: Direction) -> bool:
        """Buffer a direction change for a specific snake.

        Reversals, dead snakes and finished games are ignored silently.
        """
        if not 0 <= snake_id < len(self.snakes):
            raise ValueError(
                f"snake_id {snake_id} out of range [0, {len(self.snakes)})."
            )
        snake = self.snakes[snake_id]
        if self.game_over or not snake.alive:
            return False
        return snake.set_pending_direction(direction)

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def step_ms(self) -> float:
        """Current fixed step length, including speed effects."""
        rate = self.player.moves_per_second * self.powerups.speed_scale()
        return 1000.0 / rate

    def frame(self, now_ms: float) -> list[Resolution]:
        """Run every step due at *now_ms*. Does nothing unless playing."""
        if self.status != GameStatus.PLAYING:
            return []
        self.clock.advance(now_ms)

        results: list[Resolution] = []
        while self.status == GameStatus.PLAYING and self.clock.take_step(self.step_ms()):
            results.append(self.step())
        if self.status == GameStatus.PLAYING:
            self.clock.settle(self.step_ms())
        return results

    def step(self, now_ms: float | None = None) -> Resolution:
        """Advance the game by one tick and return the player's resolution.

        *now_ms* overrides the game time for this tick; replays use it.
        """
        if self.game_over:
            return Resolution(Outcome.GAME_OVER, PLAYER_ID)

        now = self.clock.elapsed_ms if now_ms is None else now_ms
        self._last_tick_ms = now
        self._tick_powerups(now)
        self._apply_policies()

        live = [s for s in self.snakes if s.alive]
        if self.config.record_replay:
            directions = {s.snake_id: s.pending_direction for s in live}
            self.replay_log.record(now, directions)

        player_result = Resolution(Outcome.CONTINUED, PLAYER_ID)
        for snake in live:
            is_player = snake.snake_id == PLAYER_ID
            snake.step(self.grid, wrap=self.resolver.wraps(player=is_player))
            others = self._bodies(exclude=snake.snake_id)
            result = self.resolver.resolve(
                snake, self.food, now, others=others, player=is_player,
            )
            self._record(result)
            if is_player:
                player_result = result

        self.tick += 1
        if not self.player.alive:
            self._finish(player_result.cause or "collision")
        return player_result

    def _tick_powerups(self, now: float) -> None:
        if not self.config.power_ups_enabled:
            return
        occupied = self._bodies()
        if self.food.position is not None:
            occupied.add(self.food.position)
        self.powerups.tick(now, occupied, self.grid.size)

    def _apply_policies(self) -> None:
        if not self.policies:
            return
        world = WorldView(
            tick=self.tick,
            grid_size=self.grid.size,
            food=self.food.position,
            occupied=frozenset(self._bodies()),
        )
        for sid, policy in self.policies.items():
            if sid >= len(self.snakes) or not self.snakes[sid].alive:
                continue
            direction = policy(self.snakes[sid], world)
            if direction is not None:
                self.snakes[sid].set_pending_direction(direction)

    def _record(self, result: Resolution) -> None:
        state = self.players[result.snake_id]
        if result.points:
            state.score += result.points
            state.food_eaten += 1
        if result.collected is not None:
            state.power_ups_collected += 1

        if result.snake_id == PLAYER_ID:
            level = 1 + state.score // self.config.level_up_score
            if level > self.level:
                factor = self.config.level_speed_factor ** (level - self.level)
                self.player.moves_per_second *= factor
                self.level = level
                logger.info(
                    "Level %d reached; speed now %.2f moves/s.",
                    level, self.player.moves_per_second,
                )
        elif result.outcome == Outcome.GAME_OVER:
            logger.info(
                "Opponent %d died at tick %d with score %d.",
                result.snake_id, self.tick + 1, state.score,
            )

    def _finish(self, cause: str) -> None:
        """Transition to game over exactly once and hand off the record."""
        self.status = GameStatus.GAME_OVER
        self.clock.pause()
        self.high_score = max(self.high_score, self.score)
        logger.info(
            "Game over (%s) at tick %d with score %d.", cause, self.tick, self.score,
        )
        if self._reported:
            return
        self._reported = True
        if self.on_game_over is not None:
            self.on_game_over(self.session_record())

    def _bodies(self, exclude: int | None = None) -> set[Coordinate]:
        cells: set[Coordinate] = set()
        for snake in self.snakes:
            if snake.alive and snake.snake_id != exclude:
                cells.update(snake.body)
        return cells

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    def snapshot(self) -> Snapshot:
        """Return the state a renderer needs for this frame."""
        now = self.game_time_ms
        pickup = self.powerups.pickup
        return Snapshot(
            tick=self.tick,
            status=self.status.value,
            grid_size=self.grid.size,
            wall_mode=self.grid.wall_mode.value,
            score=self.score,
            high_score=max(self.high_score, self.score),
            level=self.level,
            food=tuple(self.food.position) if self.food.position is not None else None,
            pickup=None if pickup is None else PickupView(
                type=pickup.type.value,
                position=tuple(pickup.position),
                remaining_fraction=pickup.remaining_fraction(now),
            ),
            effects=[
                EffectView(type=t.value, remaining_seconds=secs)
                for t, secs in self.powerups.remaining_seconds(now).items()
            ],
            snakes=[
                SnakeView(
                    snake_id=s.snake_id,
                    body=[tuple(seg) for seg in s.body],
                    direction=s.current_direction.name.lower(),
                    alive=s.alive,
                    score=self.players[s.snake_id].score,
                )
                for s in self.snakes
            ],
            game_over=self.game_over,
        )

    def render(self) -> np.ndarray:
        """Return a CellType matrix of the current board."""
        pickup = self.powerups.pickup
        return self.grid.render(
            [s.body for s in self.snakes if s.alive],
            food=self.food.position,
            pickup=pickup.position if pickup is not None else None,
        )

    def session_record(self) -> SessionRecord:
        """Summary of the player's session for leaderboard collaborators."""
        state = self.players[PLAYER_ID]
        return SessionRecord(
            score=state.score,
            food_eaten=state.food_eaten,
            power_ups_collected=state.power_ups_collected,
            snake_length=len(self.player),
            duration_seconds=self.game_time_ms / 1000.0,
        )
