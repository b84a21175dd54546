"""Pydantic models for the read-only snapshot and the exported session record."""

from __future__ import annotations

from pydantic import BaseModel, Field


class SnakeView(BaseModel):
    """One snake as seen by a renderer."""

    snake_id: int
    body: list[tuple[int, int]]
    direction: str
    alive: bool
    score: int = Field(ge=0)

    @property
    def length(self) -> int:
        """Number of body segments."""
        return len(self.body)


class PickupView(BaseModel):
    """The uncollected pickup on the grid."""

    type: str
    position: tuple[int, int]
    remaining_fraction: float = Field(ge=0.0, le=1.0)


class EffectView(BaseModel):
    """An active effect and the seconds it has left."""

    type: str
    remaining_seconds: float = Field(ge=0.0)


class Snapshot(BaseModel):
    """Everything a renderer or HUD needs for one frame."""

    tick: int
    status: str
    grid_size: int
    wall_mode: str
    score: int
    high_score: int
    level: int
    food: tuple[int, int] | None
    pickup: PickupView | None = None
    effects: list[EffectView] = Field(default_factory=list)
    snakes: list[SnakeView]
    game_over: bool


class SessionRecord(BaseModel):
    """Summary handed to leaderboard/achievement collaborators at game over."""

    score: int = Field(ge=0)
    food_eaten: int = Field(ge=0)
    power_ups_collected: int = Field(ge=0)
    snake_length: int = Field(ge=0)
    duration_seconds: float = Field(ge=0.0)
