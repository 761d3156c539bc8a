"""Immutable game configuration injected into the world at construction."""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Tuple

from tileblast import constants


@dataclass(frozen=True, slots=True)
class GameConfig:
    rows: int = constants.GRID_ROWS
    cols: int = constants.GRID_COLS
    colors: Tuple[str, ...] = constants.TILE_COLORS
    start_moves: int = constants.START_MOVES
    target_score: int = constants.TARGET_SCORE
    reshuffle_limit: int = constants.RESHUFFLE_LIMIT
    start_bombs: int = constants.START_BOMBS
    start_teleports: int = constants.START_TELEPORTS
    bomb_radius: int = constants.BOMB_RADIUS
    min_group_size: int = constants.MIN_GROUP_SIZE
    mega_bomb_min_group_size: int = constants.MEGA_BOMB_MIN_GROUP_SIZE
    score_per_tile: int = constants.SCORE_PER_TILE
    # Reshuffle immediately instead of waiting for the no-moves dialog.
    auto_reshuffle: bool = False

    def __post_init__(self) -> None:
        colors = tuple(self.colors)
        object.__setattr__(self, "colors", colors)
        if self.rows <= 0 or self.cols <= 0:
            raise ValueError(f"Board dimensions must be positive, got {self.rows}x{self.cols}")
        if not colors:
            raise ValueError("Color palette must not be empty")
        if len(set(colors)) != len(colors):
            raise ValueError(f"Color palette contains duplicates: {colors}")
        if constants.MEGA_BOMB_COLOR in colors:
            raise ValueError(f"'{constants.MEGA_BOMB_COLOR}' is reserved and cannot be a palette color")
        if self.min_group_size < 1:
            raise ValueError("min_group_size must be at least 1")
        for name in (
            "start_moves",
            "target_score",
            "reshuffle_limit",
            "start_bombs",
            "start_teleports",
            "bomb_radius",
            "mega_bomb_min_group_size",
            "score_per_tile",
        ):
            if getattr(self, name) < 0:
                raise ValueError(f"{name} must not be negative")

    def with_overrides(self, **changes) -> "GameConfig":
        return replace(self, **changes)
