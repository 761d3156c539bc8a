from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from tileblast.config import GameConfig


class GameOverReason(Enum):
    NONE = "none"
    WIN = "win"
    LOSE = "lose"


@dataclass(slots=True)
class TurnState:
    """Score, move and booster counters plus win/lose evaluation.

    Only mutates itself. Counters never go below zero and score never
    decreases; every refused operation leaves the state untouched.
    """
    score: int
    moves_left: int
    target_score: int
    reshuffles_left: int
    bombs_left: int
    teleports_left: int
    min_group_size: int
    score_per_tile: int
    game_over: bool = False
    game_over_reason: GameOverReason = GameOverReason.NONE

    @classmethod
    def from_config(cls, config: GameConfig) -> "TurnState":
        return cls(
            score=0,
            moves_left=config.start_moves,
            target_score=config.target_score,
            reshuffles_left=config.reshuffle_limit,
            bombs_left=config.start_bombs,
            teleports_left=config.start_teleports,
            min_group_size=config.min_group_size,
            score_per_tile=config.score_per_tile,
        )

    # Group moves

    def can_remove_group(self, size: int) -> bool:
        if self.game_over:
            return False
        return size >= self.min_group_size

    def apply_group(self, size: int) -> int:
        """Spend one move and score ``size`` tiles. Returns the score gained."""
        if not self.can_remove_group(size):
            return 0
        gained = size * self.score_per_tile
        self.score += gained
        self.moves_left = max(0, self.moves_left - 1)
        self._update_game_over()
        return gained

    def apply_bomb(self, count: int) -> int:
        """Score ``count`` exploded tiles without spending a move."""
        if self.game_over or count <= 0:
            return 0
        gained = count * self.score_per_tile
        self.score += gained
        self._update_game_over()
        return gained

    def _update_game_over(self) -> None:
        if self.game_over:
            return
        # Reaching the target wins even on the last move.
        if self.score >= self.target_score:
            self.game_over = True
            self.game_over_reason = GameOverReason.WIN
            return
        if self.moves_left <= 0:
            self.game_over = True
            self.game_over_reason = GameOverReason.LOSE

    def force_lose(self) -> None:
        if self.game_over:
            return
        self.game_over = True
        self.game_over_reason = GameOverReason.LOSE

    # Charges

    def can_use_reshuffle(self) -> bool:
        return not self.game_over and self.reshuffles_left > 0

    def use_reshuffle(self) -> bool:
        if not self.can_use_reshuffle():
            return False
        self.reshuffles_left -= 1
        return True

    def can_use_bomb(self) -> bool:
        return not self.game_over and self.bombs_left > 0

    def use_bomb(self) -> bool:
        if not self.can_use_bomb():
            return False
        self.bombs_left -= 1
        return True

    def can_use_teleport(self) -> bool:
        return not self.game_over and self.teleports_left > 0

    def use_teleport(self) -> bool:
        if not self.can_use_teleport():
            return False
        self.teleports_left -= 1
        return True
