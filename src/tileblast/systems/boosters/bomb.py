from __future__ import annotations

from typing import List

from esper import World

from tileblast.components.booster_mode import BombMode
from tileblast.components.tile import TilePos
from tileblast.systems.board_ops import get_board, occupied_in_square
from tileblast.systems.state_utils import get_bomb_mode


class BombController:
    """Bomb booster: computes the occupied square around a click.

    Does not remove tiles itself; the caller clears the returned cells.
    """

    def __init__(self, world: World) -> None:
        self.world = world

    @property
    def _mode(self) -> BombMode:
        return get_bomb_mode(self.world)

    @property
    def radius(self) -> int:
        return self._mode.radius

    def is_active(self) -> bool:
        return self._mode.active

    def toggle(self) -> bool:
        mode = self._mode
        mode.active = not mode.active
        return mode.active

    def reset(self) -> None:
        self._mode.active = False

    def handle_click(self, pos: TilePos) -> List[TilePos]:
        mode = self._mode
        if not mode.active:
            return []
        # One activation, one explosion.
        mode.active = False
        return occupied_in_square(get_board(self.world), pos, mode.radius)
