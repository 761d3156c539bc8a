from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Collection, List, Optional

from esper import World

from tileblast.components.tile import Cell, TilePos, TileSpecial
from tileblast.constants import MEGA_BOMB_COLOR
from tileblast.systems.board_ops import clear_all_tiles, get_board, remove_group

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class MegaBombCreation:
    created: bool
    center: Optional[TilePos] = None
    # Cells removed from the board; never includes the center.
    removed_cells: List[TilePos] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class MegaBombExplosion:
    removed_cells: List[TilePos]
    total_tiles: int


class MegaBombController:
    """Turns large groups into a mega bomb tile and explodes existing ones."""

    def __init__(self, world: World, min_group_size: int) -> None:
        self.world = world
        self.min_group_size = min_group_size

    def can_create_from_size(self, size: int) -> bool:
        return size >= self.min_group_size

    def is_mega_bomb(self, pos: TilePos) -> bool:
        cell = get_board(self.world).get(*pos)
        return cell is not None and cell.is_mega_bomb

    def create_from_group(self, group: Collection[TilePos], center: TilePos) -> MegaBombCreation:
        if not self.can_create_from_size(len(group)) or center not in group:
            return MegaBombCreation(created=False)
        board = get_board(self.world)
        without_center = [pos for pos in group if pos != center]
        remove_group(board, without_center)
        board.set(center[0], center[1], Cell(color=MEGA_BOMB_COLOR, special=TileSpecial.MEGA_BOMB))
        logger.debug("Mega bomb created at %s from group of %d", center, len(group))
        return MegaBombCreation(created=True, center=center, removed_cells=without_center)

    def explode(self, pos: TilePos) -> Optional[MegaBombExplosion]:
        if not self.is_mega_bomb(pos):
            logger.debug("explode: %s is not a mega bomb", pos)
            return None
        removed = clear_all_tiles(get_board(self.world))
        if not removed:
            logger.debug("explode: board already empty")
            return None
        return MegaBombExplosion(removed_cells=removed, total_tiles=len(removed))
