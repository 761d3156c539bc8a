from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from esper import World

from tileblast.components.booster_mode import TeleportMode
from tileblast.components.tile import TilePos
from tileblast.systems.board_ops import get_board, swap_tiles
from tileblast.systems.state_utils import get_teleport_mode

logger = logging.getLogger(__name__)


class TeleportResultKind(Enum):
    SELECT = "select"
    DESELECT = "deselect"
    RESELECT = "reselect"
    SWAP = "swap"


@dataclass(frozen=True, slots=True)
class TeleportClickResult:
    """Outcome of a click in teleport mode.

    ``source`` is the previously selected tile for reselect/swap and None
    otherwise; ``target`` is always the clicked (or deselected) tile.
    """
    kind: TeleportResultKind
    target: TilePos
    source: Optional[TilePos] = None


class TeleportController:
    """Tracks teleport mode and swaps two 4-adjacent tiles on the second click."""

    def __init__(self, world: World) -> None:
        self.world = world

    @property
    def _mode(self) -> TeleportMode:
        return get_teleport_mode(self.world)

    def is_active(self) -> bool:
        return self._mode.active

    @property
    def selected(self) -> Optional[TilePos]:
        return self._mode.selected

    def toggle(self) -> bool:
        mode = self._mode
        mode.active = not mode.active
        mode.selected = None
        logger.debug("Teleport mode = %s", mode.active)
        return mode.active

    def reset_selection(self) -> None:
        self._mode.selected = None

    def reset(self) -> None:
        mode = self._mode
        mode.active = False
        mode.selected = None

    def handle_click(self, pos: TilePos) -> Optional[TeleportClickResult]:
        mode = self._mode
        if not mode.active:
            return None
        first = mode.selected
        if first is None:
            mode.selected = pos
            return TeleportClickResult(kind=TeleportResultKind.SELECT, target=pos)
        if first == pos:
            mode.selected = None
            return TeleportClickResult(kind=TeleportResultKind.DESELECT, target=pos)
        if abs(first[0] - pos[0]) + abs(first[1] - pos[1]) != 1:
            mode.selected = pos
            return TeleportClickResult(kind=TeleportResultKind.RESELECT, target=pos, source=first)
        swap_tiles(get_board(self.world), first, pos)
        mode.selected = None
        mode.active = False
        logger.debug("Teleport swap %s <-> %s", first, pos)
        return TeleportClickResult(kind=TeleportResultKind.SWAP, target=pos, source=first)
