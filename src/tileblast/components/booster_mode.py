from dataclasses import dataclass
from typing import Optional

from tileblast.components.tile import TilePos


@dataclass(slots=True)
class TeleportMode:
    """Teleport booster state: armed flag plus the first selected tile."""
    active: bool = False
    selected: Optional[TilePos] = None


@dataclass(slots=True)
class BombMode:
    """Bomb booster state. One activation arms exactly one explosion."""
    active: bool = False
    radius: int = 1
