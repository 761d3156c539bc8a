from dataclasses import dataclass
from enum import Enum
from typing import Tuple

from tileblast.constants import MEGA_BOMB_COLOR

TilePos = Tuple[int, int]


class TileSpecial(Enum):
    NONE = "none"
    MEGA_BOMB = "mega_bomb"


@dataclass(frozen=True, slots=True)
class Cell:
    """Contents of one occupied board cell. Empty cells are stored as None."""
    color: str
    special: TileSpecial = TileSpecial.NONE

    def __post_init__(self) -> None:
        # The marker color and the special flag always travel together.
        if self.color == MEGA_BOMB_COLOR:
            object.__setattr__(self, "special", TileSpecial.MEGA_BOMB)
        elif self.special is TileSpecial.MEGA_BOMB:
            object.__setattr__(self, "color", MEGA_BOMB_COLOR)

    @property
    def is_mega_bomb(self) -> bool:
        return self.special is TileSpecial.MEGA_BOMB
