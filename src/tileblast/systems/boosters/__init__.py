"""Booster input strategies layered over the board: teleport, bomb, mega bomb."""

from tileblast.systems.boosters.bomb import BombController
from tileblast.systems.boosters.mega_bomb import MegaBombController, MegaBombCreation, MegaBombExplosion
from tileblast.systems.boosters.teleport import TeleportClickResult, TeleportController, TeleportResultKind

__all__ = [
    "BombController",
    "MegaBombController",
    "MegaBombCreation",
    "MegaBombExplosion",
    "TeleportClickResult",
    "TeleportController",
    "TeleportResultKind",
]
