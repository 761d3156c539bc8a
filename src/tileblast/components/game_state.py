"""Turn-resolution phase resource stored on the state entity."""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional


class TurnPhase(Enum):
    IDLE = auto()
    ANIMATING = auto()
    GAME_OVER = auto()


@dataclass(slots=True)
class PendingAnimation:
    """Ticket for the one render request the turn pipeline is waiting on."""
    kind: str
    token: int
    update_bombs: bool = False


@dataclass(slots=True)
class GameState:
    phase: TurnPhase = TurnPhase.IDLE
    pending: Optional[PendingAnimation] = None
    next_token: int = 1
    # Set once win/lose has been announced to the view layer.
    outcome_announced: bool = False
    # Waiting for the player to confirm the no-moves dialog.
    awaiting_reshuffle: bool = False
