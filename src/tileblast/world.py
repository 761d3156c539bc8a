import random

from esper import World

from tileblast.config import GameConfig
from tileblast.components.booster_mode import BombMode, TeleportMode
from tileblast.components.game_state import GameState
from tileblast.events.bus import EventBus


def create_world(
    event_bus: EventBus,
    config: GameConfig | None = None,
    *,
    rng: random.Random | None = None,
) -> World:
    """Build the world resources shared by every system.

    The board and TurnState are attached later by ``TurnSystem`` when a game
    starts; until then the game is not interactive.
    """
    world = World()
    setattr(world, "random", rng or random.Random())
    setattr(world, "config", config or GameConfig())

    world.create_entity(
        GameState(),
        TeleportMode(),
        BombMode(radius=world.config.bomb_radius),
    )
    # Board component is attached on new game / reshuffle.
    setattr(world, "board_entity", world.create_entity())
    return world
