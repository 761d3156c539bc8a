from esper import World

from tileblast.components.booster_mode import BombMode, TeleportMode
from tileblast.components.game_state import GameState
from tileblast.components.turn_state import TurnState


def get_state_entity(world: World) -> int:
    for entity, _ in world.get_component(GameState):
        return entity
    raise RuntimeError("GameState resource not found")


def get_game_state(world: World) -> GameState:
    return world.component_for_entity(get_state_entity(world), GameState)


def get_turn_state(world: World) -> TurnState | None:
    """Return the current TurnState, or None before the first game starts."""
    for _, state in world.get_component(TurnState):
        return state
    return None


def get_teleport_mode(world: World) -> TeleportMode:
    return world.component_for_entity(get_state_entity(world), TeleportMode)


def get_bomb_mode(world: World) -> BombMode:
    return world.component_for_entity(get_state_entity(world), BombMode)
